import streamlit as st
from goonline.app import state
from goonline.components import stats_panel, status
from goonline.utils.errors import ui_error_boundary

@ui_error_boundary
def render() -> None:
    st.header("📊 Analytics Dashboard")

    controller = state.get_controller("analytics")
    col1, col2 = st.columns([4, 1])
    with col2:
        if st.button("🔄 Refresh", use_container_width=True, key="analytics_refresh"):
            controller.load()
    with st.spinner("Loading analytics..."):
        view_state = controller.ensure_loaded()
    if not status.render(view_state):
        return

    stats = controller.stats
    stats_panel.render_metrics(stats)
    st.markdown("---")
    stats_panel.render_category_charts(stats)
    st.markdown("---")
    stats_panel.render_overview(stats)
