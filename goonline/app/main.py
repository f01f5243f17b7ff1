"""
GoOnline business directory - Streamlit entry point.

    streamlit run goonline/app/main.py
"""
import os, sys
import streamlit as st

# Ensure package imports resolve when running via 'streamlit run goonline/app/main.py'
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from goonline.utils import errors, logging as app_logging  # noqa: E402
from goonline.services.config import get_config_manager  # noqa: E402
from goonline.app import access_gate, routing, state  # noqa: E402
from goonline.components import header, sidebar  # noqa: E402
from goonline.views import analytics, business_form, dashboard, marketplace, sign_in, sign_up  # noqa: E402

PROTECTED = {
    routing.MARKETPLACE: marketplace.render,
    routing.DASHBOARD: dashboard.render,
    routing.ANALYTICS: analytics.render,
    routing.BUSINESS_FORM: business_form.render,
}

PUBLIC = {
    routing.SIGN_IN: sign_in.render,
    routing.SIGN_UP: sign_up.render,
}

def configure_page() -> None:
    st.set_page_config(
        page_title="GoOnline",
        page_icon="🏪",
        layout="wide",
        initial_sidebar_state="expanded",
    )

@errors.ui_error_boundary
def main() -> None:
    config = get_config_manager().load_config()
    app_logging.init(config)
    configure_page()
    try:
        state.initialize(config)
    except errors.ConfigError as e:
        errors.handle_fatal(e)

    store = state.get_session_store()
    view = routing.get_current_view()

    if view in PUBLIC:
        if store.current_session() is not None:
            routing.set_view(routing.MARKETPLACE)
            st.rerun()
        state.on_view_rendered(view)
        PUBLIC[view]()
        return

    access_gate.require_session(store)
    state.on_view_rendered(view)
    header.render()
    sidebar.render()
    PROTECTED.get(view, marketplace.render)()
    if store.current_session() is None:
        # a rejected token refresh signed the user out mid-render
        st.rerun()

if __name__ == "__main__":
    main()
