import streamlit as st
from goonline.app import state
from goonline.components import listing_card, status
from goonline.controllers.analytics import display_label
from goonline.utils.errors import ui_error_boundary

ALL_CATEGORIES = "All Categories"
COLUMNS = 3

@ui_error_boundary
def render() -> None:
    controller = state.get_controller("marketplace")
    col1, col2 = st.columns([4, 1])
    with col1:
        st.header("Marketplace")
        st.caption("Discover local businesses going digital")
    with col2:
        if st.button("🔄 Refresh", use_container_width=True, key="marketplace_refresh"):
            controller.load()
    with st.spinner("Loading businesses..."):
        view_state = controller.ensure_loaded()
    if not status.render(view_state):
        return

    col1, col2 = st.columns(2)
    with col1:
        term = st.text_input("🔍 Search", value=controller.search_term,
                             placeholder="Search businesses...", key="marketplace_search")
        controller.set_search(term)
    with col2:
        options = [ALL_CATEGORIES] + controller.categories
        current = controller.selected_category
        index = options.index(current) if current in options else 0
        choice = st.selectbox("Category", options, index=index, key="marketplace_category",
                              format_func=lambda c: c if c == ALL_CATEGORIES else display_label(c))
        controller.select_category(None if choice == ALL_CATEGORIES else choice)

    visible = controller.visible
    if not visible:
        st.info("No businesses found. " + (
            "Try adjusting your search filters."
            if controller.filters_active else "Be the first to register a business!"
        ))
    else:
        for start in range(0, len(visible), COLUMNS):
            cols = st.columns(COLUMNS)
            for col, listing in zip(cols, visible[start:start + COLUMNS]):
                with col:
                    listing_card.render_public(listing)

    st.caption(f"Showing {len(visible)} of {len(controller.listings)} businesses")
