import streamlit as st
from goonline.app import routing, state
from goonline.components import listing_card, status
from goonline.utils.errors import ui_error_boundary, user_message

COLUMNS = 3

@ui_error_boundary
def render() -> None:
    col1, col2 = st.columns([3, 1])
    with col1:
        st.header("My Businesses")
    with col2:
        if st.button("➕ Add New Business", type="primary", use_container_width=True, key="dashboard_add"):
            routing.set_view(routing.BUSINESS_FORM)
            st.rerun()

    controller = state.get_controller("dashboard")
    with st.spinner("Loading your businesses..."):
        view_state = controller.ensure_loaded()

    _render_delete_feedback(controller)
    if not status.render(view_state):
        return

    listings = controller.listings
    if not listings:
        st.info("No businesses yet. Get started by registering your first business.")
        if st.button("Register Your Business", key="dashboard_register"):
            routing.set_view(routing.BUSINESS_FORM)
            st.rerun()
        return

    for start in range(0, len(listings), COLUMNS):
        cols = st.columns(COLUMNS)
        for col, listing in zip(cols, listings[start:start + COLUMNS]):
            with col:
                action = listing_card.render_owned(listing, key_prefix="dashboard")
            if action == "edit":
                routing.set_view(routing.BUSINESS_FORM, listing_id=listing.id)
                st.rerun()
            elif action == "delete":
                controller.request_delete(listing.id)
                st.rerun()


def _render_delete_feedback(controller) -> None:
    """Confirmation prompt for a requested delete, or the blocking failure notice."""
    if controller.delete_error is not None:
        st.error(f"Failed to delete business: {user_message(controller.delete_error)}")
        if st.button("OK", key="dashboard_ack_error"):
            controller.acknowledge_error()
            st.rerun()
        return

    if controller.pending_delete is None:
        return
    listing = controller.find(controller.pending_delete)
    name = listing.name if listing else controller.pending_delete
    st.warning(f"⚠️ Are you sure you want to delete **{name}**? This cannot be undone.")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("⚠️ Confirm Delete", type="primary", key="dashboard_confirm_delete"):
            if controller.confirm_delete():
                st.success("Business deleted.")
            st.rerun()
    with col2:
        if st.button("❌ Cancel", key="dashboard_cancel_delete"):
            controller.cancel_delete()
            st.rerun()
