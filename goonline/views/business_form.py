import streamlit as st
from goonline.app import routing, state
from goonline.components import status
from goonline.utils.errors import ui_error_boundary
from goonline.utils.typing import BusinessForm

@ui_error_boundary
def render() -> None:
    controller = state.get_controller("business_form")
    listing_id = routing.get_view_param("listing_id")

    if listing_id != controller.editing_id or controller.state.data is None:
        if listing_id:
            controller.start_edit(listing_id)
        else:
            controller.start_create()

    st.header("Edit Business" if controller.is_edit else "Register Your Business")
    if not status.render(controller.state):
        if st.button("← Back to My Businesses", key="form_back_error"):
            routing.set_view(routing.DASHBOARD)
            st.rerun()
        return

    current: BusinessForm = controller.state.data
    form_key = f"business_form_{controller.editing_id or 'new'}"
    with st.form(key=form_key):
        name = st.text_input("Business Name *", value=current.name)
        category = st.text_input("Category *", value=current.category,
                                 placeholder="e.g. food, retail, services")
        description = st.text_area("Description", value=current.description, height=120)
        location = st.text_input("Location", value=current.location)
        logo_url = st.text_input("Logo URL", value=current.logo_url, placeholder="https://...")
        col1, col2 = st.columns(2)
        with col1:
            contact_email = st.text_input("Contact Email", value=current.contact_email)
        with col2:
            contact_phone = st.text_input("Contact Phone", value=current.contact_phone)

        col1, col2 = st.columns(2)
        with col1:
            submit = st.form_submit_button(
                "Update Business" if controller.is_edit else "Create Business",
                type="primary", use_container_width=True,
            )
        with col2:
            cancel = st.form_submit_button("Cancel", use_container_width=True)

    if cancel:
        controller.invalidate()
        routing.set_view(routing.DASHBOARD)
        st.rerun()

    if submit:
        saved = controller.submit(BusinessForm(
            name=name,
            category=category,
            description=description,
            location=location,
            logo_url=logo_url,
            contact_email=contact_email,
            contact_phone=contact_phone,
        ))
        if saved is not None:
            controller.invalidate()
            routing.set_view(routing.DASHBOARD)
            st.rerun()

    if controller.submit_error:
        st.error(controller.submit_error)
