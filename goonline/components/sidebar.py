import streamlit as st
from goonline.app import routing

def render() -> None:
    with st.sidebar:
        st.header("Navigation")
        current = routing.get_current_view()
        # the form is reached from My Businesses, so it highlights that entry
        highlighted = routing.DASHBOARD if current == routing.BUSINESS_FORM else current
        index = routing.NAV_VIEWS.index(highlighted) if highlighted in routing.NAV_VIEWS else 0
        sel = st.radio("View", routing.NAV_VIEWS, index=index)
        if sel != highlighted:
            routing.set_view(sel)
            st.rerun()

        st.divider()
        if st.button("➕ Add New Business", use_container_width=True):
            routing.set_view(routing.BUSINESS_FORM)
            st.rerun()
