import streamlit as st
from goonline.utils.typing import LoadStatus, ViewState

def render(view_state: ViewState) -> bool:
    """Render loading/error in place of data. True when data can be drawn."""
    if view_state.status is LoadStatus.ERROR:
        st.error(view_state.error or "Could not load data.")
        return False
    if view_state.status is not LoadStatus.SUCCESS:
        st.info("⏳ Loading...")
        return False
    return True
