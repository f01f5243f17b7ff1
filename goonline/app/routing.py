from typing import Any, Optional
import streamlit as st

MARKETPLACE = "Marketplace"
DASHBOARD = "My Businesses"
ANALYTICS = "Analytics"
BUSINESS_FORM = "Business Form"
SIGN_IN = "Sign In"
SIGN_UP = "Sign Up"

NAV_VIEWS = [MARKETPLACE, DASHBOARD, ANALYTICS]
PUBLIC_VIEWS = [SIGN_IN, SIGN_UP]

def get_current_view() -> str:
    return st.session_state.get("current_view", MARKETPLACE)

def set_view(view_name: str, **params: Any) -> None:
    st.session_state["current_view"] = view_name
    st.session_state["view_params"] = params

def get_view_param(key: str, default: Optional[Any] = None) -> Any:
    return st.session_state.get("view_params", {}).get(key, default)

def is_public(view_name: str) -> bool:
    return view_name in PUBLIC_VIEWS

def enter_view(view_name: str) -> bool:
    """Record the rendered view; True when it differs from the last one rendered."""
    entered = st.session_state.get("rendered_view") != view_name
    st.session_state["rendered_view"] = view_name
    return entered
