import html
import streamlit as st
from goonline.app import routing, state
from goonline.utils.typing import Session

def identity_badge(session: Session) -> str:
    return (
        f"{html.escape(session.display_name)}"
        f'<span class="go-role">{html.escape(session.role.value)}</span>'
    )

def render() -> None:
    st.markdown(
        """
        <style>
        .go-header{display:flex;justify-content:space-between;align-items:center;padding:8px 0 12px;border-bottom:1px solid #e5e7eb;margin-bottom:16px}
        .go-brand{font-size:1.6rem;font-weight:700;color:#2563eb}
        .go-role{font-size:.75rem;background:#dbeafe;color:#1e40af;padding:2px 8px;border-radius:999px;margin-left:8px}
        </style>
        """,
        unsafe_allow_html=True,
    )
    session = state.current_session()
    left, right = st.columns([4, 2])
    with left:
        st.markdown('<div class="go-header"><span class="go-brand">GoOnline</span></div>', unsafe_allow_html=True)
    with right:
        if session is None:
            return
        st.markdown(identity_badge(session), unsafe_allow_html=True)
        if st.button("Sign Out", key="header_sign_out"):
            state.get_session_store().sign_out()
            routing.set_view(routing.SIGN_IN)
            st.rerun()
