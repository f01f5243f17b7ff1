from enum import Enum
import streamlit as st

from goonline.app import routing
from goonline.services.session_store import SessionStore
from goonline.utils.typing import Session


class GateDecision(Enum):
    ALLOW = "allow"
    WAIT = "wait"
    REDIRECT = "redirect"


def evaluate(store: SessionStore) -> GateDecision:
    if store.loading:
        return GateDecision.WAIT
    if store.current_session() is None:
        return GateDecision.REDIRECT
    return GateDecision.ALLOW


def require_session(store: SessionStore) -> Session:
    """Return the session for a protected view, or stop this run."""
    decision = evaluate(store)
    if decision is GateDecision.WAIT:
        st.info("⏳ Checking your session...")
        st.stop()
    if decision is GateDecision.REDIRECT:
        routing.set_view(routing.SIGN_IN)
        st.rerun()
    return store.current_session()
