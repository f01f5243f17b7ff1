from typing import Dict, Optional
import streamlit as st

from goonline.utils.logging import logger
from goonline.utils.typing import Session
from goonline.app import routing
from goonline.services.backend import SupabaseClient
from goonline.services.config import AppConfig
from goonline.services.gateway import RecordGateway
from goonline.services.session_store import SessionStore
from goonline.controllers.base import Reauthenticator, SessionAccessor, ViewController
from goonline.controllers.marketplace import MarketplaceController
from goonline.controllers.dashboard import DashboardController
from goonline.controllers.analytics import AnalyticsController
from goonline.controllers.business_form import BusinessFormController


# controller each routed page loads on entry
ENTRY_CONTROLLERS = {
    routing.MARKETPLACE: "marketplace",
    routing.DASHBOARD: "dashboard",
    routing.ANALYTICS: "analytics",
}


def build_controllers(
    gateway: RecordGateway,
    session: SessionAccessor,
    reauthenticate: Optional[Reauthenticator] = None,
) -> Dict[str, ViewController]:
    marketplace = MarketplaceController(gateway, session)
    analytics = AnalyticsController(gateway, session)

    def _on_deleted(_listing_id) -> None:
        for controller in (marketplace, analytics):
            controller.invalidate()

    dashboard = DashboardController(gateway, session, on_deleted=_on_deleted)

    def _on_saved(_listing) -> None:
        for controller in (marketplace, dashboard, analytics):
            controller.invalidate()

    form = BusinessFormController(gateway, session, on_saved=_on_saved)
    controllers = {
        "marketplace": marketplace,
        "dashboard": dashboard,
        "analytics": analytics,
        "business_form": form,
    }
    for controller in controllers.values():
        controller.reauthenticate = reauthenticate
    return controllers


def remount(controllers: Dict[str, ViewController], view: str) -> None:
    """A page (re)mount: its controller fetches again on the next render."""
    name = ENTRY_CONTROLLERS.get(view)
    if name is not None:
        controllers[name].mark_stale()


def initialize(config: AppConfig) -> None:
    if st.session_state.get("_initialized"):
        return
    logger.info("Initializing session state")

    st.session_state.setdefault("current_view", routing.MARKETPLACE)
    st.session_state.setdefault("view_params", {})

    backend = SupabaseClient.from_config(config)
    store = SessionStore(backend, min_password_length=config.min_password_length)
    controllers = build_controllers(
        RecordGateway(backend),
        store.current_session,
        reauthenticate=lambda: store.refresh() is not None,
    )

    def _on_session_change(session: Optional[Session]) -> None:
        if session is None:
            # nothing fetched for the previous user may survive sign-out
            for controller in controllers.values():
                controller.invalidate()

    store.subscribe(_on_session_change)
    st.session_state["session_store"] = store
    st.session_state["controllers"] = controllers

    store.resolve()
    st.session_state["_initialized"] = True


def get_session_store() -> SessionStore:
    return st.session_state["session_store"]


def get_controller(name: str) -> ViewController:
    return st.session_state["controllers"][name]


def current_session() -> Optional[Session]:
    return get_session_store().current_session()


def on_view_rendered(view: str) -> None:
    if routing.enter_view(view):
        remount(st.session_state["controllers"], view)
