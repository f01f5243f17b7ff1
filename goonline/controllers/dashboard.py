from __future__ import annotations
from typing import Callable, List, Optional, Sequence

from goonline.controllers.base import SessionAccessor, ViewController
from goonline.services.gateway import RecordGateway
from goonline.utils.logging import logger
from goonline.utils.errors import AuthzError, GoOnlineError, NotFoundError
from goonline.utils.typing import BusinessListing, ViewState


class DashboardController(ViewController[List[BusinessListing]]):
    """The signed-in owner's own listings, with confirmed delete."""

    name = "dashboard"

    def __init__(
        self,
        gateway: RecordGateway,
        session: SessionAccessor,
        on_deleted: Optional[Callable[[str], None]] = None,
    ):
        super().__init__(session)
        self.gateway = gateway
        self.on_deleted = on_deleted
        self.pending_delete: Optional[str] = None
        self.delete_error: Optional[GoOnlineError] = None

    def load_key(self):
        session = self.session
        return session.identity if session else None

    def fetch(self) -> List[BusinessListing]:
        session = self.session
        if session is None:
            raise AuthzError("Sign in to see your businesses")
        return self.gateway.get_by_owner(session.identity)

    @property
    def listings(self) -> Sequence[BusinessListing]:
        return self.state.data or []

    def find(self, listing_id: str) -> Optional[BusinessListing]:
        return next((b for b in self.listings if b.id == listing_id), None)

    # --- delete flow -----------------------------------------------------

    def request_delete(self, listing_id: str) -> None:
        self.pending_delete = listing_id
        self.delete_error = None

    def cancel_delete(self) -> None:
        self.pending_delete = None

    def confirm_delete(self) -> bool:
        """Run the delete the user just confirmed. Failures land in delete_error."""
        listing_id, self.pending_delete = self.pending_delete, None
        if listing_id is None:
            return False
        try:
            self._delete(listing_id)
        except GoOnlineError as e:
            logger.warning("dashboard: delete of %s failed: %s", listing_id, e)
            self.delete_error = e
            return False
        return True

    def acknowledge_error(self) -> None:
        self.delete_error = None

    def _delete(self, listing_id: str) -> None:
        if self.find(listing_id) is None:
            raise NotFoundError(f"Business {listing_id} is not in your list")
        try:
            self.gateway.delete(listing_id)
        except NotFoundError:
            # the service confirmed the row is gone
            logger.info("dashboard: %s was already deleted", listing_id)
        with self._lock:
            # loads started before the delete are stale
            self._seq += 1
            remaining = [b for b in (self._state.data or []) if b.id != listing_id]
            self._state = ViewState.success(remaining)
        if self.on_deleted is not None:
            self.on_deleted(listing_id)
