from __future__ import annotations
import threading
from typing import Any, Callable, Generic, Optional, TypeVar

from goonline.utils.logging import logger
from goonline.utils.errors import AuthzError, GoOnlineError, user_message
from goonline.utils.typing import LoadStatus, Session, ViewState

T = TypeVar("T")

SessionAccessor = Callable[[], Optional[Session]]
# renews the session after an expired token; True when a new one is in place
Reauthenticator = Callable[[], bool]


class ViewController(Generic[T]):
    """Fetch lifecycle shared by every page.

    Each load takes a ticket from a monotonically increasing counter. A result
    is applied only while its ticket is still the latest one issued, so a slow
    response from a superseded load can never overwrite a newer one.
    """

    name = "view"

    def __init__(self, session: SessionAccessor):
        self._session = session
        self._state: ViewState[T] = ViewState.idle()
        self._seq = 0
        self._lock = threading.Lock()
        self._loaded_key: Any = None
        self._stale = False
        self.reauthenticate: Optional[Reauthenticator] = None

    @property
    def state(self) -> ViewState[T]:
        return self._state

    @property
    def session(self) -> Optional[Session]:
        return self._session()

    def load_key(self) -> Any:
        """Input the loaded snapshot depends on; a change triggers a reload."""
        return None

    def fetch(self) -> T:
        raise NotImplementedError

    # --- ticketed lifecycle --------------------------------------------

    def begin_load(self) -> int:
        with self._lock:
            self._seq += 1
            ticket = self._seq
            self._loaded_key = self.load_key()
            self._stale = False
            self._state = ViewState.loading(self._state.data)
        logger.debug("%s: load #%d started", self.name, ticket)
        return ticket

    def complete_load(self, ticket: int, data: T) -> bool:
        with self._lock:
            if ticket != self._seq:
                logger.debug("%s: discarding stale load #%d (latest #%d)", self.name, ticket, self._seq)
                return False
            self._state = ViewState.success(data)
        return True

    def fail_load(self, ticket: int, error: Exception) -> bool:
        with self._lock:
            if ticket != self._seq:
                logger.debug("%s: discarding stale failure #%d", self.name, ticket)
                return False
            self._state = ViewState.failure(user_message(error))
        logger.warning("%s: load #%d failed: %s", self.name, ticket, error)
        return True

    # --- entry points ----------------------------------------------------

    def load(self) -> ViewState[T]:
        ticket = self.begin_load()
        try:
            data = self._fetch_with_reauth()
        except GoOnlineError as e:
            self.fail_load(ticket, e)
        else:
            self.complete_load(ticket, data)
        return self._state

    def _fetch_with_reauth(self) -> T:
        try:
            return self.fetch()
        except AuthzError as e:
            if self.reauthenticate is None or self.session is None:
                raise
            logger.info("%s: %s, refreshing the session", self.name, e)
            if not self.reauthenticate():
                raise
        return self.fetch()

    def ensure_loaded(self) -> ViewState[T]:
        """Load on first mount, after mark_stale(), or when the load key changed."""
        if self._stale or self._state.status is LoadStatus.IDLE or self.load_key() != self._loaded_key:
            return self.load()
        return self._state

    def mark_stale(self) -> None:
        """Reload on the next ensure_loaded() while keeping the current data on screen."""
        with self._lock:
            self._stale = True

    def invalidate(self) -> None:
        with self._lock:
            self._seq += 1
            self._state = ViewState.idle()
            self._loaded_key = None

    def _replace_data(self, data: T) -> None:
        with self._lock:
            self._state = ViewState.success(data)
