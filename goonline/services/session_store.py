"""
Authenticated session for one browser session.

State machine: RESOLVING -> AUTHENTICATED | ANONYMOUS. The store resolves once
at start (and again around token refreshes); after that only sign_in/sign_up
and sign_out move it.
"""
from __future__ import annotations
import threading
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from goonline.utils.logging import logger
from goonline.utils.errors import AuthError, DataError, GoOnlineError
from goonline.utils.security import is_strong_password, is_valid_email
from goonline.utils.typing import Profile, Role, Session
from goonline.services.backend import AuthResult

PROFILES = "profiles"

Subscriber = Callable[[Optional[Session]], None]


class SessionState(Enum):
    RESOLVING = "resolving"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class SessionStore:
    """Holds the current Session and notifies subscribers when it changes."""

    def __init__(self, backend, min_password_length: int = 6):
        self.backend = backend
        self.min_password_length = min_password_length
        self._state = SessionState.RESOLVING
        self._session: Optional[Session] = None
        self._subscribers: List[Subscriber] = []
        self._lock = threading.RLock()

    # --- reads -----------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def loading(self) -> bool:
        return self._state is SessionState.RESOLVING

    def current_session(self) -> Optional[Session]:
        return self._session

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback; returns a function that unregisters it."""
        with self._lock:
            self._subscribers.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)
        return _unsubscribe

    # --- lifecycle -------------------------------------------------------

    def resolve(self, access_token: Optional[str] = None, refresh_token: Optional[str] = None) -> Optional[Session]:
        """Resolve the session on start from any tokens the browser kept."""
        with self._lock:
            self._state = SessionState.RESOLVING
        if not access_token:
            self._set(None)
            return None
        user = self.backend.current_user(access_token)
        if user is None:
            if refresh_token:
                return self.refresh(refresh_token)
            self._set(None)
            return None
        result = AuthResult(user=user, access_token=access_token, refresh_token=refresh_token)
        return self._establish(result)

    def refresh(self, refresh_token: Optional[str] = None) -> Optional[Session]:
        """Exchange the refresh token for a new session.

        Returns the new session, or None when the refresh did not succeed. A
        rejected token signs out locally; a service failure keeps the current
        session so the state always settles.
        """
        previous = self._session
        token = refresh_token or (previous.refresh_token if previous else None)
        with self._lock:
            self._state = SessionState.RESOLVING
        if not token:
            self._set(None)
            return None
        try:
            return self._establish(self.backend.refresh(token))
        except AuthError as e:
            logger.info("session: refresh rejected, signing out locally: %s", e)
            self._set(None)
        except GoOnlineError as e:
            logger.warning("session: refresh failed, keeping current session: %s", e)
            self._set(previous)
        return None

    def sign_up(self, email: str, password: str, display_name: str, role: Any = Role.OWNER) -> Session:
        email = (email or "").strip()
        display_name = (display_name or "").strip()
        if not is_valid_email(email):
            raise AuthError("Enter a valid email address")
        if not is_strong_password(password, self.min_password_length):
            raise AuthError(f"Password must be at least {self.min_password_length} characters")
        if not display_name:
            raise AuthError("Full name is required")
        try:
            role = Role(role)
        except ValueError:
            raise AuthError(f"Unknown account type: {role}") from None

        result = self.backend.create_account(
            email, password, {"full_name": display_name, "role": role.value}
        )
        if not result.access_token:
            raise AuthError("Account created. Confirm your email address, then sign in.")

        self.backend.set_access_token(result.access_token)
        try:
            self.backend.insert(PROFILES, {
                "id": result.user_id,
                "email": email,
                "full_name": display_name,
                "role": role.value,
            })
        except GoOnlineError as e:
            self.backend.set_access_token(None)
            logger.error("session: profile creation failed for new account: %s", e)
            raise AuthError(f"Could not create your profile: {e}") from e

        session = Session(
            identity=result.user_id,
            email=email,
            profile=Profile(display_name=display_name, role=role),
            access_token=result.access_token,
            refresh_token=result.refresh_token or "",
        )
        logger.info("session: signed up %s as %s", result.user_id, role.value)
        self._set(session)
        return session

    def sign_in(self, email: str, password: str) -> Session:
        email = (email or "").strip()
        if not email or not password:
            raise AuthError("Email and password are required")
        result = self.backend.authenticate(email, password)
        session = self._establish(result)
        logger.info("session: signed in %s", session.identity)
        return session

    def sign_out(self) -> None:
        session = self._session
        self.backend.set_access_token(None)
        self._set(None)
        if session and session.access_token:
            try:
                self.backend.invalidate(session.access_token)
            except GoOnlineError as e:
                logger.warning("session: remote sign-out failed (local session cleared): %s", e)
        logger.info("session: signed out")

    # --- internals -------------------------------------------------------

    def _establish(self, result: AuthResult) -> Session:
        if not result.access_token:
            raise AuthError("The auth service did not return a session")
        self.backend.set_access_token(result.access_token)
        session = Session(
            identity=result.user_id,
            email=result.email,
            profile=self._load_profile(result),
            access_token=result.access_token,
            refresh_token=result.refresh_token or "",
        )
        self._set(session)
        return session

    def _load_profile(self, result: AuthResult) -> Optional[Profile]:
        try:
            rows = self.backend.query(PROFILES, {"id": result.user_id})
        except GoOnlineError as e:
            logger.warning("session: profile lookup failed, using account metadata: %s", e)
            rows = []
        source: Dict[str, Any] = rows[0] if rows else result.metadata
        if not source:
            return None
        try:
            return Profile.from_row(source)
        except DataError as e:
            logger.warning("session: ignoring malformed profile for %s: %s", result.user_id, e)
            return None

    def _set(self, session: Optional[Session]) -> None:
        with self._lock:
            self._session = session
            self._state = SessionState.AUTHENTICATED if session else SessionState.ANONYMOUS
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(session)
            except Exception as e:
                logger.error("session: subscriber %r failed: %s", callback, e, exc_info=True)
