"""
HTTP client for the hosted data/auth service (Supabase REST: GoTrue auth and
PostgREST tables). Every failure is mapped onto the GoOnline error taxonomy
so callers never see requests exceptions or raw status codes.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import requests

from goonline.utils.logging import logger
from goonline.utils.errors import (
    AuthError, AuthzError, ConfigError, DataError, NotFoundError, ValidationError,
)

# PostgREST / Postgres error codes that mean "the row you sent is wrong"
_VALIDATION_CODES = {"23502", "23514", "22P02", "23505", "PGRST204"}
_AUTHZ_CODES = {"42501", "PGRST301", "PGRST302"}


@dataclass
class AuthResult:
    user: Dict[str, Any]
    access_token: Optional[str] = field(default=None, repr=False)
    refresh_token: Optional[str] = field(default=None, repr=False)

    @property
    def user_id(self) -> str:
        return str(self.user.get("id") or "")

    @property
    def email(self) -> str:
        return str(self.user.get("email") or "")

    @property
    def metadata(self) -> Dict[str, Any]:
        return self.user.get("user_metadata") or {}


def _error_text(body: Any, default: str) -> str:
    if isinstance(body, dict):
        for key in ("msg", "error_description", "message", "error"):
            value = body.get(key)
            if value:
                return str(value)
    return default


def _encode_value(value: Any) -> str:
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"is.{str(value).lower()}"
    if hasattr(value, "value"):  # str enums
        value = value.value
    return f"eq.{value}"


class SupabaseClient:
    """Thin typed wrapper over the hosted auth and table endpoints.

    One instance belongs to one browser session: it carries that user's
    access token for row-level-security scoped requests.
    """

    def __init__(
        self,
        url: Optional[str],
        anon_key: Optional[str],
        timeout: float = 15.0,
        http: Optional[requests.Session] = None,
    ):
        if not url or not anon_key:
            raise ConfigError("SUPABASE_URL and SUPABASE_ANON_KEY must be configured")
        self.base_url = url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self.session = http or requests.Session()
        self._access_token: Optional[str] = None

    @classmethod
    def from_config(cls, config) -> "SupabaseClient":
        return cls(config.supabase_url, config.supabase_anon_key, timeout=config.request_timeout)

    def set_access_token(self, token: Optional[str]) -> None:
        self._access_token = token or None

    # --- transport -------------------------------------------------------

    def _headers(self, bearer: Optional[str] = None, prefer: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {bearer or self._access_token or self.anon_key}",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, str]] = None,
        json: Any = None,
        bearer: Optional[str] = None,
        prefer: Optional[str] = None,
        auth_endpoint: bool = False,
    ) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("backend: %s %s params=%s", method, path, params)
        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json,
                headers=self._headers(bearer=bearer, prefer=prefer),
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.error("backend timeout: %s %s", method, path)
            err = AuthError if auth_endpoint else DataError
            raise err(f"Request timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            logger.error("backend request failed: %s %s: %s", method, path, e)
            err = AuthError if auth_endpoint else DataError
            raise err(f"Could not reach the data service: {e}") from e

        body: Any = None
        if response.content:
            try:
                body = response.json()
            except ValueError as e:
                if response.status_code < 400:
                    err = AuthError if auth_endpoint else DataError
                    raise err("Data service returned an unreadable response") from e

        if response.status_code >= 400:
            self._raise_for(response.status_code, body, auth_endpoint)
        return body

    def _raise_for(self, status: int, body: Any, auth_endpoint: bool) -> None:
        message = _error_text(body, f"Data service error (HTTP {status})")
        code = str(body.get("code") or "") if isinstance(body, dict) else ""
        logger.warning("backend: HTTP %s code=%s: %s", status, code or "-", message)

        if auth_endpoint:
            raise AuthError(message)
        if status in (401, 403) or code in _AUTHZ_CODES:
            raise AuthzError(message)
        if code == "PGRST116":
            raise NotFoundError(message)
        if code in _VALIDATION_CODES or status == 422:
            raise ValidationError(message)
        raise DataError(message)

    # --- auth ------------------------------------------------------------

    def _auth_result(self, body: Any) -> AuthResult:
        if not isinstance(body, dict):
            raise AuthError("Unexpected response from the auth service")
        # a session payload nests the user; a bare signup payload is the user
        user = body.get("user") if "access_token" in body else body
        if not isinstance(user, dict) or not user.get("id"):
            raise AuthError("Unexpected response from the auth service")
        return AuthResult(
            user=user,
            access_token=body.get("access_token"),
            refresh_token=body.get("refresh_token"),
        )

    def create_account(self, email: str, password: str, profile_fields: Dict[str, Any]) -> AuthResult:
        body = self._request(
            "POST", "auth/v1/signup",
            json={"email": email, "password": password, "data": profile_fields},
            auth_endpoint=True,
        )
        return self._auth_result(body)

    def authenticate(self, email: str, password: str) -> AuthResult:
        body = self._request(
            "POST", "auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
            auth_endpoint=True,
        )
        return self._auth_result(body)

    def refresh(self, refresh_token: str) -> AuthResult:
        body = self._request(
            "POST", "auth/v1/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
            auth_endpoint=True,
        )
        return self._auth_result(body)

    def invalidate(self, access_token: str) -> None:
        self._request("POST", "auth/v1/logout", bearer=access_token, auth_endpoint=True)

    def current_user(self, access_token: str) -> Optional[Dict[str, Any]]:
        try:
            body = self._request("GET", "auth/v1/user", bearer=access_token, auth_endpoint=True)
        except AuthError:
            return None
        return body if isinstance(body, dict) and body.get("id") else None

    # --- tables ----------------------------------------------------------

    def query(
        self,
        collection: str,
        predicate: Optional[Dict[str, Any]] = None,
        order: Optional[Tuple[str, bool]] = None,
        select: str = "*",
    ) -> List[Dict[str, Any]]:
        params = {"select": select}
        for column, value in (predicate or {}).items():
            params[column] = _encode_value(value)
        if order:
            column, descending = order
            params["order"] = f"{column}.{'desc' if descending else 'asc'}"
        body = self._request("GET", f"rest/v1/{collection}", params=params)
        if body is None:
            return []
        if not isinstance(body, list):
            raise DataError(f"Expected a list of {collection} rows")
        return body

    def insert(self, collection: str, row: Dict[str, Any]) -> Dict[str, Any]:
        body = self._request("POST", f"rest/v1/{collection}", json=row, prefer="return=representation")
        if not isinstance(body, list) or not body:
            raise DataError(f"Insert into {collection} returned no row")
        return body[0]

    def update(self, collection: str, record_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        body = self._request(
            "PATCH", f"rest/v1/{collection}",
            params={"id": _encode_value(record_id)},
            json=patch,
            prefer="return=representation",
        )
        if not body:
            self._raise_missing_or_forbidden(collection, record_id, "change")
        return body[0]

    def remove(self, collection: str, record_id: str) -> None:
        body = self._request(
            "DELETE", f"rest/v1/{collection}",
            params={"id": _encode_value(record_id)},
            prefer="return=representation",
        )
        if not body:
            self._raise_missing_or_forbidden(collection, record_id, "delete")

    def _raise_missing_or_forbidden(self, collection: str, record_id: str, action: str) -> None:
        # RLS filters forbidden rows out of a write, so an empty result is
        # ambiguous until the row is looked up again
        try:
            still_there = self.query(collection, {"id": record_id}, select="id")
        except NotFoundError:
            still_there = []
        if still_there:
            raise AuthzError(f"You are not allowed to {action} this {collection} record")
        raise NotFoundError(f"No {collection} record with id {record_id}")
