import json

import pytest
import requests

from goonline.controllers.dashboard import DashboardController
from goonline.services.backend import SupabaseClient
from goonline.services.gateway import RecordGateway
from goonline.services.session_store import SessionState, SessionStore
from goonline.utils.errors import (
    AuthError, AuthzError, ConfigError, DataError, NotFoundError, ValidationError,
)
from goonline.utils.typing import Session

class Dummy:
    def __init__(self, status=200, body=None):
        self.status_code = status
        self.content = b"" if body is None else json.dumps(body).encode()
    def json(self):
        return json.loads(self.content)

class FakeHttp:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []
    def request(self, **kwargs):
        self.calls.append(kwargs)
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

def client(*responses):
    http = FakeHttp(*responses)
    return SupabaseClient("https://db.example.co/", "anon", timeout=3, http=http), http

def test_missing_config_raises():
    with pytest.raises(ConfigError):
        SupabaseClient("", "anon")

def test_query_builds_postgrest_params():
    c, http = client(Dummy(200, [{"id": "1"}]))
    rows = c.query("businesses", {"status": "active", "owner_id": None}, ("created_at", True),
                   select="*, profiles(full_name)")
    assert rows == [{"id": "1"}]
    call = http.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "https://db.example.co/rest/v1/businesses"
    assert call["params"] == {
        "select": "*, profiles(full_name)",
        "status": "eq.active",
        "owner_id": "is.null",
        "order": "created_at.desc",
    }
    assert call["headers"]["Authorization"] == "Bearer anon"
    assert call["timeout"] == 3

def test_access_token_is_used_for_table_requests():
    c, http = client(Dummy(200, []))
    c.set_access_token("user-jwt")
    c.query("businesses")
    assert http.calls[0]["headers"]["Authorization"] == "Bearer user-jwt"
    assert http.calls[0]["headers"]["apikey"] == "anon"

@pytest.mark.parametrize("status,body,exc", [
    (401, {"message": "JWT expired"}, AuthzError),
    (403, {"code": "42501", "message": "permission denied"}, AuthzError),
    (400, {"code": "23502", "message": "null value in column name"}, ValidationError),
    (406, {"code": "PGRST116", "message": "no rows"}, NotFoundError),
    (500, {"message": "boom"}, DataError),
])
def test_status_mapping(status, body, exc):
    c, _ = client(Dummy(status, body))
    with pytest.raises(exc):
        c.query("businesses")

def test_transport_failure_is_data_error():
    c, _ = client(requests.exceptions.ConnectionError("refused"))
    with pytest.raises(DataError):
        c.query("businesses")

def test_update_and_remove_of_missing_row_are_not_found():
    c, http = client(Dummy(200, []), Dummy(200, []), Dummy(200, []), Dummy(200, []))
    with pytest.raises(NotFoundError):
        c.update("businesses", "42", {"name": "x"})
    with pytest.raises(NotFoundError):
        c.remove("businesses", "42")
    assert http.calls[0]["params"] == {"id": "eq.42"}
    assert http.calls[0]["headers"]["Prefer"] == "return=representation"
    # each empty write is checked by looking the row up again
    assert [call["method"] for call in http.calls] == ["PATCH", "GET", "DELETE", "GET"]
    assert http.calls[3]["params"] == {"select": "id", "id": "eq.42"}

def test_delete_hidden_by_row_security_is_authz_error():
    c, http = client(Dummy(200, []), Dummy(200, [{"id": "42"}]))
    with pytest.raises(AuthzError):
        c.remove("businesses", "42")
    assert http.calls[1]["method"] == "GET"

def test_update_hidden_by_row_security_is_authz_error():
    c, _ = client(Dummy(200, []), Dummy(200, [{"id": "42"}]))
    with pytest.raises(AuthzError):
        c.update("businesses", "42", {"name": "x"})

def test_insert_returns_created_row():
    c, http = client(Dummy(201, [{"id": "9", "name": "Shop"}]))
    assert c.insert("businesses", {"name": "Shop"}) == {"id": "9", "name": "Shop"}
    assert http.calls[0]["method"] == "POST"

def test_authenticate_returns_session_tokens():
    body = {"access_token": "a", "refresh_token": "r", "user": {"id": "u1", "email": "a@b.com"}}
    c, http = client(Dummy(200, body))
    result = c.authenticate("a@b.com", "secret")
    assert (result.user_id, result.email, result.access_token, result.refresh_token) == ("u1", "a@b.com", "a", "r")
    assert http.calls[0]["params"] == {"grant_type": "password"}

def test_signup_without_confirmation_has_no_token():
    c, _ = client(Dummy(200, {"id": "u2", "email": "a@b.com"}))
    result = c.create_account("a@b.com", "secret", {"full_name": "Ann"})
    assert result.user_id == "u2" and result.access_token is None

def test_auth_errors_carry_service_message():
    c, _ = client(Dummy(422, {"msg": "User already registered"}))
    with pytest.raises(AuthError, match="already registered"):
        c.create_account("a@b.com", "secret", {})

def test_current_user_returns_none_for_rejected_token():
    c, _ = client(Dummy(401, {"msg": "invalid JWT"}))
    assert c.current_user("stale") is None

@pytest.mark.parametrize("status", [500, 502, 503])
def test_auth_service_outage_is_auth_error(status):
    c, http = client(Dummy(status, {"message": "upstream unavailable"}))
    with pytest.raises(AuthError, match="upstream unavailable"):
        c.authenticate("a@b.com", "secret")
    assert http.calls[0]["url"] == "https://db.example.co/auth/v1/token"

def test_unreadable_auth_response_is_auth_error():
    bad = Dummy(200)
    bad.content = b"<html>gateway</html>"
    c, _ = client(bad)
    with pytest.raises(AuthError):
        c.authenticate("a@b.com", "secret")

def test_sign_in_during_auth_outage_stays_signed_out():
    c, _ = client(Dummy(503, {"message": "upstream unavailable"}))
    store = SessionStore(c)
    store.resolve()
    with pytest.raises(AuthError):
        store.sign_in("a@b.com", "secret")
    assert store.current_session() is None
    assert store.state is SessionState.ANONYMOUS

def test_dashboard_keeps_row_when_delete_is_forbidden():
    row = {"id": "b1", "owner_id": "u1", "name": "Shop", "category": "food",
           "status": "active", "created_at": "2026-01-01T00:00:00Z"}
    c, http = client(Dummy(200, [row]), Dummy(200, []), Dummy(200, [{"id": "b1"}]))
    session = Session(identity="u1", email="a@b.com")
    dashboard = DashboardController(RecordGateway(c), lambda: session)
    dashboard.ensure_loaded()
    dashboard.request_delete("b1")
    assert dashboard.confirm_delete() is False
    assert isinstance(dashboard.delete_error, AuthzError)
    assert [b.id for b in dashboard.listings] == ["b1"]

def test_dashboard_drops_row_confirmed_gone():
    row = {"id": "b1", "owner_id": "u1", "name": "Shop", "category": "food",
           "status": "active", "created_at": "2026-01-01T00:00:00Z"}
    c, _ = client(Dummy(200, [row]), Dummy(200, []), Dummy(200, []))
    session = Session(identity="u1", email="a@b.com")
    dashboard = DashboardController(RecordGateway(c), lambda: session)
    dashboard.ensure_loaded()
    dashboard.request_delete("b1")
    assert dashboard.confirm_delete() is True
    assert dashboard.listings == []
