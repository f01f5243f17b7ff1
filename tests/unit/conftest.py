import itertools
from datetime import datetime, timedelta, timezone

import pytest

from goonline.services.backend import AuthResult
from goonline.services.gateway import RecordGateway
from goonline.services.session_store import SessionStore
from goonline.utils.errors import AuthError, NotFoundError

EPOCH = datetime(2026, 1, 1, tzinfo=timezone.utc)


class FakeBackend:
    """In-memory stand-in for SupabaseClient with the same method surface."""

    def __init__(self):
        self.tables = {"businesses": [], "profiles": []}
        self.users = {}
        self.access_token = None
        self.fail = {}
        self.invalidated = []
        self.queries = []
        self._ids = itertools.count(1)
        self._clock = itertools.count(1)

    def _maybe_fail(self, op):
        exc = self.fail.get(op)
        if isinstance(exc, list):
            # queued failures fire once each, in order
            exc = exc.pop(0) if exc else None
        if exc is not None:
            raise exc

    def _result(self, user):
        return AuthResult(
            user={"id": user["id"], "email": user["email"], "user_metadata": user["meta"]},
            access_token=f"access-{user['id']}",
            refresh_token=f"refresh-{user['id']}",
        )

    # auth
    def set_access_token(self, token):
        self.access_token = token

    def create_account(self, email, password, profile_fields):
        self._maybe_fail("create_account")
        if email in self.users:
            raise AuthError("User already registered")
        user = {"id": f"user-{next(self._ids)}", "email": email, "password": password,
                "meta": dict(profile_fields)}
        self.users[email] = user
        return self._result(user)

    def authenticate(self, email, password):
        self._maybe_fail("authenticate")
        user = self.users.get(email)
        if user is None or user["password"] != password:
            raise AuthError("Invalid login credentials")
        return self._result(user)

    def refresh(self, refresh_token):
        self._maybe_fail("refresh")
        for user in self.users.values():
            if refresh_token == f"refresh-{user['id']}":
                return self._result(user)
        raise AuthError("Invalid Refresh Token")

    def invalidate(self, access_token):
        self._maybe_fail("invalidate")
        self.invalidated.append(access_token)

    def current_user(self, access_token):
        for user in self.users.values():
            if access_token == f"access-{user['id']}":
                return self._result(user).user
        return None

    # tables
    def query(self, collection, predicate=None, order=None, select="*"):
        self._maybe_fail("query")
        self.queries.append((collection, dict(predicate or {}), order, select))
        rows = [dict(r) for r in self.tables[collection]
                if all(r.get(k) == v for k, v in (predicate or {}).items())]
        if order:
            column, descending = order
            rows.sort(key=lambda r: r[column], reverse=descending)
        if "profiles(" in select:
            for row in rows:
                profile = next((p for p in self.tables["profiles"] if p["id"] == row["owner_id"]), None)
                row["profiles"] = {"full_name": profile["full_name"]} if profile else None
        return rows

    def insert(self, collection, row):
        self._maybe_fail("insert")
        row = dict(row)
        if collection == "businesses":
            row.setdefault("id", f"biz-{next(self._ids)}")
            row.setdefault("status", "pending")
            row.setdefault("created_at", (EPOCH + timedelta(seconds=next(self._clock))).isoformat())
        self.tables[collection].append(row)
        return dict(row)

    def update(self, collection, record_id, patch):
        self._maybe_fail("update")
        for row in self.tables[collection]:
            if row["id"] == record_id:
                row.update(patch)
                return dict(row)
        raise NotFoundError(f"No {collection} record with id {record_id}")

    def remove(self, collection, record_id):
        self._maybe_fail("remove")
        rows = self.tables[collection]
        for i, row in enumerate(rows):
            if row["id"] == record_id:
                del rows[i]
                return
        raise NotFoundError(f"No {collection} record with id {record_id}")

    # helpers
    def seed(self, **fields):
        row = {
            "owner_id": "owner-1",
            "name": "Business",
            "category": "food",
            "status": "active",
        }
        row.update(fields)
        return self.insert("businesses", row)

    def add_profile(self, user_id, full_name, role="owner"):
        self.tables["profiles"].append({"id": user_id, "full_name": full_name, "role": role})


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def gateway(backend):
    return RecordGateway(backend)


@pytest.fixture
def store(backend):
    return SessionStore(backend)


@pytest.fixture
def signed_in(store):
    store.sign_up("ann@example.com", "secret", "Ann", "owner")
    return store
