import threading

import pytest

from goonline.controllers.base import ViewController
from goonline.utils.errors import AuthzError, DataError
from goonline.utils.typing import LoadStatus

class Counter(ViewController):
    name = "counter"

    def __init__(self, results):
        super().__init__(lambda: None)
        self.results = list(results)
        self.key = "a"
        self.fetches = 0

    def load_key(self):
        return self.key

    def fetch(self):
        self.fetches += 1
        item = self.results.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

def test_last_triggered_wins_when_first_resolves_late():
    c = Counter([])
    first = c.begin_load()
    second = c.begin_load()
    assert c.complete_load(second, "second") is True
    assert c.complete_load(first, "first") is False
    assert c.state.status is LoadStatus.SUCCESS and c.state.data == "second"

def test_stale_failure_is_discarded():
    c = Counter([])
    first = c.begin_load()
    second = c.begin_load()
    c.complete_load(second, [1, 2])
    assert c.fail_load(first, DataError("late boom")) is False
    assert c.state.data == [1, 2] and c.state.error is None

def test_pending_newer_load_blocks_older_result():
    c = Counter([])
    first = c.begin_load()
    second = c.begin_load()
    assert c.complete_load(first, "first") is False
    assert c.state.status is LoadStatus.LOADING
    c.complete_load(second, "second")
    assert c.state.data == "second"

def test_loading_keeps_previous_data():
    c = Counter(["one"])
    c.load()
    c.begin_load()
    assert c.state.status is LoadStatus.LOADING and c.state.data == "one"

def test_ensure_loaded_fetches_once_per_key():
    c = Counter(["a1", "b1"])
    c.ensure_loaded()
    c.ensure_loaded()
    assert c.fetches == 1
    c.key = "b"
    c.ensure_loaded()
    assert c.fetches == 2 and c.state.data == "b1"

def test_error_then_explicit_reload():
    c = Counter([DataError("down"), "ok"])
    assert c.ensure_loaded().error == "down"
    assert c.ensure_loaded().status is LoadStatus.ERROR
    assert c.load().data == "ok"

def test_invalidate_discards_in_flight_result():
    c = Counter([])
    ticket = c.begin_load()
    c.invalidate()
    assert c.complete_load(ticket, "late") is False
    assert c.state.status is LoadStatus.IDLE

def test_threaded_loads_apply_latest_ticket():
    c = Counter([])
    release_first = threading.Event()
    first = c.begin_load()

    def slow_first():
        release_first.wait(5)
        c.complete_load(first, "first")

    worker = threading.Thread(target=slow_first)
    worker.start()
    second = c.begin_load()
    c.complete_load(second, "second")
    release_first.set()
    worker.join(5)
    assert c.state.data == "second"

def test_mark_stale_forces_one_reload():
    c = Counter(["one", "two"])
    c.ensure_loaded()
    c.ensure_loaded()
    assert c.fetches == 1
    c.mark_stale()
    assert c.ensure_loaded().data == "two"
    c.ensure_loaded()
    assert c.fetches == 2

def test_expired_token_is_refreshed_once_then_retried():
    c = Counter([AuthzError("JWT expired"), "fresh"])
    c._session = lambda: "signed-in"
    refreshed = []
    c.reauthenticate = lambda: refreshed.append(True) or True
    assert c.load().data == "fresh"
    assert refreshed == [True] and c.fetches == 2

def test_failed_refresh_surfaces_original_error():
    c = Counter([AuthzError("JWT expired")])
    c._session = lambda: "signed-in"
    c.reauthenticate = lambda: False
    state = c.load()
    assert state.status is LoadStatus.ERROR and state.error == "JWT expired"
    assert c.fetches == 1

def test_no_refresh_without_a_session():
    c = Counter([AuthzError("Sign in first")])
    c.reauthenticate = lambda: pytest.fail("refresh attempted while signed out")
    assert c.load().status is LoadStatus.ERROR
