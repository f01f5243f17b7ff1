from goonline.controllers.analytics import (
    AnalyticsController, aggregate_categories, compute_stats, display_label,
)
from goonline.utils.typing import CategoryAggregate, LoadStatus

def test_scenario_counts(gateway, backend, signed_in):
    me = signed_in.current_session().identity
    backend.seed(category="food", status="active", owner_id=me)
    backend.seed(category="food", status="active")
    backend.seed(category="retail", status="pending")
    c = AnalyticsController(gateway, signed_in.current_session)
    assert c.ensure_loaded().status is LoadStatus.SUCCESS
    stats = c.stats
    assert (stats.total_count, stats.active_count, stats.pending_count) == (3, 2, 1)
    assert stats.owned_by_current_user_count == 1
    assert list(stats.categories) == [CategoryAggregate("food", 2), CategoryAggregate("retail", 1)]
    assert stats.most_popular_category == "food"
    assert abs(stats.approval_rate - 2 / 3) < 1e-9

def test_reads_full_collection_unfiltered(gateway, backend, signed_in):
    backend.seed(status="suspended", owner_id="other")
    c = AnalyticsController(gateway, signed_in.current_session)
    c.ensure_loaded()
    assert backend.queries[-1][1] == {}
    assert c.stats.total_count == 1

def test_category_counts_sum_to_base_size(gateway, backend):
    for cat in ["a", "b", "a", "c", "b", "a"]:
        backend.seed(category=cat)
    listings = gateway.list()
    assert sum(agg.count for agg in aggregate_categories(listings)) == len(listings)

def test_empty_collection():
    stats = compute_stats([], "me")
    assert stats.total_count == 0
    assert stats.approval_rate == 0.0
    assert stats.most_popular_category is None

def test_display_label():
    assert display_label("food") == "Food"
    assert display_label("") == ""
