from __future__ import annotations
from typing import Dict, Iterable, List, Optional

from goonline.controllers.base import SessionAccessor, ViewController
from goonline.services.gateway import RecordGateway
from goonline.utils.typing import (
    BusinessListing, CategoryAggregate, ListingStatus, PlatformStats,
)


def aggregate_categories(listings: Iterable[BusinessListing]) -> List[CategoryAggregate]:
    counts: Dict[str, int] = {}
    for b in listings:
        counts[b.category] = counts.get(b.category, 0) + 1
    return [CategoryAggregate(name, count) for name, count in counts.items()]


def compute_stats(listings: Iterable[BusinessListing], owner_id: Optional[str]) -> PlatformStats:
    items = list(listings)
    return PlatformStats(
        total_count=len(items),
        active_count=sum(1 for b in items if b.status is ListingStatus.ACTIVE),
        pending_count=sum(1 for b in items if b.status is ListingStatus.PENDING),
        owned_by_current_user_count=sum(1 for b in items if owner_id and b.owner_id == owner_id),
        categories=tuple(aggregate_categories(items)),
    )


def display_label(category: str) -> str:
    return category[:1].upper() + category[1:]


class AnalyticsController(ViewController[PlatformStats]):
    """Platform-wide counts over the whole businesses collection.

    Every signed-in role reads the full collection here, pending and
    suspended listings included.
    """

    name = "analytics"

    def __init__(self, gateway: RecordGateway, session: SessionAccessor):
        super().__init__(session)
        self.gateway = gateway

    def load_key(self):
        session = self.session
        return session.identity if session else None

    def fetch(self) -> PlatformStats:
        session = self.session
        return compute_stats(self.gateway.list(), session.identity if session else None)

    @property
    def stats(self) -> PlatformStats:
        return self.state.data or PlatformStats()
