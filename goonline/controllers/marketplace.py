from __future__ import annotations
from typing import Iterable, List, Optional, Sequence

from goonline.controllers.base import SessionAccessor, ViewController
from goonline.services.gateway import RecordGateway
from goonline.utils.logging import logger
from goonline.utils.errors import DataError
from goonline.utils.security import sanitize_input
from goonline.utils.typing import BusinessListing, ListFilter, ListingStatus

ACTIVE_LISTINGS = ListFilter(
    equals={"status": ListingStatus.ACTIVE.value},
    order_by="created_at",
    descending=True,
)


def matches_search(listing: BusinessListing, term: str) -> bool:
    needle = (term or "").lower()
    if not needle:
        return True
    if needle in listing.name.lower():
        return True
    return bool(listing.description) and needle in listing.description.lower()


def filter_listings(
    listings: Iterable[BusinessListing], term: str = "", category: Optional[str] = None
) -> List[BusinessListing]:
    return [
        b for b in listings
        if matches_search(b, term) and (not category or b.category == category)
    ]


def category_options(listings: Iterable[BusinessListing]) -> List[str]:
    """Distinct categories in first-seen order."""
    return list(dict.fromkeys(b.category for b in listings))


class MarketplaceController(ViewController[List[BusinessListing]]):
    """Public browse of active listings with client-side search and category filter."""

    name = "marketplace"

    def __init__(self, gateway: RecordGateway, session: SessionAccessor):
        super().__init__(session)
        self.gateway = gateway
        self.search_term = ""
        self.selected_category: Optional[str] = None

    def fetch(self) -> List[BusinessListing]:
        try:
            return self.gateway.list(ACTIVE_LISTINGS, with_owner=True)
        except DataError as e:
            # embedded join unavailable: list plain rows, name owners one by one
            logger.warning("marketplace: owner join failed (%s), joining per record", e)
        listings = self.gateway.list(ACTIVE_LISTINGS)
        return [self.gateway.join_owner_profile(b) for b in listings]

    # intents
    def set_search(self, term: str) -> None:
        self.search_term = sanitize_input(term, max_length=200)

    def select_category(self, category: Optional[str]) -> None:
        self.selected_category = category or None

    def clear_filters(self) -> None:
        self.search_term = ""
        self.selected_category = None

    # derived
    @property
    def listings(self) -> Sequence[BusinessListing]:
        return self.state.data or []

    @property
    def categories(self) -> List[str]:
        return category_options(self.listings)

    @property
    def visible(self) -> List[BusinessListing]:
        return filter_listings(self.listings, self.search_term, self.selected_category)

    @property
    def filters_active(self) -> bool:
        return bool(self.search_term or self.selected_category)
