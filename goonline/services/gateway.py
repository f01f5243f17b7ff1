from __future__ import annotations
from dataclasses import replace
from typing import Any, Dict, List, Optional

from goonline.utils.logging import logger
from goonline.utils.errors import NotFoundError, ValidationError
from goonline.utils.typing import BusinessListing, EDITABLE_FIELDS, ListFilter

BUSINESSES = "businesses"
PROFILES = "profiles"
OWNER_JOIN_SELECT = "*, profiles(full_name)"

REQUIRED_ON_INSERT = ("owner_id", "name", "category")
# server-owned or moderation-owned columns a client may never write
PROTECTED_FIELDS = ("id", "owner_id", "status", "created_at")


class RecordGateway:
    """Typed access to one collection of the hosted data service.

    Rows are coerced into BusinessListing on the way in; nothing above this
    layer sees raw JSON.
    """

    def __init__(self, backend, collection: str = BUSINESSES):
        self.backend = backend
        self.collection = collection

    def list(self, filter: Optional[ListFilter] = None, with_owner: bool = False) -> List[BusinessListing]:
        filter = filter or ListFilter()
        order = (filter.order_by, filter.descending) if filter.order_by else None
        rows = self.backend.query(
            self.collection,
            dict(filter.equals),
            order,
            select=OWNER_JOIN_SELECT if with_owner else "*",
        )
        listings = [BusinessListing.from_row(row) for row in rows]
        logger.debug("gateway: %s %s -> %d rows", self.collection, filter.equals, len(listings))
        return listings

    def get_by_owner(self, owner_id: str) -> List[BusinessListing]:
        return self.list(ListFilter(equals={"owner_id": owner_id}, order_by="created_at", descending=True))

    def get(self, record_id: str) -> BusinessListing:
        rows = self.backend.query(self.collection, {"id": record_id})
        if not rows:
            raise NotFoundError(f"No business with id {record_id}")
        return BusinessListing.from_row(rows[0])

    def insert(self, record: Dict[str, Any]) -> BusinessListing:
        missing = [k for k in REQUIRED_ON_INSERT if not str(record.get(k) or "").strip()]
        if missing:
            raise ValidationError(f"Missing required field(s): {', '.join(missing)}")
        if "status" in record:
            raise ValidationError("Listing status is set by moderation, not by the owner")
        row = {k: v for k, v in record.items() if k in EDITABLE_FIELDS or k == "owner_id"}
        created = BusinessListing.from_row(self.backend.insert(self.collection, row))
        logger.info("gateway: created %s %s", self.collection, created.id)
        return created

    def update(self, record_id: str, partial: Dict[str, Any]) -> BusinessListing:
        protected = sorted(k for k in partial if k in PROTECTED_FIELDS)
        if protected:
            raise ValidationError(f"Field(s) cannot be changed: {', '.join(protected)}")
        unknown = sorted(k for k in partial if k not in EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown field(s): {', '.join(unknown)}")
        for key in ("name", "category"):
            if key in partial and not str(partial[key] or "").strip():
                raise ValidationError(f"{key} cannot be empty")
        updated = BusinessListing.from_row(self.backend.update(self.collection, record_id, dict(partial)))
        logger.info("gateway: updated %s %s", self.collection, record_id)
        return updated

    def delete(self, record_id: str) -> None:
        self.backend.remove(self.collection, record_id)
        logger.info("gateway: deleted %s %s", self.collection, record_id)

    def join_owner_profile(self, record: BusinessListing) -> BusinessListing:
        """Fill in owner_name with one profile lookup.

        Per-record fallback for when the embedded owner join of list() is not
        available.
        """
        if record.owner_name:
            return record
        rows = self.backend.query(PROFILES, {"id": record.owner_id}, None, select="full_name")
        name = (rows[0].get("full_name") or None) if rows else None
        return replace(record, owner_name=name)
