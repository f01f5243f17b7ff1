from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, List, Mapping, Optional, Tuple, TypeVar

from goonline.utils.errors import DataError

T = TypeVar("T")


class Role(str, Enum):
    OWNER = "owner"
    AGENT = "agent"
    VIEWER = "viewer"


class ListingStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    SUSPENDED = "suspended"


class LoadStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        raise DataError(f"Malformed timestamp: {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError as e:
        raise DataError(f"Malformed timestamp: {value!r}") from e


def _optional_str(row: Mapping[str, Any], key: str) -> Optional[str]:
    value = row.get(key)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class Profile:
    display_name: Optional[str]
    role: Role = Role.OWNER

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Profile":
        raw_role = row.get("role") or Role.OWNER.value
        try:
            role = Role(raw_role)
        except ValueError as e:
            raise DataError(f"Unknown role in profile: {raw_role!r}") from e
        return cls(display_name=_optional_str(row, "full_name"), role=role)


@dataclass(frozen=True)
class Session:
    identity: str
    email: str
    profile: Optional[Profile] = None
    access_token: str = field(default="", repr=False)
    refresh_token: str = field(default="", repr=False)

    @property
    def role(self) -> Role:
        return self.profile.role if self.profile else Role.OWNER

    @property
    def display_name(self) -> str:
        if self.profile and self.profile.display_name:
            return self.profile.display_name
        return self.email


@dataclass(frozen=True)
class BusinessListing:
    id: str
    owner_id: str
    name: str
    category: str
    status: ListingStatus
    created_at: datetime
    description: Optional[str] = None
    location: Optional[str] = None
    logo_url: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    owner_name: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "BusinessListing":
        if not isinstance(row, Mapping):
            raise DataError(f"Malformed businesses row: {row!r}")
        missing = [k for k in ("id", "owner_id", "name", "category", "status", "created_at")
                   if row.get(k) in (None, "")]
        if missing:
            raise DataError(f"businesses row is missing {', '.join(missing)}")
        try:
            status = ListingStatus(row["status"])
        except ValueError as e:
            raise DataError(f"Unknown listing status: {row['status']!r}") from e

        owner_name = None
        embedded = row.get("profiles")
        if isinstance(embedded, Mapping):
            owner_name = _optional_str(embedded, "full_name")

        return cls(
            id=str(row["id"]),
            owner_id=str(row["owner_id"]),
            name=str(row["name"]),
            category=str(row["category"]),
            status=status,
            created_at=_parse_timestamp(row["created_at"]),
            description=_optional_str(row, "description"),
            location=_optional_str(row, "location"),
            logo_url=_optional_str(row, "logo_url"),
            contact_email=_optional_str(row, "contact_email"),
            contact_phone=_optional_str(row, "contact_phone"),
            owner_name=owner_name,
        )


@dataclass(frozen=True)
class CategoryAggregate:
    name: str
    count: int


@dataclass(frozen=True)
class PlatformStats:
    total_count: int = 0
    active_count: int = 0
    pending_count: int = 0
    owned_by_current_user_count: int = 0
    categories: Tuple[CategoryAggregate, ...] = ()

    @property
    def approval_rate(self) -> float:
        if self.total_count == 0:
            return 0.0
        return self.active_count / self.total_count

    @property
    def most_popular_category(self) -> Optional[str]:
        best: Optional[CategoryAggregate] = None
        for agg in self.categories:
            # strict comparison keeps the first category seen on ties
            if best is None or agg.count > best.count:
                best = agg
        return best.name if best else None


@dataclass(frozen=True)
class ListFilter:
    """Equality conjunction plus an optional ordering column."""
    equals: Dict[str, Any] = field(default_factory=dict)
    order_by: Optional[str] = None
    descending: bool = False


@dataclass(frozen=True)
class ViewState(Generic[T]):
    status: LoadStatus = LoadStatus.IDLE
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def idle(cls) -> "ViewState[T]":
        return cls()

    @classmethod
    def loading(cls, previous: Optional[T] = None) -> "ViewState[T]":
        return cls(status=LoadStatus.LOADING, data=previous)

    @classmethod
    def success(cls, data: T) -> "ViewState[T]":
        return cls(status=LoadStatus.SUCCESS, data=data)

    @classmethod
    def failure(cls, message: str) -> "ViewState[T]":
        return cls(status=LoadStatus.ERROR, error=message)

    @property
    def is_loading(self) -> bool:
        return self.status in (LoadStatus.IDLE, LoadStatus.LOADING)


@dataclass
class BusinessForm:
    name: str = ""
    category: str = ""
    description: str = ""
    location: str = ""
    logo_url: str = ""
    contact_email: str = ""
    contact_phone: str = ""

    @classmethod
    def from_listing(cls, listing: BusinessListing) -> "BusinessForm":
        return cls(
            name=listing.name,
            category=listing.category,
            description=listing.description or "",
            location=listing.location or "",
            logo_url=listing.logo_url or "",
            contact_email=listing.contact_email or "",
            contact_phone=listing.contact_phone or "",
        )


EDITABLE_FIELDS: List[str] = [
    "name", "category", "description", "location",
    "logo_url", "contact_email", "contact_phone",
]
