from __future__ import annotations
from dataclasses import asdict
from typing import Any, Callable, Dict, Optional

from goonline.controllers.base import SessionAccessor, ViewController
from goonline.services.gateway import RecordGateway
from goonline.utils.logging import logger
from goonline.utils.errors import AuthzError, GoOnlineError, ValidationError, user_message
from goonline.utils.security import is_valid_email, is_valid_url, sanitize_input
from goonline.utils.typing import BusinessForm, BusinessListing

REQUIRED = ("name", "category")


def clean_form(form: BusinessForm) -> Dict[str, Any]:
    """Trim every field, turn blank optionals into None and validate formats."""
    fields: Dict[str, Any] = {}
    for key, value in asdict(form).items():
        text = sanitize_input(value, max_length=2_000)
        fields[key] = text or None

    missing = [k for k in REQUIRED if not fields.get(k)]
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}")
    if fields["contact_email"] and not is_valid_email(fields["contact_email"]):
        raise ValidationError("Contact email is not a valid email address")
    if fields["logo_url"] and not is_valid_url(fields["logo_url"]):
        raise ValidationError("Logo URL must start with http:// or https://")
    return fields


class BusinessFormController(ViewController[BusinessForm]):
    """Create and edit form for the signed-in owner's listings."""

    name = "business_form"

    def __init__(
        self,
        gateway: RecordGateway,
        session: SessionAccessor,
        on_saved: Optional[Callable[[BusinessListing], None]] = None,
    ):
        super().__init__(session)
        self.gateway = gateway
        self.on_saved = on_saved
        self.editing_id: Optional[str] = None
        self.submit_error: Optional[str] = None

    @property
    def is_edit(self) -> bool:
        return self.editing_id is not None

    def load_key(self):
        session = self.session
        return (self.editing_id, session.identity if session else None)

    def start_create(self) -> None:
        self.editing_id = None
        self.submit_error = None
        self.load()

    def start_edit(self, listing_id: str) -> None:
        self.editing_id = listing_id
        self.submit_error = None
        self.load()

    def fetch(self) -> BusinessForm:
        if self.editing_id is None:
            return BusinessForm()
        session = self.session
        listing = self.gateway.get(self.editing_id)
        if session is None or listing.owner_id != session.identity:
            raise AuthzError("You can only edit your own businesses")
        return BusinessForm.from_listing(listing)

    def submit(self, form: BusinessForm) -> Optional[BusinessListing]:
        self.submit_error = None
        session = self.session
        try:
            if session is None:
                raise AuthzError("Sign in to manage businesses")
            fields = clean_form(form)
            if self.editing_id is None:
                saved = self.gateway.insert({**fields, "owner_id": session.identity})
            else:
                saved = self.gateway.update(self.editing_id, fields)
        except GoOnlineError as e:
            logger.warning("business_form: submit failed: %s", e)
            self.submit_error = user_message(e)
            return None

        self._replace_data(BusinessForm.from_listing(saved))
        if self.on_saved:
            self.on_saved(saved)
        return saved
