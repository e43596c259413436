"""
Contact record for the Google Contacts API v3.

Provides a read/write view over one contact entry of the GData JSON feed:
- Checked accessors for names, emails, phones, addresses, links and more
- Formatted entity lists whose metadata (rel, primary) survives a round trip
- Staged changes that are rendered into Atom XML for create/update requests
- Photo retrieval and replacement through the bound API client
"""

import copy
import json
import logging
import weakref
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Optional

from gcontacts.api.contacts_api import (
    CONTACTS_FEED,
    ContactsAPI,
    ContactsAPIError,
    format_time_for_xml,
    normalize_url,
    parse_response_code,
    raise_if_failed_response,
)
from gcontacts.records.changes import RECOGNIZED_FIELDS, ChangeSet
from gcontacts.records.formatting import (
    format_address,
    format_entity,
    format_phone_number,
    parse_birthday,
)
from gcontacts.records.photo import PHOTO_CONTENT_TYPE, prepare_photo
from gcontacts.records.template import ACTION_CREATE, ACTION_UPDATE, ContactTemplate
from gcontacts.utils.normalization import TEXT_KEY, text_of

# Link relations
PHOTO_REL = "http://schemas.google.com/contacts/2008/rel#photo"
EDIT_PHOTO_REL = "http://schemas.google.com/contacts/2008/rel#edit_photo"

# Accessors used instead of the field name when building update attributes,
# so that rel/primary metadata is sent back to the server
FULL_VALUE_ACCESSORS = {
    "phone_numbers": "phone_numbers_full",
    "emails": "emails_full",
}

logger = logging.getLogger(__name__)


class ContactRecord:
    """
    One contact entry and its pending changes.

    The record owns its entry tree. The API client is held by weak reference
    and is optional: a detached record still answers every accessor but
    cannot fetch photos or persist changes.

    Attributes:
        changes: ChangeSet of values staged for the next create/update

    Usage:
        # Load an existing contact
        contact = ContactRecord.find(id_url, api)
        contact.given_name
        contact.emails_full()

        # Stage and send changes (PUT with If-Match)
        contact.prep_changes({"family_name": "Lovelace"})
        contact.create_or_update()

        # New contact (POST)
        contact = ContactRecord(api=api)
        contact.create_or_update({"given_name": "Ada", "emails": [...]})
    """

    def __init__(
        self,
        data: Optional[Mapping[str, Any]] = None,
        api: Optional[ContactsAPI] = None,
        template: Optional[ContactTemplate] = None,
    ):
        """
        Initialize the record.

        Args:
            data: Parsed entry tree; omit for a new, unsaved contact
            api: Client used for photo fetches and writes
            template: XML template; defaults to the client's shared template
        """
        self._data: dict[str, Any] = dict(data or {})
        self._api_ref = weakref.ref(api) if api is not None else None
        self._template = template
        self.changes = ChangeSet()

    # ------------------------------------------------------------------
    # Tree access
    # ------------------------------------------------------------------

    @property
    def api(self) -> Optional[ContactsAPI]:
        """The bound client, or None if detached or already collected."""
        return self._api_ref() if self._api_ref is not None else None

    @property
    def template(self) -> ContactTemplate:
        """Template used to render create/update payloads."""
        if self._template is not None:
            return self._template
        api = self.api
        if api is None:
            raise ValueError("Contact has no template and is not bound to an API client")
        return api.template

    @property
    def raw(self) -> dict[str, Any]:
        """Deep copy of the entry tree."""
        return copy.deepcopy(self._data)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def _list(self, key: str) -> list[Any]:
        value = self._data.get(key)
        if isinstance(value, list):
            return value
        if isinstance(value, dict):
            return [value]
        return []

    def _text(self, key: str) -> Optional[Any]:
        value = self._data.get(key)
        if isinstance(value, dict):
            return value.get(TEXT_KEY)
        return None

    def _nested_text(self, level1: str, level2: str) -> Optional[Any]:
        """Text of ``tree[level1][level2]``, or None if either level is absent."""
        outer = self._data.get(level1)
        if not isinstance(outer, dict):
            return None
        inner = outer.get(level2)
        if not isinstance(inner, dict):
            return None
        return inner.get(TEXT_KEY)

    # ------------------------------------------------------------------
    # Entry metadata
    # ------------------------------------------------------------------

    @property
    def id(self) -> Optional[str]:
        """Contact id URL; None for a contact not yet created."""
        return self._text("id")

    @property
    def title(self) -> Optional[str]:
        return self._text("title")

    @property
    def content(self) -> Optional[str]:
        """Free-form notes."""
        return self._text("content")

    @property
    def updated(self) -> Optional[datetime]:
        """Server modification time."""
        value = self._text("updated")
        if not value:
            return None
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except (ValueError, TypeError, AttributeError):
            logger.debug(f"Unparseable updated timestamp: {value!r}")
            return None

    @property
    def etag(self) -> Optional[str]:
        return self._data.get("gd$etag")

    @property
    def deleted(self) -> bool:
        """True for tombstone entries returned with showdeleted."""
        return "gd$deleted" in self._data

    def categories(self) -> list[dict[str, Any]]:
        return self._list("category")

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    def links(self) -> list[Optional[str]]:
        """All link hrefs, in feed order."""
        return [link.get("href") for link in self._list("link")]

    def _find_link(self, rel: str) -> Optional[dict[str, Any]]:
        for link in self._list("link"):
            if link.get("rel") == rel:
                return link
        return None

    def _link_href(self, rel: str) -> Optional[str]:
        link = self._find_link(rel)
        return link.get("href") if link else None

    @property
    def self_link(self) -> Optional[str]:
        return self._link_href("self")

    @property
    def alternate_link(self) -> Optional[str]:
        """Alternative, possibly off-Google, home page link."""
        return self._link_href("alternate")

    @property
    def edit_link(self) -> Optional[str]:
        return self._link_href("edit")

    @property
    def photo_link(self) -> Optional[str]:
        """Photo URL (fetching it still requires authentication)."""
        return self._link_href(PHOTO_REL)

    @property
    def edit_photo_link(self) -> Optional[str]:
        return self._link_href(EDIT_PHOTO_REL)

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    @property
    def given_name(self) -> Optional[str]:
        return self._nested_text("gd$name", "gd$givenName")

    @property
    def family_name(self) -> Optional[str]:
        return self._nested_text("gd$name", "gd$familyName")

    @property
    def full_name(self) -> Optional[str]:
        return self._nested_text("gd$name", "gd$fullName")

    @property
    def additional_name(self) -> Optional[str]:
        return self._nested_text("gd$name", "gd$additionalName")

    @property
    def name_prefix(self) -> Optional[str]:
        return self._nested_text("gd$name", "gd$namePrefix")

    @property
    def name_suffix(self) -> Optional[str]:
        return self._nested_text("gd$name", "gd$nameSuffix")

    # ------------------------------------------------------------------
    # Plain value lists
    # ------------------------------------------------------------------

    def phone_numbers(self) -> list[Any]:
        return [text_of(phone) for phone in self._list("gd$phoneNumber")]

    def emails(self) -> list[Optional[str]]:
        return [email.get("address") for email in self._list("gd$email")]

    def primary_email(self) -> Optional[str]:
        """
        Address of the first email marked primary.

        None both when the contact has no emails and when none is primary.
        """
        if "gd$email" not in self._data:
            return None  # no emails at all
        for email in self._list("gd$email"):
            if email.get("primary") == "true":
                return email.get("address")
        return None

    def ims(self) -> list[Optional[str]]:
        """Instant messaging addresses; protocols are not distinguished."""
        return [im.get("address") for im in self._list("gd$im")]

    def birthday(self) -> Optional[dict[str, Optional[int]]]:
        """Birthday as ``{"year", "month", "day"}``; year is None when unknown."""
        birthday = self._data.get("gContact$birthday")
        if not isinstance(birthday, dict) or not birthday.get("when"):
            return None
        try:
            return parse_birthday(birthday["when"])
        except (ValueError, IndexError):
            logger.debug(f"Unparseable birthday: {birthday['when']!r}")
            return None

    def relations(self) -> list[dict[str, Any]]:
        return self._list("gContact$relation")

    def spouse(self) -> Optional[str]:
        """Name of the first relation tagged spouse."""
        for relation in self.relations():
            if relation.get("rel") == "spouse":
                return relation.get(TEXT_KEY)
        return None

    # ------------------------------------------------------------------
    # Formatted entity lists
    # ------------------------------------------------------------------

    def addresses(self) -> list[dict[str, Any]]:
        return [format_address(a) for a in self._list("gd$structuredPostalAddress")]

    def organizations(self) -> list[dict[str, Any]]:
        return [format_entity(o) for o in self._list("gd$organization")]

    def websites(self) -> list[dict[str, Any]]:
        return [format_entity(w) for w in self._list("gContact$website")]

    def phone_numbers_full(self) -> list[dict[str, Any]]:
        return [format_phone_number(p) for p in self._list("gd$phoneNumber")]

    def emails_full(self) -> list[dict[str, Any]]:
        return [format_entity(e) for e in self._list("gd$email")]

    # ------------------------------------------------------------------
    # Photos
    # ------------------------------------------------------------------

    def photo(self) -> Optional[bytes]:
        """
        Binary photo data, or None.

        None is returned when the record is detached, has no photo link, or
        the server answers with any 4xx/5xx.
        """
        api = self.api
        photo_link = self.photo_link
        if api is None or not photo_link:
            return None

        response = api.get(photo_link)
        status = parse_response_code(response)
        if status >= 400:
            logger.debug(f"No photo for {self.id} (HTTP {status})")
            return None
        return response.content

    def photo_with_metadata(self) -> Optional[dict[str, Any]]:
        """
        Photo data with its etag and content type.

        Only photo links carrying a ``gd$etag`` have an actual photo attached.

        Returns:
            ``{"etag", "content_type", "data"}`` or None
        """
        api = self.api
        photo_link = self._find_link(PHOTO_REL)
        if api is None or photo_link is None or not photo_link.get("gd$etag"):
            return None

        response = api.get(photo_link["href"])
        if parse_response_code(response) != 200:
            logger.debug(
                f"Photo fetch for {self.id} returned HTTP {response.status_code}"
            )
            return None

        return {
            "etag": photo_link["gd$etag"].replace('"', ""),
            "content_type": response.headers.get("content-type"),
            "data": response.content,
        }

    def update_photo(self, photo_data: bytes) -> bool:
        """
        Replace the contact photo.

        The image is re-encoded as JPEG before upload.

        Raises:
            ValueError: If the record is detached or has no edit-photo link
            PhotoError: If the data is not a usable image
            ContactsAPIError: If the server rejects the upload
        """
        api = self._require_api()
        edit_photo_link = self.edit_photo_link
        if not edit_photo_link:
            raise ValueError("Contact has no edit-photo link")

        prepared = prepare_photo(photo_data)
        response = api.put_photo(
            normalize_url(edit_photo_link, api.base_url), prepared, PHOTO_CONTENT_TYPE
        )
        raise_if_failed_response(response)

        logger.info(f"Updated photo for contact: {self.id}")
        return True

    # ------------------------------------------------------------------
    # Change tracking
    # ------------------------------------------------------------------

    def prep_changes(self, changes: Mapping[str, Any]) -> dict[str, Any]:
        """Stage changes for the next create/update; returns all staged changes."""
        return self.changes.merge(changes)

    def prepped_changes(self) -> dict[str, Any]:
        return self.changes.as_dict()

    def attrs_for_update(self, changes: Mapping[str, Any]) -> dict[str, Any]:
        """
        Full attribute set for a create/update payload.

        Each recognized field takes its value from ``changes`` when present,
        otherwise from the record's current state.
        """
        return {
            field: changes[field] if field in changes else self._value_for_field(field)
            for field in RECOGNIZED_FIELDS
        }

    def formatted_attrs(self) -> dict[str, Any]:
        """Current values of all recognized fields."""
        return self.attrs_for_update({})

    def _value_for_field(self, field: str) -> Any:
        value = getattr(self, FULL_VALUE_ACCESSORS.get(field, field))
        return value() if callable(value) else value

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def create_or_update(
        self, changes: Optional[Mapping[str, Any]] = None
    ) -> Optional["ContactRecord"]:
        """
        Persist changes: update when the record has an id, create otherwise.

        Args:
            changes: Used instead of the staged changes for this call only

        Returns:
            This record, reloaded from the server response, or None when
            there was nothing to send
        """
        if self.id:
            return self.send_update(changes)
        return self.send_create(changes)

    def _resolve_changes(
        self, changes: Optional[Mapping[str, Any]]
    ) -> tuple[Optional[Mapping[str, Any]], bool]:
        if changes is not None:
            return changes, False
        if not self.changes:
            return None, False
        return self.changes.as_dict(), True

    def _require_api(self) -> ContactsAPI:
        api = self.api
        if api is None:
            raise ValueError("Contact is not bound to an API client")
        return api

    def send_update(
        self, changes: Optional[Mapping[str, Any]] = None
    ) -> Optional["ContactRecord"]:
        """
        PUT the contact with ``If-Match: <etag>``.

        Raises:
            ContactModifiedError: If the contact changed on the server since load
            ContactsAPIError: For other failed responses
        """
        changes, staged = self._resolve_changes(changes)
        if changes is None:
            logger.debug(f"No changes to update for {self.id}")
            return None

        api = self._require_api()

        attrs = self.attrs_for_update(changes)
        attrs["updated"] = format_time_for_xml(datetime.now(timezone.utc))
        attrs["etag"] = self.etag
        attrs["id"] = self.id

        xml = self.xml_for_update(attrs)
        url = normalize_url(self.edit_link or self.id, api.base_url)

        logger.debug(f"Updating contact: {self.id}")
        response = api.put(url, xml, {}, {"If-Match": self.etag})
        self.reload_from_data(self.parse_response(response))

        if staged:
            self.changes.clear()
        logger.info(f"Updated contact: {self.id}")
        return self

    def send_create(
        self, changes: Optional[Mapping[str, Any]] = None
    ) -> Optional["ContactRecord"]:
        """POST the contact to the contacts feed."""
        changes, staged = self._resolve_changes(changes)
        if changes is None:
            logger.debug("No changes to create contact from")
            return None

        api = self._require_api()
        attrs = self.attrs_for_update(changes)
        response = self.call_api_create(attrs, api, self.template)
        self.reload_from_data(self.parse_response(response))

        if staged:
            self.changes.clear()
        logger.info(f"Created contact: {self.id}")
        return self

    def xml_for_update(self, attrs: dict[str, Any]) -> str:
        return self.template.render(attrs, ACTION_UPDATE)

    @staticmethod
    def xml_for_create(attrs: dict[str, Any], template: ContactTemplate) -> str:
        return template.render(attrs, ACTION_CREATE)

    def reload_from_data(self, parsed_data: Mapping[str, Any]) -> None:
        """Replace the whole entry tree; nothing of the old tree is kept."""
        self._data.clear()
        self._data.update(parsed_data)

    # ------------------------------------------------------------------
    # Class-level constructors
    # ------------------------------------------------------------------

    @classmethod
    def find(cls, id_url: str, api: ContactsAPI) -> "ContactRecord":
        """
        Fetch a contact by its id or self URL.

        Raises:
            ContactNotFoundError: If the contact does not exist
            ContactsAPIError: For other failed responses
        """
        logger.debug(f"Finding contact: {id_url}")
        response = api.get(normalize_url(id_url, api.base_url))
        return cls.from_response(response, api)

    @classmethod
    def create(cls, attrs: Mapping[str, Any], api: ContactsAPI) -> "ContactRecord":
        """
        Create a contact from recognized field values.

        Fields missing from ``attrs`` are sent empty.
        """
        full_attrs = cls(api=api).attrs_for_update(attrs)
        response = cls.call_api_create(full_attrs, api, api.template)
        contact = cls.from_response(response, api)
        logger.info(f"Created contact: {contact.id}")
        return contact

    @classmethod
    def call_api_create(
        cls, attrs: dict[str, Any], api: ContactsAPI, template: ContactTemplate
    ) -> Any:
        return api.post(CONTACTS_FEED, cls.xml_for_create(attrs, template))

    @classmethod
    def from_response(cls, response: Any, api: ContactsAPI) -> "ContactRecord":
        """Build a record bound to ``api`` from a raw HTTP response."""
        return cls(cls.parse_response(response), api=api)

    @staticmethod
    def parse_response(response: Any) -> dict[str, Any]:
        """
        Check a response and return its contact entry tree.

        Raises:
            ContactsAPIError: (or a subclass) for failed responses, bodies that
                are not JSON, and bodies without a contact entry
        """
        raise_if_failed_response(response)

        try:
            body = json.loads(response.text)
        except (TypeError, ValueError) as e:
            raise ContactsAPIError(
                f"Invalid JSON in response: {e}", parse_response_code(response)
            ) from e

        if not isinstance(body, dict):
            raise ContactsAPIError("Response body is not a JSON object")

        entry = body.get("entry")
        if entry is None and isinstance(body.get("feed"), dict):
            entry = body["feed"].get("entry")

        # A single entry is an object; feeds carry a list
        if isinstance(entry, list):
            entry = entry[0] if entry else None

        if not isinstance(entry, dict):
            raise ContactsAPIError("Response contains no contact entry")

        return entry

    def __repr__(self) -> str:
        return (
            f"ContactRecord(id={self.id!r}, title={self.title!r}, "
            f"emails={self.emails()!r})"
        )
