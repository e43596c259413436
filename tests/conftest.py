"""
Shared fixtures for the gcontacts test suite.

Provides a representative Contacts API v3 JSON entry and helpers for
building mocked API clients and HTTP responses.
"""

import copy
import json
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest

from gcontacts.api.contacts_api import BASE_URL, ContactsAPI
from gcontacts.records.template import ContactTemplate

CONTACT_ID = "http://www.google.com/m8/feeds/contacts/test%40example.com/base/abc123"
EDIT_URL = "https://www.google.com/m8/feeds/contacts/test%40example.com/full/abc123"
PHOTO_URL = "https://www.google.com/m8/feeds/photos/media/test%40example.com/abc123"
ETAG = '"QHc_fDVSLit7I2A9XRdQFUkITwc."'
PHOTO_ETAG = '"dxt2DAEZfCp7ImA-AV4zRxBoPG4UK3owXBM."'

SAMPLE_ENTRY: dict[str, Any] = {
    "gd$etag": ETAG,
    "id": {"$t": CONTACT_ID},
    "updated": {"$t": "2024-01-15T10:30:00.123Z"},
    "category": [
        {
            "scheme": "http://schemas.google.com/g/2005#kind",
            "term": "http://schemas.google.com/contact/2008#contact",
        }
    ],
    "title": {"$t": "Ada Lovelace"},
    "content": {"$t": "Met at the analytical engine demo", "type": "text"},
    "link": [
        {
            "rel": "http://schemas.google.com/contacts/2008/rel#photo",
            "type": "image/*",
            "href": PHOTO_URL,
            "gd$etag": PHOTO_ETAG,
        },
        {
            "rel": "http://schemas.google.com/contacts/2008/rel#edit_photo",
            "type": "image/*",
            "href": PHOTO_URL,
        },
        {"rel": "self", "type": "application/atom+xml", "href": EDIT_URL},
        {"rel": "edit", "type": "application/atom+xml", "href": EDIT_URL},
        {"rel": "alternate", "type": "text/html", "href": "http://example.com/ada"},
    ],
    "gd$name": {
        "gd$fullName": {"$t": "Countess Ada King Lovelace FRS"},
        "gd$givenName": {"$t": "Ada"},
        "gd$additionalName": {"$t": "King"},
        "gd$familyName": {"$t": "Lovelace"},
        "gd$namePrefix": {"$t": "Countess"},
        "gd$nameSuffix": {"$t": "FRS"},
    },
    "gContact$birthday": {"when": "1815-12-10"},
    "gd$organization": [
        {
            "rel": "http://schemas.google.com/g/2005#work",
            "gd$orgName": {"$t": "Analytical Engines Ltd"},
            "gd$orgTitle": {"$t": "Programmer"},
        }
    ],
    "gd$email": [
        {
            "rel": "http://schemas.google.com/g/2005#home",
            "address": "ada@example.com",
            "primary": "true",
        },
        {
            "rel": "http://schemas.google.com/g/2005#work",
            "address": "ada@work.example.com",
        },
    ],
    "gd$im": [
        {
            "address": "ada@jabber.example.com",
            "protocol": "http://schemas.google.com/g/2005#JABBER",
            "rel": "http://schemas.google.com/g/2005#other",
        }
    ],
    "gd$phoneNumber": [
        {
            "rel": "http://schemas.google.com/g/2005#mobile",
            "uri": "tel:+44-20-7946-0000",
            "primary": "true",
            "$t": "+44 20 7946 0000",
        },
        {"label": "lab", "$t": "020 7946 0001"},
    ],
    "gd$structuredPostalAddress": [
        {
            "rel": "http://schemas.google.com/g/2005#home",
            "mailClass": "http://schemas.google.com/g/2005#both",
            "gd$formattedAddress": {"$t": "12 St James's Square\nLondon"},
            "gd$street": {"$t": "12 St James's Square"},
            "gd$city": {"$t": "London"},
            "gd$country": {"code": "GB", "$t": "United Kingdom"},
        },
        {"gd$city": {"$t": "Ockham"}},
    ],
    "gContact$relation": [
        {"rel": "father", "$t": "Lord Byron"},
        {"rel": "spouse", "$t": "William King"},
    ],
    "gContact$website": [{"href": "http://example.com/ada", "rel": "home-page"}],
}


def make_response(
    status_code: int = 200,
    body: Optional[Any] = None,
    content: bytes = b"",
    headers: Optional[dict[str, str]] = None,
) -> MagicMock:
    """Build a mock HTTP response; ``body`` is serialized as JSON text."""
    response = MagicMock()
    response.status_code = status_code
    response.text = json.dumps(body) if body is not None else ""
    response.content = content
    response.headers = headers or {}
    return response


def entry_response(entry: dict[str, Any], status_code: int = 200) -> MagicMock:
    """Response carrying a single contact entry."""
    return make_response(status_code, {"version": "1.0", "entry": entry})


@pytest.fixture(scope="session")
def template() -> ContactTemplate:
    """Contact template loaded once for the test session."""
    return ContactTemplate()


@pytest.fixture
def sample_entry() -> dict[str, Any]:
    """A fresh copy of the sample contact entry."""
    return copy.deepcopy(SAMPLE_ENTRY)


@pytest.fixture
def api(template: ContactTemplate) -> MagicMock:
    """Mock API client with a real template and the default feed root."""
    mock_api = MagicMock(spec=ContactsAPI)
    mock_api.base_url = BASE_URL
    mock_api.template = template
    return mock_api
