"""
gcontacts.api - HTTP access to the Google Contacts API v3 feeds
"""

from gcontacts.api.contacts_api import (
    BASE_URL,
    CONTACTS_FEED,
    ContactModifiedError,
    ContactNotFoundError,
    ContactsAPI,
    ContactsAPIError,
    ContactsAuthorizationError,
    ContactsServerError,
)

__all__ = [
    "BASE_URL",
    "CONTACTS_FEED",
    "ContactModifiedError",
    "ContactNotFoundError",
    "ContactsAPI",
    "ContactsAPIError",
    "ContactsAuthorizationError",
    "ContactsServerError",
]
