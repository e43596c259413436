"""
Google Contacts API v3 client.

Provides the HTTP collaborator used by contact records:
- Authenticated GET/POST/PUT against the GData contacts feeds
- URL normalization relative to the feed root
- Mapping of failed HTTP responses onto a small exception hierarchy
- Timestamp formatting required by the Atom payloads

Every request asks for the JSON rendition of the feed (``alt=json``) and
pins the protocol version with the ``GData-Version`` header. Nothing here
retries: a failed call surfaces immediately to the caller.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import requests
from google.auth.transport.requests import AuthorizedSession
from google.oauth2.credentials import Credentials

from gcontacts.config.settings import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, ClientSettings
from gcontacts.records.template import ContactTemplate

# Feed root; relative URLs are resolved against it
BASE_URL = DEFAULT_BASE_URL

# OAuth scope covering the contacts feeds
SCOPES = ["https://www.google.com/m8/feeds"]

# Protocol version sent with every request
GDATA_VERSION = "3.0"

# Collection that new contacts are posted to
CONTACTS_FEED = "contacts/default/full"

# Content type of create/update payloads
ATOM_CONTENT_TYPE = "application/atom+xml"

logger = logging.getLogger(__name__)


class ContactsAPIError(Exception):
    """Raised when a Contacts API operation fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ContactsAuthorizationError(ContactsAPIError):
    """Raised on 401/403 responses or when no credentials are available."""

    pass


class ContactNotFoundError(ContactsAPIError):
    """Raised on 404 responses."""

    pass


class ContactModifiedError(ContactsAPIError):
    """
    Raised on 412 Precondition Failed.

    The contact was edited on the server after it was loaded, so the etag
    sent in If-Match no longer matches. Re-fetch and reapply the changes.
    """

    pass


class ContactsServerError(ContactsAPIError):
    """Raised on 5xx responses."""

    pass


def parse_response_code(response: Any) -> int:
    """Return the integer HTTP status of a response."""
    return int(response.status_code)


def raise_if_failed_response(response: Any) -> None:
    """
    Raise the matching ContactsAPIError subclass for a 4xx/5xx response.

    Args:
        response: Response exposing ``status_code``

    Raises:
        ContactsAuthorizationError: 401 or 403
        ContactNotFoundError: 404
        ContactModifiedError: 412
        ContactsAPIError: any other 4xx
        ContactsServerError: 5xx
    """
    status = parse_response_code(response)

    if status < 400:
        return

    if status in (401, 403):
        raise ContactsAuthorizationError(
            f"HTTP {status}: Not authorized to access contact", status
        )
    if status == 404:
        raise ContactNotFoundError(f"HTTP {status}: Contact not found", status)
    # The feed answers 412 when the If-Match etag is stale
    if status == 412:
        raise ContactModifiedError("HTTP 412: Contact Modified Since Load", status)
    if status < 500:
        raise ContactsAPIError(f"HTTP {status}: Request rejected", status)
    raise ContactsServerError(f"HTTP {status}: Server error", status)


def format_time_for_xml(time: datetime) -> str:
    """
    Format a timestamp the way Atom ``<updated>`` elements expect it.

    Example:
        >>> format_time_for_xml(datetime(2024, 1, 2, 3, 4, 5, 678000, timezone.utc))
        '2024-01-02T03:04:05.678Z'
    """
    utc = time.astimezone(timezone.utc)
    return f"{utc.strftime('%Y-%m-%dT%H:%M:%S')}.{utc.microsecond // 1000:03d}Z"


def normalize_url(url: str, base_url: str = BASE_URL) -> str:
    """
    Upgrade a feed URL to https and make it relative to the feed root.

    Contact ids are published as ``http://www.google.com/m8/feeds/...``;
    requests must go over https.

    Example:
        >>> normalize_url("http://www.google.com/m8/feeds/contacts/a%40b.com/base/1")
        'contacts/a%40b.com/base/1'
    """
    if url.startswith("http://"):
        url = "https://" + url[len("http://"):]
    if url.startswith(base_url):
        url = url[len(base_url):]
    return url


def load_credentials(token_path: Path | str) -> Credentials:
    """
    Load stored authorized-user credentials.

    The token file is the JSON written by google-auth's ``Credentials.to_json``.
    Expired access tokens are refreshed by the authorized session on first use.

    Raises:
        ContactsAuthorizationError: If the file is missing or unreadable
    """
    token_path = Path(token_path)

    if not token_path.exists():
        raise ContactsAuthorizationError(f"No stored credentials at {token_path}")

    try:
        creds: Credentials = Credentials.from_authorized_user_file(
            str(token_path), SCOPES
        )
    except ValueError as e:
        raise ContactsAuthorizationError(
            f"Invalid token file {token_path}: {e}"
        ) from e

    logger.debug(f"Loaded credentials from {token_path}")
    return creds


class ContactsAPI:
    """
    Authenticated HTTP client for the Contacts API v3 feeds.

    Attributes:
        credentials: Google OAuth2 credentials with the contacts feed scope
        base_url: Feed root relative URLs are resolved against
        timeout: Per-request timeout in seconds
        template: Shared contact XML template used by records bound to this client

    Usage:
        api = ContactsAPI(credentials)

        response = api.get("contacts/default/full/12345")
        response = api.post(CONTACTS_FEED, xml)
        response = api.put(url, xml, {}, {"If-Match": etag})
    """

    def __init__(
        self,
        credentials: Credentials,
        base_url: str = BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        template: Optional[ContactTemplate] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            credentials: Valid Google OAuth2 credentials
            base_url: Feed root (default https://www.google.com/m8/feeds/)
            timeout: Request timeout in seconds (default 30)
            template: Contact template; loaded from the package when omitted
            session: Pre-built requests session (an AuthorizedSession is
                     created on first use when omitted)
        """
        self.credentials = credentials
        self.base_url = base_url
        self.timeout = timeout
        self.template = template if template is not None else ContactTemplate()
        self._session = session

    @classmethod
    def from_settings(
        cls, settings: ClientSettings, template: Optional[ContactTemplate] = None
    ) -> "ContactsAPI":
        """Build a client from loaded settings and their stored token file."""
        return cls(
            load_credentials(settings.token_file),
            base_url=settings.base_url,
            timeout=settings.timeout,
            template=template,
        )

    @property
    def session(self) -> requests.Session:
        """
        Get or create the authorized HTTP session.

        Raises:
            ContactsAuthorizationError: If the session cannot be created
        """
        if self._session is None:
            try:
                self._session = AuthorizedSession(self.credentials)
                logger.debug("Created authorized session")
            except Exception as e:
                logger.error(f"Failed to create authorized session: {e}")
                raise ContactsAuthorizationError(
                    f"Failed to create authorized session: {e}"
                ) from e
        return self._session

    def url_for(self, url: str) -> str:
        """Resolve a feed-relative URL against base_url."""
        if url.startswith(("http://", "https://")):
            return url
        return self.base_url + url.lstrip("/")

    def request(
        self,
        method: str,
        url: str,
        body: Optional[str] = None,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> requests.Response:
        """
        Issue one request and return the raw response.

        Status codes are not checked here; callers decide whether a failure
        is fatal (record writes) or expected (photo fetches).
        """
        full_url = self.url_for(url)

        query = {"alt": "json"}
        query.update(params or {})

        request_headers = {"GData-Version": GDATA_VERSION}
        if body is not None:
            request_headers["Content-Type"] = ATOM_CONTENT_TYPE
        request_headers.update(headers or {})

        logger.debug(f"{method} {full_url}")

        response = self.session.request(
            method,
            full_url,
            params=query,
            data=body.encode("utf-8") if body is not None else None,
            headers=request_headers,
            timeout=self.timeout,
        )

        logger.debug(f"{method} {full_url} -> {response.status_code}")
        return response

    def get(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> requests.Response:
        """GET a feed URL."""
        return self.request("GET", url, params=params, headers=headers)

    def post(
        self,
        url: str,
        body: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> requests.Response:
        """POST an Atom payload to a feed URL."""
        return self.request("POST", url, body=body, params=params, headers=headers)

    def put(
        self,
        url: str,
        body: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> requests.Response:
        """PUT an Atom payload to a feed URL."""
        return self.request("PUT", url, body=body, params=params, headers=headers)

    def put_photo(
        self, url: str, data: bytes, content_type: str = "image/jpeg"
    ) -> requests.Response:
        """
        Replace a contact photo.

        Photo edits are unconditional (``If-Match: *``) and carry raw image
        bytes instead of an Atom payload.
        """
        full_url = self.url_for(url)
        logger.debug(f"PUT {full_url} ({len(data)} bytes, {content_type})")

        response = self.session.request(
            "PUT",
            full_url,
            data=data,
            headers={
                "GData-Version": GDATA_VERSION,
                "Content-Type": content_type,
                "If-Match": "*",
            },
            timeout=self.timeout,
        )

        logger.debug(f"PUT {full_url} -> {response.status_code}")
        return response
