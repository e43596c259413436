"""
Client settings for the Google Contacts API.

Turns a validated configuration dictionary into typed settings consumed by
:class:`gcontacts.api.contacts_api.ContactsAPI` and the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from gcontacts.utils.paths import resolve_token_path

# Contacts API v3 feed root
DEFAULT_BASE_URL = "https://www.google.com/m8/feeds/"

# Seconds before an HTTP request is abandoned by the transport
DEFAULT_TIMEOUT = 30.0


@dataclass
class ClientSettings:
    """
    Settings for talking to the Contacts API.

    Attributes:
        token_file: Stored authorized-user credentials (JSON)
        base_url: Feed root all relative URLs are resolved against
        timeout: Per-request timeout in seconds, passed to the transport
        log_level: Level name for the package logger
        log_file: Optional file receiving DEBUG output
        verbose: Verbose console logging

    Usage:
        loader = ConfigLoader()
        settings = ClientSettings.from_dict(loader.load_and_validate())
    """

    token_file: Path
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"
    log_file: Path | None = None
    verbose: bool = False

    @classmethod
    def from_dict(
        cls, data: dict[str, Any] | None, config_dir: Path | str | None = None
    ) -> ClientSettings:
        """
        Build settings from a configuration dictionary.

        Missing keys take their defaults. The base URL always ends with a
        slash so that relative feed paths can be appended to it.
        """
        data = data or {}

        base_url = data.get("base_url", DEFAULT_BASE_URL)
        if not base_url.endswith("/"):
            base_url += "/"

        log_file = data.get("log_file")

        return cls(
            token_file=resolve_token_path(data.get("token_file"), config_dir),
            base_url=base_url,
            timeout=float(data.get("timeout", DEFAULT_TIMEOUT)),
            log_level=data.get("log_level", "INFO"),
            log_file=Path(log_file).expanduser() if log_file else None,
            verbose=bool(data.get("verbose", False)),
        )
