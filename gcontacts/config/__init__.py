"""
gcontacts.config - Configuration management module

Contains configuration loading, validation, and client settings.
"""

from gcontacts.config.loader import DEFAULT_CONFIG_FILE, ConfigError, ConfigLoader
from gcontacts.config.settings import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    ClientSettings,
)

__all__ = [
    "ClientSettings",
    "ConfigError",
    "ConfigLoader",
    "DEFAULT_BASE_URL",
    "DEFAULT_CONFIG_FILE",
    "DEFAULT_TIMEOUT",
]
