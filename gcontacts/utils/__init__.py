"""
gcontacts.utils - Utility module

Common utilities including logging configuration and key normalization.
"""

from gcontacts.utils.normalization import identifier_key, text_of, underscore
from gcontacts.utils.paths import DEFAULT_CONFIG_DIR, resolve_config_dir

__all__ = [
    "identifier_key",
    "text_of",
    "underscore",
    "resolve_config_dir",
    "DEFAULT_CONFIG_DIR",
]
