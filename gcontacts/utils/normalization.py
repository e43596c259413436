"""
Key normalization utilities for GData JSON entries.

The Contacts API v3 JSON feed mirrors the Atom XML it is generated from:
element names keep their namespace prefix (``gd$email``, ``gContact$website``)
and element text is wrapped as ``{"$t": ...}``. These helpers turn such keys
into plain Python identifiers.
"""

from __future__ import annotations

import re
from typing import Any

# Key holding element text in the JSON rendition of an Atom element
TEXT_KEY = "$t"

_CAMEL_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_LOWER_UPPER = re.compile(r"([a-z\d])([A-Z])")


def strip_namespace(key: str) -> str:
    """
    Remove a vendor namespace prefix from a key.

    Examples:
        >>> strip_namespace("gd$formattedAddress")
        'formattedAddress'
        >>> strip_namespace("gContact$website")
        'website'
        >>> strip_namespace("$t")
        't'
        >>> strip_namespace("address")
        'address'
    """
    if "$" in key:
        return key.rsplit("$", 1)[1]
    return key


def underscore(value: str) -> str:
    """
    Convert a camelCase or hyphenated name to snake_case.

    Examples:
        >>> underscore("formattedAddress")
        'formatted_address'
        >>> underscore("orgJobDescription")
        'org_job_description'
        >>> underscore("HTMLLink")
        'html_link'
    """
    result = _CAMEL_BOUNDARY.sub(r"\1_\2", value)
    result = _LOWER_UPPER.sub(r"\1_\2", result)
    return result.replace("-", "_").lower()


def identifier_key(key: str) -> str:
    """Namespace-stripped, snake_cased form of a raw GData key."""
    return underscore(strip_namespace(key))


def is_text_node(value: Any) -> bool:
    """Return True if value has the ``{"$t": ...}`` text node shape."""
    return isinstance(value, dict) and TEXT_KEY in value


def text_of(value: Any) -> Any:
    """Unwrap a text node, returning other values unchanged."""
    if is_text_node(value):
        return value[TEXT_KEY]
    return value
