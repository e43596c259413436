"""
Normalization of GData entry fragments into plain Python values.

GData JSON keeps the shape of the Atom XML it mirrors. A phone number
arrives as::

    {"rel": "http://schemas.google.com/g/2005#mobile", "primary": "true",
     "$t": "+1 555 0100"}

and :func:`format_entity` flattens it into::

    {"rel": "mobile", "primary": True, "number": "+1 555 0100"}
"""

from __future__ import annotations

from typing import Any, Optional

from gcontacts.utils.normalization import TEXT_KEY, identifier_key, text_of

# Common prefix of GData "kind" relation URIs
REL_PREFIX = "http://schemas.google.com/g/2005#"


def format_entity(
    unformatted: dict[str, Any],
    default_rel: Optional[str] = None,
    value_key: Optional[str] = None,
) -> dict[str, Any]:
    """
    Flatten one raw GData entity.

    Rules per key:
        - ``primary`` becomes a bool (True for ``True`` or ``"true"``)
        - ``rel`` loses the GData relation URI prefix
        - the text key ``$t`` is stored under ``value_key`` (or ``t``)
        - anything else is namespace-stripped and snake_cased, with text
          nodes unwrapped

    ``rel`` falls back to ``default_rel`` and ``primary`` to False when the
    entity does not carry them. Output of this function can be fed back in
    unchanged.

    Args:
        unformatted: Raw entity mapping from the feed
        default_rel: Relation used when the entity has none
        value_key: Key receiving the entity's text content

    Returns:
        Flat dictionary describing the entity
    """
    attrs: dict[str, Any] = {}

    for key, value in unformatted.items():
        if key == "primary":
            attrs["primary"] = value is True or value == "true"
        elif key == "rel":
            if isinstance(value, str) and value.startswith(REL_PREFIX):
                value = value[len(REL_PREFIX):]
            attrs["rel"] = value
        elif key == TEXT_KEY:
            attrs[value_key or identifier_key(key)] = value
        else:
            attrs[identifier_key(key)] = text_of(value)

    if attrs.get("rel") is None:
        attrs["rel"] = default_rel
    if attrs.get("primary") is None:
        attrs["primary"] = False

    return attrs


def format_address(unformatted: dict[str, Any]) -> dict[str, Any]:
    """Format a structured postal address; addresses default to "work"."""
    return format_entity(unformatted, "work")


def format_phone_number(unformatted: dict[str, Any]) -> dict[str, Any]:
    """Format a phone number, keeping its text under ``number``."""
    return format_entity(unformatted, None, "number")


def parse_birthday(when: str) -> dict[str, Optional[int]]:
    """
    Split a ``gContact$birthday`` date into its parts.

    The date is read right to left (day, month, year), so a birthday without
    a year (``--MM-DD``) yields ``year=None``.

    Examples:
        >>> parse_birthday("1990-04-23")
        {'year': 1990, 'month': 4, 'day': 23}
        >>> parse_birthday("--04-23")
        {'year': None, 'month': 4, 'day': 23}
    """
    parts = when.split("-")[::-1]
    day, month = parts[0], parts[1]
    year = parts[2] if len(parts) > 2 else ""
    return {
        "year": int(year) if year else None,
        "month": int(month),
        "day": int(day),
    }
