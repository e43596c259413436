"""
Staging of contact field changes before they are sent to the API.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

# Fields that a create or update request writes, in payload order
RECOGNIZED_FIELDS = (
    "name_prefix",
    "given_name",
    "additional_name",
    "family_name",
    "name_suffix",
    "content",
    "emails",
    "phone_numbers",
    "addresses",
    "organizations",
    "websites",
)


class ChangeSet:
    """
    Accumulates replacement values for recognized contact fields.

    Later merges overwrite matching keys; other keys accumulate.

    Usage:
        changes = ChangeSet()
        changes.merge({"given_name": "Ada"})
        changes.merge({"family_name": "Lovelace"})
        changes.as_dict()  # {"given_name": "Ada", "family_name": "Lovelace"}
    """

    def __init__(self, initial: Mapping[str, Any] | None = None):
        self._changes: dict[str, Any] = {}
        if initial:
            self.merge(initial)

    def merge(self, partial: Mapping[str, Any]) -> dict[str, Any]:
        """
        Merge a partial mapping into the staged changes.

        Raises:
            ValueError: If a key is not a recognized field
        """
        unknown = [key for key in partial if key not in RECOGNIZED_FIELDS]
        if unknown:
            raise ValueError(
                f"Unrecognized contact field(s): {', '.join(sorted(unknown))}. "
                f"Must be among: {', '.join(RECOGNIZED_FIELDS)}"
            )
        self._changes.update(partial)
        return self.as_dict()

    def as_dict(self) -> dict[str, Any]:
        """Return a copy of the staged changes."""
        return dict(self._changes)

    def clear(self) -> None:
        self._changes.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._changes

    def __len__(self) -> int:
        return len(self._changes)

    def __bool__(self) -> bool:
        return bool(self._changes)

    def __repr__(self) -> str:
        return f"ChangeSet({self._changes!r})"
