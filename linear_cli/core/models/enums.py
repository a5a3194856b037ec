"""Shared enumerations used across the CLI core."""

from __future__ import annotations

from enum import StrEnum

# -- Cache -------------------------------------------------------------------


class CacheType(StrEnum):
    """Reference data kinds mirrored in the local cache.

    The set is closed: each member owns exactly one file in the cache
    directory.
    """

    TEAMS = "teams"
    USERS = "users"
    STATUSES = "statuses"
    LABELS = "labels"

    @property
    def filename(self) -> str:
        return f"{self.value}.json"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, name: str) -> CacheType:
        """Parse a user-supplied cache type name (case-insensitive).

        ``states`` is accepted as an alias for ``statuses``.  Raises
        ``ValueError`` naming the valid types for anything else.
        """
        normalized = name.strip().lower()
        if normalized == "states":
            return cls.STATUSES
        try:
            return cls(normalized)
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            msg = f"Unknown cache type: '{name}'. Valid types: {valid}"
            raise ValueError(msg) from None


# -- Output ------------------------------------------------------------------


class OutputFormat(StrEnum):
    TABLE = "table"
    JSON = "json"


class LabelKind(StrEnum):
    """Which label collection to read."""

    ISSUE = "issue"
    PROJECT = "project"
