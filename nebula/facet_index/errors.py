"""
Errors raised by the facet index.

All of them subclass ValueError so callers that already treat bad input
as ValueError (the CLI does) keep working.
"""

from typing import Optional


class FacetIndexError(ValueError):
    """Base class for facet index errors."""


class InvalidFilterAttributeError(FacetIndexError):
    """A raw attribute pair is missing its name or value."""

    def __init__(
        self,
        attribute,
        item: Optional[str] = None,
        snapshot_id: Optional[str] = None,
    ):
        self.attribute = attribute
        self.item = item
        self.snapshot_id = snapshot_id
        where = f" on item '{item}'" if item else ""
        if snapshot_id:
            where += f" in snapshot '{snapshot_id}'"
        super().__init__(f"Invalid filter attribute{where}: {attribute!r}")

    def in_snapshot(self, snapshot_id: str) -> "InvalidFilterAttributeError":
        """Same error, with the snapshot it was found in."""
        return InvalidFilterAttributeError(self.attribute, item=self.item, snapshot_id=snapshot_id)


class UnknownFilterError(FacetIndexError):
    """A filter key/value has no entry in the snapshot's index (strict mode only)."""

    def __init__(self, key: str, value: str, snapshot_id: str):
        self.key = key
        self.value = value
        self.snapshot_id = snapshot_id
        super().__init__(
            f"Unknown filter {key}={value} for snapshot '{snapshot_id}'"
        )
