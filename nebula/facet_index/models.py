"""
Data models for the facet index.

All structured data uses dataclasses for type hints, __eq__, and __repr__.
Items and snapshots are frozen: a snapshot is never mutated once a
generation run has started using it.
"""

import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from functools import cached_property
from typing import Any, Callable, Optional, Union

from .parser import parse_filter_attributes

# Normalized attribute key -> normalized attribute value
FilterSet = dict[str, str]

Price = Union[int, float, Decimal]


@dataclass(frozen=True)
class FilterAttribute:
    """A raw facet pair as entered by a human, e.g. ("Size", "Small")."""
    name: str
    value: str


@dataclass(frozen=True)
class Item:
    """
    One content record in a collection snapshot.

    The item's position is its index in Snapshot.items, not a field here:
    the same item may sit at different positions in different snapshots.
    """
    attributes: Optional[tuple[FilterAttribute, ...]] = None
    title: str = ""
    price: Optional[Price] = None
    order: Optional[int] = None  # Display order for the default sort
    url: Optional[str] = None
    data: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @cached_property
    def filters(self) -> FilterSet:
        """Parsed filter set, computed once per item."""
        return parse_filter_attributes(self.attributes, item=self.title or None)


@dataclass(frozen=True)
class Snapshot:
    """
    A fixed list of items for one generation pass.

    snapshot_id scopes every cache entry. Two snapshots holding the same
    items (e.g. "all products" and a category that happens to contain all of
    them) are still cached separately.
    """
    snapshot_id: str
    items: tuple[Item, ...]

    @classmethod
    def create(cls, items, snapshot_id: Optional[str] = None) -> "Snapshot":
        return cls(snapshot_id=snapshot_id or uuid.uuid4().hex, items=tuple(items))

    def __len__(self) -> int:
        return len(self.items)


# cmp-style comparator over two items
Comparator = Callable[[Item, Item], int]


@dataclass(frozen=True)
class SortSpec:
    """A named sort order offered on listing pages."""
    key: str
    label: str
    comparator: Comparator


@dataclass
class FilterCombination:
    """A filter set that matches at least one item."""
    filters: FilterSet
    path: str
    count: int
    sort_key: str = "default"


@dataclass
class FilterPage:
    """
    Everything the page pipeline needs for one output page.

    items and path are derived from the same filters + sort_key.
    """
    filters: FilterSet
    sort_key: str
    path: str
    count: int
    items: tuple[Item, ...]
    description: str = ""


@dataclass(frozen=True)
class Redirect:
    """A redirect rule for a filter path that has no page."""
    source: str
    target: str
