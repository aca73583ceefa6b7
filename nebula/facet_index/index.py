"""
Facet Index - fast lookup structures for attribute filtering.

Instead of scanning every item for every filter combination, we build
lookup dictionaries once per snapshot:
- by_key: normalized key -> normalized value -> set of item positions
- facet options: key -> sorted values (for filter controls)
- display lookup: slug -> original text (for labels)

Memoization per snapshot lives in the run (see cache.SnapshotMemo); these
functions just build.
"""

import logging
from dataclasses import dataclass, field

from .errors import InvalidFilterAttributeError
from .models import Item, Snapshot
from .normalize import normalize, slugify
from .parser import split_attribute

logger = logging.getLogger(__name__)

_NO_POSITIONS: frozenset[int] = frozenset()


@dataclass
class FacetIndex:
    """
    Inverted index over one snapshot.

    Attributes:
        snapshot_id: Snapshot this index was built from
        by_key: Dict mapping key -> value -> positions (both normalized)
        item_count: Number of items in the snapshot
    """
    snapshot_id: str
    by_key: dict[str, dict[str, set[int]]] = field(default_factory=dict)
    item_count: int = 0

    def positions(self, key: str, value: str) -> frozenset[int] | set[int]:
        """Positions of items with key=value, or an empty set if never seen."""
        return self.by_key.get(normalize(key), {}).get(normalize(value), _NO_POSITIONS)

    def has(self, key: str, value: str) -> bool:
        """Check if any item carries key=value."""
        return normalize(value) in self.by_key.get(normalize(key), {})

    @property
    def keys(self) -> list[str]:
        return sorted(self.by_key)


def build_item_lookup(snapshot: Snapshot) -> FacetIndex:
    """
    Build the inverted index for a snapshot.

    Example: {"color": {"red": {0, 2}, "blue": {1}}, "size": {"large": {0, 1}}}

    Args:
        snapshot: Items to index, in snapshot order

    Returns:
        FacetIndex keyed on normalized attribute keys and values
    """
    index = FacetIndex(snapshot_id=snapshot.snapshot_id)

    for position, item in enumerate(snapshot.items):
        for key, value in _item_filters(snapshot, item).items():
            values = index.by_key.setdefault(normalize(key), {})
            values.setdefault(normalize(value), set()).add(position)

    index.item_count = len(snapshot.items)
    logger.info(
        f"Indexed {index.item_count} items across {len(index.by_key)} facets "
        f"for snapshot '{snapshot.snapshot_id}'"
    )
    return index


def get_all_filter_attributes(snapshot: Snapshot) -> dict[str, list[str]]:
    """
    Map every facet key to its possible values, both sorted.

    Returns: {"capacity": ["1", "2", "3"], "size": ["large", "small"]}
    """
    values_by_key: dict[str, set[str]] = {}
    for item in snapshot.items:
        for key, value in _item_filters(snapshot, item).items():
            values_by_key.setdefault(key, set()).add(value)

    return {key: sorted(values_by_key[key]) for key in sorted(values_by_key)}


def build_display_lookup(snapshot: Snapshot) -> dict[str, str]:
    """
    Map slugs back to their original display text.

    Returns: {"size": "Size", "compact": "Compact", "pro": "Pro"}
    First occurrence wins when several spellings share a slug.
    """
    lookup: dict[str, str] = {}
    for item in snapshot.items:
        if not item.attributes:
            continue
        for attribute in item.attributes:
            try:
                name, value = split_attribute(attribute, item=item.title or None)
            except InvalidFilterAttributeError as e:
                raise e.in_snapshot(snapshot.snapshot_id) from e
            lookup.setdefault(slugify(name), name)
            lookup.setdefault(slugify(value), value)
    return lookup


def _item_filters(snapshot: Snapshot, item: Item) -> dict[str, str]:
    try:
        return item.filters
    except InvalidFilterAttributeError as e:
        raise e.in_snapshot(snapshot.snapshot_id) from e
