"""
Facet Matcher - answers multi-attribute queries against a FacetIndex.

Algorithm:
1. Take the candidate positions for the first filter entry
2. Keep candidates that are members of every other entry's position set
   (membership tests, no intermediate sets)
3. Map positions back to items in snapshot order

Unknown key/value pairs give zero matches. Strict mode raises instead,
for pipelines that only ever request combinations they generated.
"""

import logging
from typing import Optional

from .cache import ResultCache
from .errors import UnknownFilterError
from .index import FacetIndex
from .models import FilterSet, Item, Snapshot
from .normalize import normalize_attrs
from .paths import filter_to_path
from .sorting import sort_items

logger = logging.getLogger(__name__)


def find_matching_positions(
    index: FacetIndex,
    filters: FilterSet,
    strict: bool = False,
) -> list[int]:
    """
    Find item positions that match ALL the given filters.

    Args:
        index: Index from build_item_lookup
        filters: Non-empty filter set (slugged or already normalized)
        strict: Raise UnknownFilterError instead of matching nothing

    Returns:
        Matching positions, ascending
    """
    entries = list(normalize_attrs(filters).items())
    if not entries:
        return []

    for key, value in entries:
        if not index.has(key, value):
            if strict:
                raise UnknownFilterError(key, value, index.snapshot_id)
            logger.debug(f"No items with {key}={value} in snapshot '{index.snapshot_id}'")
            return []

    (first_key, first_value), rest = entries[0], entries[1:]
    others = [index.positions(key, value) for key, value in rest]
    candidates = sorted(index.positions(first_key, first_value))

    return [pos for pos in candidates if all(pos in positions for positions in others)]


def count_matches(
    index: FacetIndex,
    filters: FilterSet,
    total_items: int,
    strict: bool = False,
) -> int:
    """
    Count items matching the filters.

    No filters means everything matches, so total_items comes back as-is.
    """
    if not filters:
        return total_items
    return len(find_matching_positions(index, filters, strict=strict))


def get_matching_items(
    snapshot: Snapshot,
    filters: FilterSet,
    index: FacetIndex,
    cache: ResultCache,
    strict: bool = False,
) -> tuple[Item, ...]:
    """
    Items matching the filters, in snapshot order (unsorted).

    Empty filters return snapshot.items untouched. Otherwise the result is
    cached under (snapshot id, filter path); a hit returns the stored tuple
    without touching the index.
    """
    if not filters:
        return snapshot.items

    def compute() -> tuple[Item, ...]:
        positions = find_matching_positions(index, filters, strict=strict)
        return tuple(snapshot.items[pos] for pos in positions)

    return cache.get_or_compute(snapshot.snapshot_id, filter_to_path(filters), compute)


def match_with_sort(
    snapshot: Snapshot,
    filters: FilterSet,
    index: FacetIndex,
    sort_key: Optional[str],
    cache: ResultCache,
    strict: bool = False,
) -> list[Item]:
    """Matching items ordered by the named sort (unknown keys use default)."""
    return sort_items(get_matching_items(snapshot, filters, index, cache, strict=strict), sort_key)
