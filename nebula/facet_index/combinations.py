"""
Filter combination generation.

Pre-computes every filter set that has at least one matching item, then
expands those into one page per sort option, and produces redirects for
filter paths that would otherwise 404 (a key with no value yet).
"""

import logging
from typing import Iterable, Sequence

from .index import FacetIndex
from .matcher import count_matches
from .models import FilterCombination, FilterSet, Redirect, SortSpec
from .paths import DEFAULT_SORT, filter_to_path, to_sorted_path

logger = logging.getLogger(__name__)


def generate_filter_combinations(
    index: FacetIndex,
    attributes: dict[str, list[str]],
) -> list[FilterCombination]:
    """
    Generate all filter combinations that have matching items.

    Keys are taken in sorted order and each combination only extends with
    keys after the last one it used, so every filter set appears once.

    Args:
        index: Index for the snapshot
        attributes: Output of get_all_filter_attributes for the same snapshot

    Returns:
        [FilterCombination({"color": "red"}, "color/red", 5), ...] depth-first
    """
    keys = sorted(attributes)
    combinations: list[FilterCombination] = []

    def extend(current: FilterSet, start: int):
        for i in range(start, len(keys)):
            key = keys[i]
            for value in attributes[key]:
                filters = {**current, key: value}
                count = count_matches(index, filters, index.item_count)
                if count == 0:
                    continue
                combinations.append(
                    FilterCombination(filters=filters, path=filter_to_path(filters), count=count)
                )
                extend(filters, i + 1)

    extend({}, 0)
    logger.info(
        f"Generated {len(combinations)} filter combinations for snapshot '{index.snapshot_id}'"
    )
    return combinations


def expand_with_sort_variants(
    combinations: Iterable[FilterCombination],
    sort_options: Sequence[SortSpec],
) -> list[FilterCombination]:
    """
    One entry per combination per sort option.

    Default sort keeps the bare path; others get a suffix like "/price-asc".
    """
    return [
        FilterCombination(
            filters=combo.filters,
            path=to_sorted_path(combo.filters, spec.key),
            count=combo.count,
            sort_key=spec.key,
        )
        for combo in combinations
        for spec in sort_options
    ]


def generate_sort_only_pages(
    total_count: int,
    sort_options: Sequence[SortSpec],
) -> list[FilterCombination]:
    """Sort-only pages for the unfiltered listing (default sort has no page here)."""
    return [
        FilterCombination(filters={}, path=spec.key, count=total_count, sort_key=spec.key)
        for spec in sort_options
        if spec.key != DEFAULT_SORT
    ]


def generate_filter_redirects(
    attribute_keys: Iterable[str],
    combinations: Iterable[FilterCombination],
    search_url: str,
) -> list[Redirect]:
    """
    Redirects for paths ending in a bare filter key.

    "/products/search/size/" -> "/products/search/#content"
    "/products/search/color/red/size/" -> "/products/search/color/red/#content"
    """
    keys = list(attribute_keys)
    if not keys:
        return []

    def to_redirect(base_path: str, key: str) -> Redirect:
        return Redirect(
            source=f"{search_url}{base_path}/{key}/",
            target=f"{search_url}{base_path}/#content",
        )

    redirects = [to_redirect("", key) for key in keys]
    for combo in combinations:
        redirects.extend(
            to_redirect(f"/{combo.path}", key) for key in keys if key not in combo.filters
        )
    return redirects


def build_filter_description(filters: FilterSet, display_lookup: dict[str, str]) -> str:
    """
    Human-readable summary of a filter set.

    {"size": "compact", "type": "pro"} -> "Size: Compact, Type: Pro"
    """
    return ", ".join(
        f"{display_lookup.get(key, key)}: {display_lookup.get(value, value)}"
        for key, value in filters.items()
    )
