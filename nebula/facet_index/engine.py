"""
Facet Engine - one generation run over one or more snapshots.

Owns the run-scoped caches. Everything memoized here (indexes, facet
views, combinations, match results) is keyed by snapshot id and dropped by
close(), or per snapshot by release().

Usage:
    with FacetEngine(config) as engine:
        snapshot = Snapshot.create(items, snapshot_id="products")
        for page in engine.build_pages(snapshot):
            render(page.path, page.items)
"""

import logging
from typing import Optional

from .cache import ResultCache, SnapshotMemo
from .combinations import (
    build_filter_description,
    expand_with_sort_variants,
    generate_filter_combinations,
    generate_filter_redirects,
    generate_sort_only_pages,
)
from .config import Config
from .index import FacetIndex, build_display_lookup, build_item_lookup, get_all_filter_attributes
from .matcher import count_matches, get_matching_items, match_with_sort
from .models import FilterCombination, FilterPage, FilterSet, Item, Redirect, Snapshot
from .paths import to_sorted_path
from .sorting import get_sort_spec

logger = logging.getLogger(__name__)


class FacetEngine:
    """Index, match and cache facet queries for a single generation run."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self._memo = SnapshotMemo()
        self._results = ResultCache()
        self._closed = False

    def __enter__(self) -> "FacetEngine":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # -- per-snapshot views -------------------------------------------------

    def index(self, snapshot: Snapshot) -> FacetIndex:
        """Inverted index for a snapshot, built on first use."""
        self._check_open()
        return self._memo.get_or_build("index", snapshot.snapshot_id, lambda: build_item_lookup(snapshot))

    def attributes(self, snapshot: Snapshot) -> dict[str, list[str]]:
        """Facet key -> sorted values, for filter controls."""
        self._check_open()
        return self._memo.get_or_build(
            "attributes", snapshot.snapshot_id, lambda: get_all_filter_attributes(snapshot)
        )

    def display_lookup(self, snapshot: Snapshot) -> dict[str, str]:
        """Slug -> original display text (first spelling wins)."""
        self._check_open()
        return self._memo.get_or_build(
            "display", snapshot.snapshot_id, lambda: build_display_lookup(snapshot)
        )

    def combinations(self, snapshot: Snapshot) -> list[FilterCombination]:
        """Every filter set with at least one match."""
        self._check_open()
        return self._memo.get_or_build(
            "combinations",
            snapshot.snapshot_id,
            lambda: generate_filter_combinations(self.index(snapshot), self.attributes(snapshot)),
        )

    # -- queries -------------------------------------------------------------

    def count(self, snapshot: Snapshot, filters: FilterSet) -> int:
        return count_matches(
            self.index(snapshot), filters, len(snapshot), strict=self.config.strict_lookup
        )

    def matching_items(self, snapshot: Snapshot, filters: FilterSet) -> tuple[Item, ...]:
        """Unsorted matches, served from the result cache when possible."""
        return get_matching_items(
            snapshot, filters, self.index(snapshot), self._results, strict=self.config.strict_lookup
        )

    def match(self, snapshot: Snapshot, filters: FilterSet, sort_key: Optional[str] = None) -> list[Item]:
        """Matches ordered by the named sort."""
        return match_with_sort(
            snapshot,
            filters,
            self.index(snapshot),
            sort_key,
            self._results,
            strict=self.config.strict_lookup,
        )

    def page(self, snapshot: Snapshot, filters: FilterSet, sort_key: Optional[str] = None) -> FilterPage:
        """
        Items plus route for one output page.

        The path and the cache key come from the same filters, so they
        always agree. Unknown sort keys fall back to the default order and
        get no path suffix.
        """
        sort_key = get_sort_spec(sort_key).key
        items = self.match(snapshot, filters, sort_key)
        return FilterPage(
            filters=dict(filters),
            sort_key=sort_key,
            path=to_sorted_path(filters, sort_key),
            count=len(items),
            items=tuple(items),
            description=build_filter_description(filters, self.display_lookup(snapshot)),
        )

    def build_pages(self, snapshot: Snapshot) -> list[FilterPage]:
        """
        Every filtered page under every enabled sort, plus sort-only pages.

        Each filter set hits the matcher once; the other sort variants come
        out of the result cache.
        """
        sort_specs = self.config.sort_specs()
        variants = expand_with_sort_variants(self.combinations(snapshot), sort_specs)
        variants += generate_sort_only_pages(len(snapshot), sort_specs)

        pages = [self.page(snapshot, combo.filters, combo.sort_key) for combo in variants]
        logger.info(f"Built {len(pages)} pages for snapshot '{snapshot.snapshot_id}'")
        return pages

    def redirects(self, snapshot: Snapshot, search_url: Optional[str] = None) -> list[Redirect]:
        """Redirect rules for bare-key filter paths."""
        return generate_filter_redirects(
            self.attributes(snapshot),
            self.combinations(snapshot),
            search_url or self.config.search_url,
        )

    # -- lifecycle -----------------------------------------------------------

    def release(self, snapshot: Snapshot):
        """Forget everything cached for one snapshot."""
        dropped = self._results.release(snapshot.snapshot_id)
        dropped += self._memo.release(snapshot.snapshot_id)
        logger.debug(f"Released {dropped} cache entries for snapshot '{snapshot.snapshot_id}'")

    def close(self):
        """Tear down all run-scoped caches."""
        if self._closed:
            return
        stats = self._results.stats()
        logger.info(
            f"Facet run closed: {stats.misses} matcher passes, {stats.hits} cache hits "
            f"({stats.hit_rate:.0%})"
        )
        self._results.clear()
        self._memo.clear()
        self._closed = True

    @property
    def stats(self):
        return self._results.stats()

    def _check_open(self):
        if self._closed:
            raise RuntimeError("FacetEngine is closed; start a new run")
