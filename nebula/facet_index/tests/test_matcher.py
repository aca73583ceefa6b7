"""
Tests for the matcher: intersection, counting, cached matching, sorting.

Run with: pytest nebula/facet_index/tests/test_matcher.py -v
"""

import itertools

import pytest

from nebula.facet_index.cache import ResultCache
from nebula.facet_index.errors import UnknownFilterError
from nebula.facet_index.index import build_item_lookup
from nebula.facet_index.matcher import (
    count_matches,
    find_matching_positions,
    get_matching_items,
    match_with_sort,
)
from nebula.facet_index.models import Snapshot

from conftest import make_item, titles


class TestFindMatchingPositions:
    """Test multi-attribute intersection."""

    def test_two_item_example(self):
        items = [
            make_item("A", [("Size", "Small")], price=10),
            make_item("B", [("Size", "Large")], price=5),
        ]
        index = build_item_lookup(Snapshot.create(items))
        assert find_matching_positions(index, {"size": "small"}) == [0]

    def test_single_filter(self, index):
        assert find_matching_positions(index, {"size": "small"}) == [0, 2]

    def test_intersection(self, index):
        assert find_matching_positions(index, {"size": "small", "colour": "red"}) == [0]
        assert find_matching_positions(index, {"colour": "red", "size": "large"}) == [1]

    def test_disjoint_filters(self, index):
        assert find_matching_positions(index, {"colour": "blue", "size": "large"}) == []

    def test_accepts_slug_or_normalized_keys(self, index):
        assert find_matching_positions(index, {"pet-friendly": "yes"}) == [3]
        assert find_matching_positions(index, {"petfriendly": "yes"}) == [3]

    def test_unknown_value_matches_nothing(self, index):
        assert find_matching_positions(index, {"size": "huge"}) == []

    def test_unknown_key_matches_nothing(self, index):
        assert find_matching_positions(index, {"material": "steel", "size": "small"}) == []

    def test_unknown_key_in_later_entry(self, index):
        assert find_matching_positions(index, {"size": "small", "material": "steel"}) == []

    def test_strict_mode_raises(self, index):
        with pytest.raises(UnknownFilterError) as excinfo:
            find_matching_positions(index, {"size": "huge"}, strict=True)
        assert excinfo.value.key == "size"
        assert excinfo.value.value == "huge"
        assert "products" in str(excinfo.value)

    def test_empty_filters(self, index):
        assert find_matching_positions(index, {}) == []

    def test_matches_brute_force(self, index, catalog_items):
        """Every combination of existing values agrees with a linear scan."""
        options = {}
        for item in catalog_items:
            for key, value in item.filters.items():
                options.setdefault(key, set()).add(value)

        keys = sorted(options)
        for size in range(1, len(keys) + 1):
            for chosen in itertools.combinations(keys, size):
                for values in itertools.product(*(sorted(options[k]) for k in chosen)):
                    filters = dict(zip(chosen, values))
                    expected = [
                        pos for pos, item in enumerate(catalog_items)
                        if all(item.filters.get(k) == v for k, v in filters.items())
                    ]
                    assert find_matching_positions(index, filters) == expected, filters


class TestCountMatches:
    """Test match counting."""

    def test_empty_filters_returns_total(self, index):
        assert count_matches(index, {}, 5) == 5
        assert count_matches(index, {}, 123) == 123

    def test_counts_matches(self, index):
        assert count_matches(index, {"colour": "red"}, 5) == 2
        assert count_matches(index, {"colour": "red", "size": "small"}, 5) == 1

    def test_unknown_counts_zero(self, index):
        assert count_matches(index, {"colour": "green"}, 5) == 0


class TestGetMatchingItems:
    """Test the result cache around the matcher."""

    def test_empty_filters_returns_snapshot(self, snapshot, index, cache):
        result = get_matching_items(snapshot, {}, index, cache)
        assert result is snapshot.items
        assert cache.stats().entries == 0

    def test_matches_in_snapshot_order(self, snapshot, index, cache):
        result = get_matching_items(snapshot, {"size": "small"}, index, cache)
        assert titles(result) == ["Compact Mug", "Travel Mug"]

    def test_second_call_returns_cached_tuple(self, snapshot, index, cache):
        first = get_matching_items(snapshot, {"size": "small", "colour": "red"}, index, cache)
        second = get_matching_items(snapshot, {"colour": "red", "size": "small"}, index, cache)
        assert second is first
        stats = cache.stats()
        assert stats.misses == 1
        assert stats.hits == 1

    def test_cache_hit_skips_matcher(self, snapshot, index, cache, monkeypatch):
        get_matching_items(snapshot, {"size": "small"}, index, cache)

        def fail(*args, **kwargs):
            raise AssertionError("matcher should not run on a cache hit")

        monkeypatch.setattr("nebula.facet_index.matcher.find_matching_positions", fail)
        assert titles(get_matching_items(snapshot, {"size": "small"}, index, cache)) == [
            "Compact Mug",
            "Travel Mug",
        ]

    def test_content_identical_snapshot_recomputes(self, catalog_items, cache):
        first_snapshot = Snapshot.create(catalog_items)
        second_snapshot = Snapshot.create(catalog_items)
        first = get_matching_items(
            first_snapshot, {"size": "small"}, build_item_lookup(first_snapshot), cache
        )
        second = get_matching_items(
            second_snapshot, {"size": "small"}, build_item_lookup(second_snapshot), cache
        )
        assert first == second
        assert first is not second
        assert cache.stats().misses == 2

    def test_empty_match_is_cached(self, snapshot, index, cache):
        assert get_matching_items(snapshot, {"size": "huge"}, index, cache) == ()
        assert get_matching_items(snapshot, {"size": "huge"}, index, cache) == ()
        assert cache.stats().hits == 1


class TestMatchWithSort:
    """Test sorted matching."""

    def test_price_asc_example(self):
        items = [
            make_item("Ten", [("Size", "Small")], price=10),
            make_item("Five", [("Size", "Large")], price=5),
        ]
        snapshot = Snapshot.create(items)
        index = build_item_lookup(snapshot)

        result = match_with_sort(snapshot, {}, index, "price-asc", ResultCache())
        assert titles(result) == ["Five", "Ten"]

    def test_filtered_and_sorted(self, snapshot, index, cache):
        result = match_with_sort(snapshot, {"colour": "red"}, index, "price-desc", cache)
        assert titles(result) == ["Compact Mug", "Large Mug"]

    def test_sort_variants_share_one_matcher_pass(self, snapshot, index, cache):
        for sort_key in ["default", "price-asc", "price-desc", "name-asc", "name-desc"]:
            match_with_sort(snapshot, {"size": "large"}, index, sort_key, cache)
        stats = cache.stats()
        assert stats.misses == 1
        assert stats.hits == 4

    def test_unknown_sort_uses_default(self, snapshot, index, cache):
        assert titles(match_with_sort(snapshot, {}, index, "bogus", cache)) == titles(
            match_with_sort(snapshot, {}, index, "default", cache)
        )

    def test_does_not_mutate_cached_result(self, snapshot, index, cache):
        cached = get_matching_items(snapshot, {"size": "small"}, index, cache)
        match_with_sort(snapshot, {"size": "small"}, index, "name-desc", cache)
        assert titles(cached) == ["Compact Mug", "Travel Mug"]
