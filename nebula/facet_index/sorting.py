"""
Sort Registry - the fixed set of orders offered on listing pages.

Every comparator is used through Python's stable sort, so items that
compare equal keep their snapshot order.
"""

import math
from functools import cmp_to_key
from typing import Iterable, Optional

from .models import Comparator, Item, SortSpec
from .paths import DEFAULT_SORT


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def _price_or(item: Item, missing: float) -> float:
    return missing if item.price is None else float(item.price)


def _name(item: Item) -> str:
    return (item.title or item.data.get("name") or "").casefold()


def compare_display_order(a: Item, b: Item) -> int:
    """Natural listing order: `order` ascending (missing = 0), then name."""
    return _cmp(a.order or 0, b.order or 0) or _cmp(_name(a), _name(b))


def compare_price_asc(a: Item, b: Item) -> int:
    # Missing price sorts last
    return _cmp(_price_or(a, math.inf), _price_or(b, math.inf))


def compare_price_desc(a: Item, b: Item) -> int:
    # Missing price sorts last here too
    return _cmp(_price_or(b, -math.inf), _price_or(a, -math.inf))


def compare_name_asc(a: Item, b: Item) -> int:
    return _cmp(_name(a), _name(b))


def compare_name_desc(a: Item, b: Item) -> int:
    return _cmp(_name(b), _name(a))


SORT_OPTIONS: tuple[SortSpec, ...] = (
    SortSpec(DEFAULT_SORT, "Default", compare_display_order),
    SortSpec("price-asc", "Price: Low to High", compare_price_asc),
    SortSpec("price-desc", "Price: High to Low", compare_price_desc),
    SortSpec("name-asc", "Name: A-Z", compare_name_asc),
    SortSpec("name-desc", "Name: Z-A", compare_name_desc),
)

_BY_KEY = {spec.key: spec for spec in SORT_OPTIONS}

SORT_KEYS = tuple(_BY_KEY)


def get_sort_spec(sort_key: Optional[str]) -> SortSpec:
    """Look up a sort option, falling back to the default order."""
    return _BY_KEY.get(sort_key or DEFAULT_SORT, _BY_KEY[DEFAULT_SORT])


def get_sort_comparator(sort_key: Optional[str]) -> Comparator:
    """Comparator for a sort key; unknown or missing keys use the default."""
    return get_sort_spec(sort_key).comparator


def sort_items(items: Iterable[Item], sort_key: Optional[str] = None) -> list[Item]:
    """Return a new list sorted by the named order."""
    return sorted(items, key=cmp_to_key(get_sort_comparator(sort_key)))
