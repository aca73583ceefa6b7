"""
Shared fixtures for the facet index test suite.

The sample catalog is small enough to reason about by hand:

    pos  title         size   colour  pet friendly  price  order
    0    Compact Mug   Small  Red     -             10     1
    1    Large Mug     Large  Red     -             5      2
    2    Travel Mug    Small  Blue    -             15     3
    3    Pet Bowl      Large  -       Yes           -      4
    4    Plain Cup     -      -       -             8      0
"""

from decimal import Decimal
from typing import Optional

import pytest

from nebula.facet_index.cache import ResultCache
from nebula.facet_index.engine import FacetEngine
from nebula.facet_index.index import build_item_lookup
from nebula.facet_index.models import FilterAttribute, Item, Snapshot


def make_item(
    title: str,
    attrs: Optional[list[tuple[str, str]]] = None,
    price=None,
    order: Optional[int] = None,
    **data,
) -> Item:
    """Build an Item from (name, value) pairs."""
    attributes = None
    if attrs is not None:
        attributes = tuple(FilterAttribute(name, value) for name, value in attrs)
    return Item(attributes=attributes, title=title, price=price, order=order, data=data)


@pytest.fixture
def catalog_items() -> list[Item]:
    return [
        make_item("Compact Mug", [("Size", "Small"), ("Colour", "Red")], price=Decimal("10"), order=1),
        make_item("Large Mug", [("Size", "Large"), ("Colour", "Red")], price=Decimal("5"), order=2),
        make_item("Travel Mug", [("Size", "Small"), ("Colour", "Blue")], price=Decimal("15"), order=3),
        make_item("Pet Bowl", [("Size", "Large"), ("Pet Friendly", "Yes")], order=4),
        make_item("Plain Cup", None, price=Decimal("8"), order=0),
    ]


@pytest.fixture
def snapshot(catalog_items) -> Snapshot:
    return Snapshot.create(catalog_items, snapshot_id="products")


@pytest.fixture
def index(snapshot):
    return build_item_lookup(snapshot)


@pytest.fixture
def cache() -> ResultCache:
    return ResultCache()


@pytest.fixture
def engine():
    with FacetEngine() as e:
        yield e


def titles(items) -> list[str]:
    return [item.title for item in items]
