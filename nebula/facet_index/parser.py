"""
Attribute Parser - raw (name, value) pairs to a FilterSet.

Expects: [FilterAttribute("Size", "Small"), {"name": "Capacity", "value": "3"}]
Returns: {"size": "small", "capacity": "3"}

Duplicate keys: the LAST occurrence wins. The display lookup in index.py
deliberately does the opposite (first wins) since it serves labels, not
matching.
"""

from collections.abc import Mapping
from typing import Any, Iterable, Optional

from .errors import InvalidFilterAttributeError
from .normalize import slugify


def parse_filter_attributes(
    raw_attributes: Optional[Iterable[Any]],
    item: Optional[str] = None,
) -> dict[str, str]:
    """
    Parse raw filter attributes into a slugged filter set.

    Args:
        raw_attributes: FilterAttribute objects or {"name", "value"} mappings.
            None means the item has no attributes.
        item: Item label used in error messages

    Returns:
        Dict of slug key -> slug value

    Raises:
        InvalidFilterAttributeError: if a pair is missing its name or value
    """
    if raw_attributes is None:
        return {}

    filters: dict[str, str] = {}
    for attribute in raw_attributes:
        name, value = split_attribute(attribute, item=item)
        filters[slugify(name)] = slugify(value)
    return filters


def split_attribute(attribute: Any, item: Optional[str] = None) -> tuple[str, str]:
    """
    Pull (name, value) out of a raw attribute, stripped.

    Rejects a missing or blank name or value, and text made only of
    symbols, which has no URL form to key on.
    """
    if isinstance(attribute, Mapping):
        name = attribute.get("name")
        value = attribute.get("value")
    else:
        name = getattr(attribute, "name", None)
        value = getattr(attribute, "value", None)

    if not isinstance(name, str) or not isinstance(value, str):
        raise InvalidFilterAttributeError(attribute, item=item)

    name, value = name.strip(), value.strip()
    if not name or not value:
        raise InvalidFilterAttributeError(attribute, item=item)
    if not slugify(name) or not slugify(value):
        raise InvalidFilterAttributeError(attribute, item=item)

    return name, value
