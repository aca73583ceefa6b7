"""
Path Encoder - filter sets to canonical URL path segments.

{"size": "small", "capacity": "3"} -> "capacity/3/size/small"

The same string is the result cache key and the page route, so both call
sites must go through filter_to_path / to_sorted_path.
"""

from typing import Optional
from urllib.parse import quote, unquote

DEFAULT_SORT = "default"

# Same unreserved set as JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "!~*'()"


def encode_component(text: str) -> str:
    """Percent-encode one path segment."""
    return quote(text, safe=_URI_COMPONENT_SAFE)


def filter_to_path(filters: Optional[dict[str, str]]) -> str:
    """
    Convert a filter set to a URL path segment.

    Keys are sorted alphabetically so insertion order never matters.
    Empty or None filters give "".
    """
    if not filters:
        return ""

    segments = []
    for key in sorted(filters):
        segments.append(encode_component(key))
        segments.append(encode_component(filters[key]))
    return "/".join(segments)


def to_sorted_path(filters: Optional[dict[str, str]], sort_key: Optional[str] = None) -> str:
    """
    filter_to_path plus a trailing sort segment.

    The default sort gets no suffix: {"size": "small"} + "default" is just
    "size/small". With no filters the path is the sort key alone.
    """
    path = filter_to_path(filters)
    if not sort_key or sort_key == DEFAULT_SORT:
        return path
    if not path:
        return sort_key
    return f"{path}/{sort_key}"


def path_to_filter(path: Optional[str]) -> dict[str, str]:
    """
    Parse a URL path back to a filter set.

    "capacity/3/size/small" -> {"capacity": "3", "size": "small"}
    A trailing unpaired segment and empty keys/values are dropped.
    """
    if not path:
        return {}

    segments = [s for s in path.split("/") if s]
    filters = {}
    for i in range(0, len(segments) - 1, 2):
        key = unquote(segments[i])
        value = unquote(segments[i + 1])
        if key and value:
            filters[key] = value
    return filters
