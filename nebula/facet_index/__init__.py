# Facet Index
# Indexing, matching, caching and path encoding for static filter pages

from .models import (
    FilterAttribute,
    Item,
    Snapshot,
    SortSpec,
    FilterCombination,
    FilterPage,
    Redirect,
)
from .errors import FacetIndexError, InvalidFilterAttributeError, UnknownFilterError
from .normalize import normalize, slugify, normalize_attrs
from .parser import parse_filter_attributes
from .index import FacetIndex, build_item_lookup, get_all_filter_attributes, build_display_lookup
from .cache import ResultCache, SnapshotMemo, CacheStats
from .matcher import find_matching_positions, count_matches, get_matching_items, match_with_sort
from .sorting import SORT_OPTIONS, get_sort_comparator, sort_items
from .paths import filter_to_path, to_sorted_path, path_to_filter
from .config import Config, load_config, default_config
from .engine import FacetEngine
from .adapters import ItemAdapter, FileItemAdapter, InMemoryItemAdapter

__version__ = "1.0.0"

__all__ = [
    # Models
    "FilterAttribute",
    "Item",
    "Snapshot",
    "SortSpec",
    "FilterCombination",
    "FilterPage",
    "Redirect",
    # Errors
    "FacetIndexError",
    "InvalidFilterAttributeError",
    "UnknownFilterError",
    # Normalize / parse
    "normalize",
    "slugify",
    "normalize_attrs",
    "parse_filter_attributes",
    # Index
    "FacetIndex",
    "build_item_lookup",
    "get_all_filter_attributes",
    "build_display_lookup",
    # Cache
    "ResultCache",
    "SnapshotMemo",
    "CacheStats",
    # Matcher
    "find_matching_positions",
    "count_matches",
    "get_matching_items",
    "match_with_sort",
    # Sorting
    "SORT_OPTIONS",
    "get_sort_comparator",
    "sort_items",
    # Paths
    "filter_to_path",
    "to_sorted_path",
    "path_to_filter",
    # Config
    "Config",
    "load_config",
    "default_config",
    # Engine
    "FacetEngine",
    # Adapters
    "ItemAdapter",
    "FileItemAdapter",
    "InMemoryItemAdapter",
]
