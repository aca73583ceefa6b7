"""
String canonicalization for facet attributes.

Two forms, not interchangeable:
- normalize(): aggressive, for equality checks while matching
  ("Pet-Friendly" -> "petfriendly")
- slugify(): URL/display safe, keeps word structure
  ("Pet Friendly" -> "pet-friendly")

Both transliterate to ASCII first ("Größe" -> "grosse", "Красный" -> "krasnyi"),
so letters from any script survive into the slug instead of being dropped.

Slugs are what users see in URLs and what the display lookup is keyed on;
normalized forms only ever live inside the index.
"""

from functools import lru_cache
from typing import Optional

from slugify import slugify as _transliterate_slug


@lru_cache(maxsize=8192)
def normalize(text: Optional[str]) -> str:
    """
    Lowercase and strip every non-alphanumeric character.

    Memoized since the same attribute names/values are processed many
    times per run.
    """
    if not text:
        return ""
    return _transliterate_slug(text, separator="")


@lru_cache(maxsize=8192)
def slugify(text: Optional[str]) -> str:
    """
    Convert text to a lowercase, hyphen-separated slug.

    Transforms: "  Extra Large (XL) " -> "extra-large-xl"
    """
    if not text:
        return ""
    return _transliterate_slug(text)


def normalize_attrs(filters: dict[str, str]) -> dict[str, str]:
    """Normalize both keys and values of a filter set."""
    return {normalize(key): normalize(value) for key, value in filters.items()}
