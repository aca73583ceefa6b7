"""
Configuration for facet page generation.

Handles URL layout, enabled sort options and lookup strictness.
Config is declarative JSON - edit the file, not the code.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path

from .models import SortSpec
from .paths import DEFAULT_SORT
from .sorting import SORT_KEYS, get_sort_spec

DEFAULT_CONFIG_PATH = Path(__file__).parent / "facet_config.json"


@dataclass
class Config:
    """Full configuration for facet page generation."""
    base_url: str = "/products"
    search_segment: str = "search"
    strict_lookup: bool = False
    sort_options: list[str] = field(default_factory=lambda: list(SORT_KEYS))
    sort_labels: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Reject sort keys the registry doesn't know."""
        unknown = [key for key in self.sort_options if key not in SORT_KEYS]
        unknown += [key for key in self.sort_labels if key not in SORT_KEYS]
        if unknown:
            raise ValueError(f"Unknown sort option(s) in config: {', '.join(unknown)}")
        if DEFAULT_SORT not in self.sort_options:
            self.sort_options.insert(0, DEFAULT_SORT)
        # "/products/" and "products" both mean "/products"; "/" means site root
        stripped = self.base_url.strip("/")
        self.base_url = f"/{stripped}" if stripped else ""

    @property
    def search_url(self) -> str:
        """Base URL for filter pages, e.g. "/products/search"."""
        return f"{self.base_url}/{self.search_segment}"

    def sort_specs(self) -> list[SortSpec]:
        """Enabled sort options, with any label overrides applied."""
        specs = []
        for key in self.sort_options:
            spec = get_sort_spec(key)
            label = self.sort_labels.get(key, spec.label)
            specs.append(SortSpec(key=spec.key, label=label, comparator=spec.comparator))
        return specs


def load_config(config_path: str | Path) -> Config:
    """
    Load configuration from JSON file.

    Args:
        config_path: Path to facet_config.json

    Returns:
        Config object with URL layout, sort options and strictness
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    return Config(
        base_url=data.get("base_url", "/products"),
        search_segment=data.get("search_segment", "search"),
        strict_lookup=bool(data.get("strict_lookup", False)),
        sort_options=list(data.get("sort_options", SORT_KEYS)),
        sort_labels=dict(data.get("sort_labels", {})),
    )


def default_config() -> Config:
    """Load the config file shipped with the package."""
    return load_config(DEFAULT_CONFIG_PATH)
