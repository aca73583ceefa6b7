"""
Item Adapters - bridge from catalog data files to snapshots.

The adapter pattern lets the page pipeline hand us items however it stores
them (files for the CLI, in-memory lists for tests) without the index or
matcher knowing where they came from.
"""

import csv
import json
import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .models import FilterAttribute, Item, Snapshot

logger = logging.getLogger(__name__)

ALL_ITEMS = "all"


class AttributeRecord(BaseModel):
    """One raw filter attribute as it appears in a data file."""
    name: str
    value: str

    @field_validator("name", "value", mode="before")
    @classmethod
    def _coerce_scalar(cls, v: Any) -> Any:
        # YAML/JSON give numbers for values like "3"
        if isinstance(v, (int, float, Decimal)) and not isinstance(v, bool):
            return str(v)
        return v


class ItemRecord(BaseModel):
    """Validated row from a catalog data file."""
    model_config = ConfigDict(extra="allow")

    title: str = ""
    price: Optional[Decimal] = None
    order: Optional[int] = None
    url: Optional[str] = None
    category: Optional[str] = None
    filter_attributes: Optional[list[AttributeRecord]] = Field(default=None)

    def to_item(self) -> Item:
        attributes = None
        if self.filter_attributes is not None:
            attributes = tuple(FilterAttribute(a.name, a.value) for a in self.filter_attributes)
        return Item(
            attributes=attributes,
            title=self.title,
            price=self.price,
            order=self.order,
            url=self.url,
            data=dict(self.model_extra or {}, category=self.category),
        )


class ItemAdapter(ABC):
    """
    Abstract interface for catalog item access.

    Implementations return items in display order; that order defines
    item positions in the resulting snapshot.
    """

    @abstractmethod
    def get_items(self) -> list[Item]:
        """Fetch all catalog items."""
        pass

    def get_snapshot(self, snapshot_id: str = ALL_ITEMS) -> Snapshot:
        """All items as one snapshot."""
        return Snapshot.create(self.get_items(), snapshot_id=snapshot_id)

    def get_category_snapshots(self) -> dict[str, Snapshot]:
        """
        One snapshot per category, ids prefixed "category:".

        Items without a category only appear in the full snapshot.
        """
        grouped: dict[str, list[Item]] = {}
        for item in self.get_items():
            category = item.data.get("category")
            if category:
                grouped.setdefault(category, []).append(item)
        return {
            category: Snapshot.create(items, snapshot_id=f"category:{category}")
            for category, items in sorted(grouped.items())
        }


class FileItemAdapter(ItemAdapter):
    """
    Loads catalog items from a JSON, YAML or CSV file.

    JSON/YAML format expected:
        [{"title": "Mug", "price": 10, "filter_attributes": [{"name": "Size", "value": "Small"}]}]

    CSV format expected (attributes as "Name: Value" pairs split by ";"):
        title,price,order,category,filter_attributes
        Mug,10,1,kitchen,Size: Small; Colour: Red
    """

    def __init__(self, data_path: str | Path):
        """
        Initialize adapter with data file.

        Args:
            data_path: Path to .json, .yaml/.yml or .csv file
        """
        self._data_path = Path(data_path)
        self._items: list[Item] = []
        self._load_data()

    def _load_data(self):
        """Load item records from file."""
        if not self._data_path.exists():
            raise FileNotFoundError(f"Item data file not found: {self._data_path}")

        suffix = self._data_path.suffix.lower()
        if suffix == ".json":
            rows = self._load_json()
        elif suffix in (".yaml", ".yml"):
            rows = self._load_yaml()
        elif suffix == ".csv":
            rows = self._load_csv()
        else:
            raise ValueError(f"Unsupported file format: {suffix}")

        for line, row in enumerate(rows, start=1):
            self._items.append(self._parse_row(row, line))
        logger.info(f"Loaded {len(self._items)} items from {self._data_path.name}")

    def _load_json(self) -> list[dict]:
        with open(self._data_path, "r") as f:
            data = json.load(f)
        return self._unwrap(data)

    def _load_yaml(self) -> list[dict]:
        with open(self._data_path, "r") as f:
            data = yaml.safe_load(f) or []
        return self._unwrap(data)

    def _load_csv(self) -> list[dict]:
        with open(self._data_path, "r", newline="") as f:
            reader = csv.DictReader(f)
            rows = []
            for row in reader:
                row = {k: v for k, v in row.items() if v not in (None, "")}
                if "filter_attributes" in row:
                    row["filter_attributes"] = parse_attribute_column(row["filter_attributes"])
                rows.append(row)
        return rows

    @staticmethod
    def _unwrap(data: Any) -> list[dict]:
        # Accept either a bare list or {"items": [...]}
        if isinstance(data, dict):
            data = data.get("items", [])
        if not isinstance(data, list):
            raise ValueError("Item data must be a list of records")
        return data

    def _parse_row(self, row: dict, line: int) -> Item:
        """Validate a row dict and turn it into an Item."""
        try:
            return ItemRecord.model_validate(row).to_item()
        except ValidationError as e:
            raise ValueError(f"Invalid item record #{line} in {self._data_path.name}: {e}") from e

    def get_items(self) -> list[Item]:
        return list(self._items)


class InMemoryItemAdapter(ItemAdapter):
    """
    In-memory adapter for programmatic test setup.

    Useful for unit tests where you want to control exact items.
    """

    def __init__(self, items: list[Item] | None = None):
        self._items = list(items or [])

    def add_item(self, item: Item):
        """Add a single item."""
        self._items.append(item)

    def add_items(self, items: list[Item]):
        """Add multiple items."""
        for item in items:
            self.add_item(item)

    def clear(self):
        """Remove all items."""
        self._items = []

    def get_items(self) -> list[Item]:
        return list(self._items)


def parse_attribute_column(text: str) -> list[dict[str, str]]:
    """
    Parse a CSV attribute cell.

    "Size: Small; Colour: Red" -> [{"name": "Size", "value": "Small"}, ...]
    Pairs without a ":" are passed through with an empty value so the
    parser can reject them by name.
    """
    pairs = []
    for chunk in text.split(";"):
        if not chunk.strip():
            continue
        name, _, value = chunk.partition(":")
        pairs.append({"name": name.strip(), "value": value.strip()})
    return pairs
