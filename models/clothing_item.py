"""Clothing item data model and helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from models.taxonomy import (
    CategoryTag,
    ColorTag,
    OccasionTag,
    parse_category,
    parse_color,
    parse_occasion,
    tag_label,
)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass
class ClothingItem:
    """A photographed piece of clothing owned by one user."""

    item_id: str
    user_id: str
    image_url: str
    category: CategoryTag
    color: ColorTag
    occasion: OccasionTag
    name: Optional[str] = None
    brand: Optional[str] = None
    created_at: Optional[str] = None

    def __post_init__(self) -> None:
        self.category = parse_category(self.category)
        self.color = parse_color(self.color)
        self.occasion = parse_occasion(self.occasion)
        self.name = _optional_text(self.name)
        self.brand = _optional_text(self.brand)

    @property
    def category_label(self) -> str:
        return tag_label(self.category)

    @property
    def display_name(self) -> str:
        return self.name or self.category_label

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_id": self.item_id,
            "user_id": self.user_id,
            "image_url": self.image_url,
            "name": self.name,
            "brand": self.brand,
            "category": tag_label(self.category),
            "color": tag_label(self.color),
            "occasion": tag_label(self.occasion),
            "created_at": self.created_at,
        }


def from_raw_metadata(metadata: Dict[str, Any]) -> ClothingItem:
    """Build a :class:`ClothingItem` from a loose row or request payload."""

    required_fields = ["item_id", "user_id", "image_url", "category", "color", "occasion"]
    missing = [field for field in required_fields if not metadata.get(field)]
    if missing:
        raise ValueError(f"Missing required fields for ClothingItem: {missing}")

    return ClothingItem(
        item_id=str(metadata["item_id"]),
        user_id=str(metadata["user_id"]),
        image_url=str(metadata["image_url"]),
        category=metadata["category"],
        color=metadata["color"],
        occasion=metadata["occasion"],
        name=metadata.get("name"),
        brand=metadata.get("brand"),
        created_at=metadata.get("created_at"),
    )


__all__ = ["ClothingItem", "from_raw_metadata"]
