"""Outfit and schedule records plus their hydrated forms."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from models.clothing_item import ClothingItem


@dataclass
class Outfit:
    """A named selection of clothing items, referenced by id.

    ``item_ids`` is kept exactly as the backend returned it: either a list of
    ids or the serialized JSON array stored in the ``items`` column.
    """

    outfit_id: str
    user_id: str
    name: str
    item_ids: Union[Sequence[str], str] = field(default_factory=list)
    occasion: Optional[str] = None
    created_at: Optional[str] = None


@dataclass
class OutfitSchedule:
    """An outfit assigned to a calendar day (no time component)."""

    schedule_id: str
    user_id: str
    outfit_id: str
    date: str
    created_at: Optional[str] = None


@dataclass
class HydratedOutfit:
    outfit_id: str
    user_id: str
    name: str
    occasion: Optional[str]
    created_at: Optional[str]
    items: List[ClothingItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outfit_id": self.outfit_id,
            "name": self.name,
            "occasion": self.occasion,
            "created_at": self.created_at,
            "items": [item.to_dict() for item in self.items],
        }


@dataclass
class HydratedSchedule:
    schedule_id: str
    user_id: str
    outfit_id: str
    date: str
    created_at: Optional[str]
    outfit: Optional[HydratedOutfit] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schedule_id": self.schedule_id,
            "outfit_id": self.outfit_id,
            "date": self.date,
            "created_at": self.created_at,
            "outfit": self.outfit.to_dict() if self.outfit else None,
        }


__all__ = ["Outfit", "OutfitSchedule", "HydratedOutfit", "HydratedSchedule"]
