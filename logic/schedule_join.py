"""Resolve stored outfit and schedule references into full records."""

from __future__ import annotations

import json
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Union

from logic.date_keys import InvalidDateError, date_key
from models.clothing_item import ClothingItem
from models.outfit import HydratedOutfit, HydratedSchedule, Outfit, OutfitSchedule
from models.taxonomy import tag_label

logger = logging.getLogger(__name__)

CATEGORY_ORDER = (
    "Headwear",
    "Jacket",
    "Shirt",
    "T-Shirt",
    "Sweater",
    "Dress",
    "Skirt",
    "Pants",
    "Shorts",
    "Jeans",
    "Shoes",
    "Accessories",
)
_CATEGORY_RANK = {label: index for index, label in enumerate(CATEGORY_ORDER)}
_UNKNOWN_RANK = len(CATEGORY_ORDER)


def category_rank(item: ClothingItem) -> int:
    return _CATEGORY_RANK.get(tag_label(item.category), _UNKNOWN_RANK)


def sort_items_by_category(items: Iterable[ClothingItem]) -> List[ClothingItem]:
    """Head-to-toe display order; unknown categories last, input order kept."""

    return sorted(items, key=category_rank)


def decode_item_ids(raw: Union[Sequence[str], str, None]) -> List[str]:
    """Return item ids from a list or a JSON-serialized array.

    Raises :class:`ValueError` when the serialized form is not a JSON array.
    """

    if raw is None:
        return []
    if isinstance(raw, str):
        try:
            decoded = json.loads(raw) if raw.strip() else []
        except json.JSONDecodeError as exc:
            raise ValueError(f"Malformed item list: {raw[:40]!r}") from exc
        if not isinstance(decoded, list):
            raise ValueError("Serialized item list is not an array")
        raw = decoded
    return [str(item_id) for item_id in raw]


def index_catalog(catalog: Iterable[ClothingItem]) -> Dict[str, ClothingItem]:
    return {item.item_id: item for item in catalog}


def hydrate_outfit(outfit: Outfit, catalog: Union[Dict[str, ClothingItem], Iterable[ClothingItem]]) -> HydratedOutfit:
    """Attach current catalog items to an outfit, dropping dangling ids."""

    by_id = catalog if isinstance(catalog, dict) else index_catalog(catalog)
    try:
        item_ids = decode_item_ids(outfit.item_ids)
    except ValueError as exc:
        logger.warning("Outfit has unreadable item list", extra={"outfit_id": outfit.outfit_id, "error": str(exc)})
        item_ids = []

    items = [by_id[item_id] for item_id in item_ids if item_id in by_id]
    if len(items) != len(item_ids):
        logger.warning(
            "Outfit references missing items",
            extra={"outfit_id": outfit.outfit_id, "missing": len(item_ids) - len(items)},
        )
    return HydratedOutfit(
        outfit_id=outfit.outfit_id,
        user_id=outfit.user_id,
        name=outfit.name,
        occasion=outfit.occasion,
        created_at=outfit.created_at,
        items=sort_items_by_category(items),
    )


def hydrate_schedules(
    schedules: Iterable[OutfitSchedule],
    outfits: Iterable[Outfit],
    catalog: Iterable[ClothingItem],
) -> List[HydratedSchedule]:
    """Join each schedule with its outfit and items, keeping input order."""

    by_id = index_catalog(catalog)
    hydrated_outfits: Dict[str, HydratedOutfit] = {}
    for outfit in outfits:
        hydrated_outfits[outfit.outfit_id] = hydrate_outfit(outfit, by_id)

    hydrated: List[HydratedSchedule] = []
    for schedule in schedules:
        outfit = hydrated_outfits.get(schedule.outfit_id)
        if outfit is None:
            logger.warning(
                "Schedule references missing outfit",
                extra={"schedule_id": schedule.schedule_id, "outfit_id": schedule.outfit_id},
            )
        hydrated.append(
            HydratedSchedule(
                schedule_id=schedule.schedule_id,
                user_id=schedule.user_id,
                outfit_id=schedule.outfit_id,
                date=schedule.date,
                created_at=schedule.created_at,
                outfit=outfit,
            )
        )
    return hydrated


def pick_schedule(schedules: Iterable[HydratedSchedule], key: str) -> Optional[HydratedSchedule]:
    """Return the first schedule whose date falls on ``key``.

    Several schedules may share a day. The first one in the given order wins;
    the store lists schedules by date, creation time and insertion order, so
    this is the earliest-created schedule for the day.
    """

    for schedule in schedules:
        try:
            if date_key(schedule.date) == key:
                return schedule
        except InvalidDateError:
            logger.warning("Schedule has unreadable date", extra={"schedule_id": schedule.schedule_id})
    return None


__all__ = [
    "CATEGORY_ORDER",
    "category_rank",
    "decode_item_ids",
    "hydrate_outfit",
    "hydrate_schedules",
    "index_catalog",
    "pick_schedule",
    "sort_items_by_category",
]
