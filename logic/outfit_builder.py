"""Item selection helpers for composing an outfit before it is saved."""
from __future__ import annotations

import random
from typing import Iterable, List, Sequence

from models.clothing_item import ClothingItem
from models.taxonomy import tag_label


def toggle_selection(selected: Sequence[ClothingItem], item: ClothingItem) -> List[ClothingItem]:
    """Select ``item``, or deselect it when already chosen.

    An outfit holds at most one item per category, so selecting an item
    replaces any selected item of the same category.
    """

    if any(chosen.item_id == item.item_id for chosen in selected):
        return [chosen for chosen in selected if chosen.item_id != item.item_id]
    kept = [chosen for chosen in selected if chosen.category != item.category]
    return [*kept, item]


def randomize_outfit(items: Iterable[ClothingItem], rng: random.Random | None = None) -> List[ClothingItem]:
    """Pick one random item from every category present in ``items``."""

    shuffled = list(items)
    (rng or random.Random()).shuffle(shuffled)
    picked: List[ClothingItem] = []
    used = set()
    for item in shuffled:
        if item.category not in used:
            picked.append(item)
            used.add(item.category)
    return picked


def available_categories(items: Iterable[ClothingItem]) -> List[str]:
    """Distinct category labels, in first-seen order."""

    labels: List[str] = []
    for item in items:
        label = tag_label(item.category)
        if label not in labels:
            labels.append(label)
    return labels


__all__ = ["available_categories", "randomize_outfit", "toggle_selection"]
