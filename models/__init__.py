"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.clothing_item import ClothingItem, from_raw_metadata
from models.outfit import HydratedOutfit, HydratedSchedule, Outfit, OutfitSchedule
from models.user_settings import UserSettings

__all__ = [
    "ClothingItem",
    "from_raw_metadata",
    "Outfit",
    "OutfitSchedule",
    "HydratedOutfit",
    "HydratedSchedule",
    "UserSettings",
]
