"""SQLite wardrobe store behaviour."""

import json
from pathlib import Path

import pytest

from models.clothing_item import ClothingItem
from models.outfit import Outfit, OutfitSchedule
from models.taxonomy import Category, Other
from models.user_settings import UserSettings
from tools.wardrobe_store import SQLiteWardrobeStore


def _item(item_id: str, category: str = "Shirt", color: str = "Blue", occasion: str = "Casual", user_id: str = "u1"):
    return ClothingItem(
        item_id=item_id,
        user_id=user_id,
        image_url=f"https://img.example/{item_id}.jpg",
        category=category,
        color=color,
        occasion=occasion,
    )


def test_empty_database_path_is_rejected() -> None:
    with pytest.raises(ValueError):
        SQLiteWardrobeStore("")


def test_creates_parent_directory(tmp_path: Path) -> None:
    SQLiteWardrobeStore(tmp_path / "nested" / "wardrobe.db")
    assert (tmp_path / "nested" / "wardrobe.db").exists()


def test_item_crud_round_trip(store: SQLiteWardrobeStore) -> None:
    created = store.create_item(_item("i1", category="Cape"))
    assert created.created_at

    fetched = store.get_item("u1", "i1")
    assert fetched.category == Other("Cape")

    updated = store.update_item("u1", "i1", {"name": "Opera cape", "user_id": "intruder", "color": "red"})
    assert updated.name == "Opera cape"
    assert updated.user_id == "u1"
    assert updated.created_at == created.created_at
    assert store.get_item("u1", "i1").color.value == "Red"

    assert store.delete_item("u1", "i1")
    assert store.get_item("u1", "i1") is None
    assert not store.delete_item("u1", "i1")
    assert store.update_item("u1", "i1", {"name": "x"}) is None


def test_items_are_scoped_per_user(store: SQLiteWardrobeStore) -> None:
    store.create_item(_item("mine"))
    store.create_item(_item("theirs", user_id="u2"))

    assert [item.item_id for item in store.list_items_for_user("u1")] == ["mine"]
    assert store.get_item("u1", "theirs") is None


def test_search_uses_exact_tag_match(store: SQLiteWardrobeStore) -> None:
    store.create_item(_item("tee", category="T-Shirt", color="Black"))
    store.create_item(_item("shirt", category="Shirt", color="Black"))
    store.create_item(_item("party", category="Shirt", color="Red", occasion="Party"))

    assert [item.item_id for item in store.search_items("u1", {"category": "shirt"})] == ["shirt", "party"]
    assert [item.item_id for item in store.search_items("u1", {"color": "black", "category": "t-shirt"})] == ["tee"]
    assert len(store.search_items("u1", {"category": None, "color": ""})) == 3


def test_outfit_items_are_stored_as_json_text(store: SQLiteWardrobeStore) -> None:
    created = store.create_outfit(Outfit(outfit_id="o1", user_id="u1", name="Work", item_ids=["a", "b"]))

    assert json.loads(created.item_ids) == ["a", "b"]
    assert store.get_outfit("u1", "o1").item_ids == created.item_ids


def test_outfits_list_newest_first(store: SQLiteWardrobeStore) -> None:
    store.create_outfit(Outfit(outfit_id="old", user_id="u1", name="Old", item_ids=[], created_at="2024-01-01T00:00:00+00:00"))
    store.create_outfit(Outfit(outfit_id="new", user_id="u1", name="New", item_ids=[], created_at="2024-02-01T00:00:00+00:00"))

    assert [outfit.outfit_id for outfit in store.list_outfits_for_user("u1")] == ["new", "old"]
    assert store.delete_outfit("u1", "old")
    assert [outfit.outfit_id for outfit in store.list_outfits_for_user("u1")] == ["new"]


def test_deleting_item_leaves_outfit_reference(store: SQLiteWardrobeStore) -> None:
    store.create_item(_item("i1"))
    store.create_outfit(Outfit(outfit_id="o1", user_id="u1", name="Work", item_ids=["i1"]))

    store.delete_item("u1", "i1")

    assert json.loads(store.get_outfit("u1", "o1").item_ids) == ["i1"]


def test_schedules_allow_duplicates_and_sort_by_date_then_creation(store: SQLiteWardrobeStore) -> None:
    store.create_schedule(OutfitSchedule("late", "u1", "o2", "2024-05-11", "2024-05-01T00:00:00+00:00"))
    store.create_schedule(OutfitSchedule("second", "u1", "o2", "2024-05-10", "2024-05-02T00:00:00+00:00"))
    store.create_schedule(OutfitSchedule("first", "u1", "o1", "2024-05-10", "2024-05-01T00:00:00+00:00"))

    assert [schedule.schedule_id for schedule in store.list_schedules_for_user("u1")] == ["first", "second", "late"]
    assert store.delete_schedule("u1", "late")
    assert not store.delete_schedule("u1", "late")


def test_user_settings_upsert(store: SQLiteWardrobeStore) -> None:
    assert store.get_user_settings("u1") is None

    store.save_user_settings(UserSettings("u1", True, "tok", "2030-01-01T00:00:00+00:00"))
    store.save_user_settings(UserSettings("u1", True, "tok2", None))

    settings = store.get_user_settings("u1")
    assert settings.google_calendar_connected
    assert settings.google_access_token == "tok2"
    assert settings.google_token_expiry is None


def test_category_enum_survives_storage(store: SQLiteWardrobeStore) -> None:
    store.create_item(_item("hat", category="headwear"))
    assert store.get_item("u1", "hat").category is Category.HEADWEAR
