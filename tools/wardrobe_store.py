"""Wardrobe persistence interface and SQLite implementation."""
from __future__ import annotations

import contextlib
import json
import sqlite3
from dataclasses import fields, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from models.clothing_item import ClothingItem
from models.outfit import Outfit, OutfitSchedule
from models.taxonomy import parse_category, parse_color, parse_occasion, tag_label
from models.user_settings import UserSettings


class WardrobeStoreError(RuntimeError):
    """The backing database could not be read or written."""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class WardrobeStore:
    """Persistence interface for items, outfits, schedules and user settings."""

    def create_item(self, item: ClothingItem) -> ClothingItem:
        raise NotImplementedError

    def get_item(self, user_id: str, item_id: str) -> Optional[ClothingItem]:
        raise NotImplementedError

    def list_items_for_user(self, user_id: str) -> List[ClothingItem]:
        raise NotImplementedError

    def update_item(self, user_id: str, item_id: str, updated_fields: Dict[str, object]) -> Optional[ClothingItem]:
        raise NotImplementedError

    def delete_item(self, user_id: str, item_id: str) -> bool:
        raise NotImplementedError

    def search_items(self, user_id: str, filters: Dict[str, object]) -> List[ClothingItem]:
        raise NotImplementedError

    def create_outfit(self, outfit: Outfit) -> Outfit:
        raise NotImplementedError

    def get_outfit(self, user_id: str, outfit_id: str) -> Optional[Outfit]:
        raise NotImplementedError

    def list_outfits_for_user(self, user_id: str) -> List[Outfit]:
        raise NotImplementedError

    def delete_outfit(self, user_id: str, outfit_id: str) -> bool:
        raise NotImplementedError

    def create_schedule(self, schedule: OutfitSchedule) -> OutfitSchedule:
        raise NotImplementedError

    def list_schedules_for_user(self, user_id: str) -> List[OutfitSchedule]:
        raise NotImplementedError

    def delete_schedule(self, user_id: str, schedule_id: str) -> bool:
        raise NotImplementedError

    def get_user_settings(self, user_id: str) -> Optional[UserSettings]:
        raise NotImplementedError

    def save_user_settings(self, settings: UserSettings) -> UserSettings:
        raise NotImplementedError


class SQLiteWardrobeStore(WardrobeStore):
    """Local SQLite-backed store.

    Outfit item references are stored as a JSON array in ``outfits.items`` and
    returned undecoded. Deleting an item does not touch outfits that reference
    it. Nothing constrains schedules to one per user and day.
    """

    def __init__(self, database_path: str | Path = "data/wardrobe.db") -> None:
        if not str(database_path or "").strip():
            raise ValueError("A wardrobe database path is required")
        self.database_path = Path(database_path)
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    @contextlib.contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection inside a transaction, translating sqlite errors."""

        try:
            conn = sqlite3.connect(self.database_path)
        except sqlite3.Error as exc:
            raise WardrobeStoreError(f"Could not open wardrobe database: {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        except sqlite3.Error as exc:
            raise WardrobeStoreError(f"Wardrobe database error: {exc}") from exc
        finally:
            conn.close()

    def _ensure_tables(self) -> None:
        with self._connect() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS clothing_items (
                    user_id TEXT NOT NULL,
                    item_id TEXT NOT NULL,
                    image_url TEXT NOT NULL,
                    name TEXT,
                    brand TEXT,
                    category TEXT NOT NULL,
                    color TEXT NOT NULL,
                    occasion TEXT NOT NULL,
                    created_at TEXT,
                    PRIMARY KEY (user_id, item_id)
                );
                CREATE TABLE IF NOT EXISTS outfits (
                    user_id TEXT NOT NULL,
                    outfit_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    occasion TEXT,
                    items TEXT NOT NULL DEFAULT '[]',
                    created_at TEXT,
                    PRIMARY KEY (user_id, outfit_id)
                );
                CREATE TABLE IF NOT EXISTS outfit_schedules (
                    user_id TEXT NOT NULL,
                    schedule_id TEXT NOT NULL,
                    outfit_id TEXT NOT NULL,
                    date TEXT NOT NULL,
                    created_at TEXT,
                    PRIMARY KEY (user_id, schedule_id)
                );
                CREATE TABLE IF NOT EXISTS user_settings (
                    user_id TEXT PRIMARY KEY,
                    google_calendar_connected INTEGER NOT NULL DEFAULT 0,
                    google_access_token TEXT,
                    google_token_expiry TEXT
                );
                """
            )

    # Items

    def create_item(self, item: ClothingItem) -> ClothingItem:
        stored = item if item.created_at else replace(item, created_at=_now())
        with self._connect() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO clothing_items (
                    user_id, item_id, image_url, name, brand, category, color, occasion, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    stored.user_id,
                    stored.item_id,
                    stored.image_url,
                    stored.name,
                    stored.brand,
                    tag_label(stored.category),
                    tag_label(stored.color),
                    tag_label(stored.occasion),
                    stored.created_at,
                ),
            )
        return stored

    def _row_to_item(self, row: sqlite3.Row) -> ClothingItem:
        return ClothingItem(
            item_id=row["item_id"],
            user_id=row["user_id"],
            image_url=row["image_url"],
            name=row["name"],
            brand=row["brand"],
            category=row["category"],
            color=row["color"],
            occasion=row["occasion"],
            created_at=row["created_at"],
        )

    def get_item(self, user_id: str, item_id: str) -> Optional[ClothingItem]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM clothing_items WHERE user_id = ? AND item_id = ?",
                (user_id, item_id),
            ).fetchone()
            return self._row_to_item(row) if row else None

    def list_items_for_user(self, user_id: str) -> List[ClothingItem]:
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT * FROM clothing_items WHERE user_id = ? ORDER BY created_at, rowid",
                (user_id,),
            )
            return [self._row_to_item(row) for row in cursor.fetchall()]

    def update_item(self, user_id: str, item_id: str, updated_fields: Dict[str, object]) -> Optional[ClothingItem]:
        current = self.get_item(user_id, item_id)
        if not current:
            return None

        values = {field.name: getattr(current, field.name) for field in fields(current)}
        for key, value in updated_fields.items():
            if key in {"user_id", "item_id", "created_at"}:
                continue
            if key in values:
                values[key] = value

        return self.create_item(ClothingItem(**values))

    def delete_item(self, user_id: str, item_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM clothing_items WHERE user_id = ? AND item_id = ?",
                (user_id, item_id),
            )
            return cursor.rowcount > 0

    def search_items(self, user_id: str, filters: Dict[str, object]) -> List[ClothingItem]:
        """Exact-match filtering on category, color and occasion; empty filters match all."""

        items = self.list_items_for_user(user_id)
        filters = filters or {}
        wanted = {}
        for field_name, parse in (("category", parse_category), ("color", parse_color), ("occasion", parse_occasion)):
            if filters.get(field_name):
                wanted[field_name] = parse(filters[field_name])

        return [
            item
            for item in items
            if all(getattr(item, field_name) == tag for field_name, tag in wanted.items())
        ]

    # Outfits

    def create_outfit(self, outfit: Outfit) -> Outfit:
        stored = outfit if outfit.created_at else replace(outfit, created_at=_now())
        items = stored.item_ids if isinstance(stored.item_ids, str) else json.dumps(list(stored.item_ids))
        with self._connect() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO outfits (user_id, outfit_id, name, occasion, items, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (stored.user_id, stored.outfit_id, stored.name, stored.occasion, items, stored.created_at),
            )
        return replace(stored, item_ids=items)

    def _row_to_outfit(self, row: sqlite3.Row) -> Outfit:
        return Outfit(
            outfit_id=row["outfit_id"],
            user_id=row["user_id"],
            name=row["name"],
            occasion=row["occasion"],
            item_ids=row["items"],
            created_at=row["created_at"],
        )

    def get_outfit(self, user_id: str, outfit_id: str) -> Optional[Outfit]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM outfits WHERE user_id = ? AND outfit_id = ?",
                (user_id, outfit_id),
            ).fetchone()
            return self._row_to_outfit(row) if row else None

    def list_outfits_for_user(self, user_id: str) -> List[Outfit]:
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT * FROM outfits WHERE user_id = ? ORDER BY created_at DESC, rowid DESC",
                (user_id,),
            )
            return [self._row_to_outfit(row) for row in cursor.fetchall()]

    def delete_outfit(self, user_id: str, outfit_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM outfits WHERE user_id = ? AND outfit_id = ?",
                (user_id, outfit_id),
            )
            return cursor.rowcount > 0

    # Schedules

    def create_schedule(self, schedule: OutfitSchedule) -> OutfitSchedule:
        stored = schedule if schedule.created_at else replace(schedule, created_at=_now())
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO outfit_schedules (user_id, schedule_id, outfit_id, date, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (stored.user_id, stored.schedule_id, stored.outfit_id, stored.date, stored.created_at),
            )
        return stored

    def list_schedules_for_user(self, user_id: str) -> List[OutfitSchedule]:
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT * FROM outfit_schedules WHERE user_id = ? ORDER BY date, created_at, rowid",
                (user_id,),
            )
            return [
                OutfitSchedule(
                    schedule_id=row["schedule_id"],
                    user_id=row["user_id"],
                    outfit_id=row["outfit_id"],
                    date=row["date"],
                    created_at=row["created_at"],
                )
                for row in cursor.fetchall()
            ]

    def delete_schedule(self, user_id: str, schedule_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM outfit_schedules WHERE user_id = ? AND schedule_id = ?",
                (user_id, schedule_id),
            )
            return cursor.rowcount > 0

    # Settings

    def get_user_settings(self, user_id: str) -> Optional[UserSettings]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM user_settings WHERE user_id = ?", (user_id,)).fetchone()
            if not row:
                return None
            return UserSettings(
                user_id=row["user_id"],
                google_calendar_connected=bool(row["google_calendar_connected"]),
                google_access_token=row["google_access_token"],
                google_token_expiry=row["google_token_expiry"],
            )

    def save_user_settings(self, settings: UserSettings) -> UserSettings:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO user_settings (user_id, google_calendar_connected, google_access_token, google_token_expiry)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    google_calendar_connected = excluded.google_calendar_connected,
                    google_access_token = excluded.google_access_token,
                    google_token_expiry = excluded.google_token_expiry
                """,
                (
                    settings.user_id,
                    int(settings.google_calendar_connected),
                    settings.google_access_token,
                    settings.google_token_expiry,
                ),
            )
        return settings


__all__ = ["WardrobeStore", "WardrobeStoreError", "SQLiteWardrobeStore"]
