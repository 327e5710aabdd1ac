"""Wardrobe agent: catalog, outfit and schedule operations for one user."""

from __future__ import annotations

import logging
import random
import uuid
from typing import Any, Dict, Iterable, List

from planner_app.logging_config import get_logger, log_event, operation_context
from logic.date_keys import InvalidDateError, date_key
from logic.outfit_builder import available_categories, randomize_outfit, toggle_selection
from logic.schedule_join import hydrate_outfit, hydrate_schedules, index_catalog, sort_items_by_category
from models.clothing_item import from_raw_metadata
from models.outfit import HydratedSchedule, Outfit, OutfitSchedule
from tools.observability import recover_store_errors
from tools.wardrobe_store import WardrobeStore

LOGGER = get_logger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex


class WardrobeAgent:
    """Coordinates store writes and returns hydrated records.

    Every write is followed by the same hydration used for loads, so what a
    caller sees after a write matches a fresh fetch.
    """

    def __init__(self, store: WardrobeStore) -> None:
        self.store = store

    def _completed(self, method: str, correlation_id: str, **fields: Any) -> None:
        log_event(
            LOGGER,
            logging.INFO,
            "agent_call_completed",
            agent="wardrobe",
            method=method,
            correlation_id=correlation_id,
            **fields,
        )

    # Items

    @recover_store_errors("wardrobe")
    def add_item(self, user_id: str, item_data: Dict[str, Any]) -> Dict[str, Any]:
        with operation_context("agent:wardrobe.add_item") as correlation_id:
            try:
                item = from_raw_metadata({**item_data, "item_id": item_data.get("item_id") or _new_id(), "user_id": user_id})
            except ValueError as exc:
                return {"status": "error", "message": str(exc)}
            stored = self.store.create_item(item)
            self._completed("add_item", correlation_id, item_id=stored.item_id)
            return {"status": "ok", "item": stored}

    @recover_store_errors("wardrobe")
    def update_item(self, user_id: str, item_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        with operation_context("agent:wardrobe.update_item") as correlation_id:
            try:
                updated = self.store.update_item(user_id, item_id, updates)
            except ValueError as exc:
                return {"status": "error", "message": str(exc)}
            if updated is None:
                return {"status": "not_found", "message": f"Item {item_id} not found"}
            self._completed("update_item", correlation_id, item_id=item_id, fields=sorted(updates))
            return {"status": "ok", "item": updated}

    @recover_store_errors("wardrobe")
    def delete_item(self, user_id: str, item_id: str) -> Dict[str, Any]:
        """Delete an item. Outfits that reference it keep the dangling id."""

        with operation_context("agent:wardrobe.delete_item") as correlation_id:
            if not self.store.delete_item(user_id, item_id):
                return {"status": "not_found", "message": f"Item {item_id} not found"}
            self._completed("delete_item", correlation_id, item_id=item_id)
            return {"status": "ok"}

    @recover_store_errors("wardrobe")
    def list_items(self, user_id: str, filters: Dict[str, Any] | None = None) -> Dict[str, Any]:
        with operation_context("agent:wardrobe.list_items"):
            try:
                items = self.store.search_items(user_id, filters or {})
            except ValueError as exc:
                return {"status": "error", "message": str(exc)}
            categories = available_categories(self.store.list_items_for_user(user_id))
            return {"status": "ok", "items": items, "categories": categories}

    # Outfits

    @recover_store_errors("wardrobe")
    def save_outfit(
        self, user_id: str, name: str, item_ids: Iterable[str], occasion: str | None = None
    ) -> Dict[str, Any]:
        with operation_context("agent:wardrobe.save_outfit") as correlation_id:
            ids: List[str] = [str(item_id) for item_id in item_ids]
            if not (name or "").strip() or not ids:
                return {
                    "status": "error",
                    "message": "Please provide a name for the outfit and select at least one item",
                }
            stored = self.store.create_outfit(
                Outfit(
                    outfit_id=_new_id(),
                    user_id=user_id,
                    name=name.strip(),
                    item_ids=ids,
                    occasion=(occasion or "").strip() or None,
                )
            )
            outfit = hydrate_outfit(stored, self.store.list_items_for_user(user_id))
            self._completed("save_outfit", correlation_id, outfit_id=outfit.outfit_id, item_count=len(outfit.items))
            return {"status": "ok", "outfit": outfit}

    @recover_store_errors("wardrobe")
    def delete_outfit(self, user_id: str, outfit_id: str) -> Dict[str, Any]:
        with operation_context("agent:wardrobe.delete_outfit") as correlation_id:
            if not self.store.delete_outfit(user_id, outfit_id):
                return {"status": "not_found", "message": f"Outfit {outfit_id} not found"}
            self._completed("delete_outfit", correlation_id, outfit_id=outfit_id)
            return {"status": "ok"}

    @recover_store_errors("wardrobe")
    def list_outfits(self, user_id: str) -> Dict[str, Any]:
        with operation_context("agent:wardrobe.list_outfits"):
            catalog = self.store.list_items_for_user(user_id)
            outfits = [hydrate_outfit(outfit, catalog) for outfit in self.store.list_outfits_for_user(user_id)]
            return {"status": "ok", "outfits": outfits}

    @recover_store_errors("wardrobe")
    def random_outfit(self, user_id: str, rng: random.Random | None = None) -> Dict[str, Any]:
        """Suggest one random item from each category in the catalog."""

        with operation_context("agent:wardrobe.random_outfit") as correlation_id:
            catalog = self.store.list_items_for_user(user_id)
            if not catalog:
                return {"status": "error", "message": "Add some clothes to your wardrobe first"}
            items = sort_items_by_category(randomize_outfit(catalog, rng=rng))
            self._completed("random_outfit", correlation_id, item_count=len(items))
            return {"status": "ok", "items": items}

    @recover_store_errors("wardrobe")
    def toggle_item(self, user_id: str, selected_ids: Iterable[str], item_id: str) -> Dict[str, Any]:
        """Apply one click on ``item_id`` to an in-progress outfit selection.

        Ids in ``selected_ids`` that are no longer in the catalog are dropped.
        """

        with operation_context("agent:wardrobe.toggle_item"):
            by_id = index_catalog(self.store.list_items_for_user(user_id))
            item = by_id.get(item_id)
            if item is None:
                return {"status": "not_found", "message": f"Item {item_id} not found"}
            selected = [by_id[selected_id] for selected_id in selected_ids if selected_id in by_id]
            return {"status": "ok", "items": toggle_selection(selected, item)}

    # Schedules

    @recover_store_errors("wardrobe")
    def schedule_outfit(self, user_id: str, outfit_id: str, date: str) -> Dict[str, Any]:
        """Assign an outfit to a day, then re-read the user's schedules."""

        with operation_context("agent:wardrobe.schedule_outfit") as correlation_id:
            if not outfit_id or not date:
                return {"status": "error", "message": "Please select an outfit and a date"}
            try:
                day = date_key(date)
            except InvalidDateError as exc:
                return {"status": "error", "message": str(exc)}
            if self.store.get_outfit(user_id, outfit_id) is None:
                return {"status": "not_found", "message": f"Outfit {outfit_id} not found"}

            created = self.store.create_schedule(
                OutfitSchedule(schedule_id=_new_id(), user_id=user_id, outfit_id=outfit_id, date=day)
            )
            schedules = self._hydrated_schedules(user_id)
            schedule = next(s for s in schedules if s.schedule_id == created.schedule_id)
            self._completed("schedule_outfit", correlation_id, outfit_id=outfit_id, date=day)
            return {"status": "ok", "schedule": schedule, "schedules": schedules}

    @recover_store_errors("wardrobe")
    def delete_schedule(self, user_id: str, schedule_id: str) -> Dict[str, Any]:
        with operation_context("agent:wardrobe.delete_schedule") as correlation_id:
            if not self.store.delete_schedule(user_id, schedule_id):
                return {"status": "not_found", "message": f"Schedule {schedule_id} not found"}
            self._completed("delete_schedule", correlation_id, schedule_id=schedule_id)
            return {"status": "ok"}

    @recover_store_errors("wardrobe")
    def list_schedules(self, user_id: str) -> Dict[str, Any]:
        with operation_context("agent:wardrobe.list_schedules"):
            return {"status": "ok", "schedules": self._hydrated_schedules(user_id)}

    def _hydrated_schedules(self, user_id: str) -> List[HydratedSchedule]:
        return hydrate_schedules(
            self.store.list_schedules_for_user(user_id),
            self.store.list_outfits_for_user(user_id),
            self.store.list_items_for_user(user_id),
        )


__all__ = ["WardrobeAgent"]
