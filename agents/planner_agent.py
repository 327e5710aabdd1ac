"""Planner agent: gathers inputs concurrently and assembles the 5-day board."""

from __future__ import annotations

import contextvars
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Any, Dict

from planner_app.config import PlannerConfig
from planner_app.logging_config import get_logger, log_event, operation_context
from agents.calendar_agent import CalendarAgent
from agents.weather_agent import WeatherAgent
from logic.board import assemble_board
from logic.date_keys import local_today
from logic.schedule_join import hydrate_schedules
from tools.wardrobe_store import WardrobeStore, WardrobeStoreError


LOGGER = get_logger(__name__)


class PlannerAgent:
    """Builds the board of day columns for one user.

    The catalog, outfits, schedules, calendar and forecast are fetched in
    parallel; reconciliation runs once all of them have resolved. Calendar and
    weather failures degrade the board rather than fail it.
    """

    def __init__(
        self,
        config: PlannerConfig,
        store: WardrobeStore,
        calendar_agent: CalendarAgent,
        weather_agent: WeatherAgent,
        max_workers: int = 5,
    ) -> None:
        self.config = config
        self.store = store
        self.calendar_agent = calendar_agent
        self.weather_agent = weather_agent
        self.max_workers = max_workers

    def build_board(self, user_id: str, today: date | None = None) -> Dict[str, Any]:
        with operation_context("agent:planner.build_board") as correlation_id:
            today = today or local_today()
            log_event(
                LOGGER,
                logging.INFO,
                "agent_call_started",
                agent="planner",
                method="build_board",
                correlation_id=correlation_id,
                today=today.isoformat(),
            )

            with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="board") as pool:

                def submit(func, *args, **kwargs):
                    # Each task runs in a copy of this context to keep the correlation id.
                    return pool.submit(contextvars.copy_context().run, func, *args, **kwargs)

                catalog_future = submit(self.store.list_items_for_user, user_id)
                outfits_future = submit(self.store.list_outfits_for_user, user_id)
                schedules_future = submit(self.store.list_schedules_for_user, user_id)
                calendar_future = submit(self.calendar_agent.get_upcoming_events, user_id, today=today)
                weather_future = submit(self.weather_agent.get_daily_forecast, today=today)

                try:
                    catalog = catalog_future.result()
                    outfits = outfits_future.result()
                    schedules = schedules_future.result()
                    calendar = calendar_future.result()
                    weather = weather_future.result()
                except WardrobeStoreError as exc:
                    log_event(
                        LOGGER,
                        logging.ERROR,
                        "board_inputs_failed",
                        correlation_id=correlation_id,
                        exc_info=exc,
                    )
                    return {"status": "error", "message": "Could not load your wardrobe. Please try again."}

            hydrated = hydrate_schedules(schedules, outfits, catalog)
            columns = assemble_board(
                hydrated,
                calendar.get("events_by_day", {}),
                weather.get("forecast", []),
                today=today,
                days=self.config.board_days,
            )

            log_event(
                LOGGER,
                logging.INFO,
                "agent_call_completed",
                agent="planner",
                method="build_board",
                correlation_id=correlation_id,
                column_count=len(columns),
                calendar_status=calendar.get("status"),
                weather_status=weather.get("status"),
            )
            return {
                "status": "ok",
                "today": today.isoformat(),
                "columns": columns,
                "calendar": {"status": calendar.get("status"), "message": calendar.get("message")},
                "weather": {"status": weather.get("status"), "message": weather.get("message")},
            }


__all__ = ["PlannerAgent"]
