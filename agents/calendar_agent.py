"""Calendar agent: connection state and day-grouped upcoming events."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Dict

from planner_app.config import PlannerConfig
from planner_app.logging_config import get_logger, log_event, operation_context
from logic.date_keys import local_midnight, local_today
from logic.event_grouping import group_events_by_day
from models.user_settings import UserSettings
from tools.calendar_provider import CalendarProvider, CalendarUnavailableError
from tools.observability import recover_store_errors
from tools.wardrobe_store import WardrobeStore

LOGGER = get_logger(__name__)

NOT_CONNECTED_MESSAGE = "Connect your Google Calendar to see events on the board."
EXPIRED_MESSAGE = "Your Google Calendar access has expired. Reconnect to see events."


class CalendarAgent:
    """Reads upcoming events for users who connected Google Calendar."""

    def __init__(self, config: PlannerConfig, provider: CalendarProvider, store: WardrobeStore) -> None:
        self.config = config
        self.provider = provider
        self.store = store

    @recover_store_errors("calendar")
    def connect_calendar(self, user_id: str, access_token: str, expires_in: int | None = None) -> Dict[str, object]:
        """Store a freshly granted access token and its expiry."""

        with operation_context("agent:calendar.connect_calendar") as correlation_id:
            if not access_token:
                return {"status": "error", "message": "An access token is required."}
            expiry = None
            if expires_in:
                try:
                    expiry = (datetime.now(timezone.utc) + timedelta(seconds=expires_in)).isoformat()
                except (OverflowError, ValueError) as exc:
                    log_event(
                        LOGGER,
                        logging.WARNING,
                        "calendar_expiry_rejected",
                        correlation_id=correlation_id,
                        error=str(exc),
                    )
                    return {"status": "error", "message": "The token lifetime is out of range."}
            settings = self.store.save_user_settings(
                UserSettings(
                    user_id=user_id,
                    google_calendar_connected=True,
                    google_access_token=access_token,
                    google_token_expiry=expiry,
                )
            )
            log_event(
                LOGGER,
                logging.INFO,
                "agent_call_completed",
                agent="calendar",
                method="connect_calendar",
                correlation_id=correlation_id,
                expires_at=expiry,
            )
            return {"status": "ok", "connected": True, "expires_at": settings.google_token_expiry}

    @recover_store_errors("calendar")
    def disconnect_calendar(self, user_id: str) -> Dict[str, object]:
        with operation_context("agent:calendar.disconnect_calendar"):
            self.store.save_user_settings(UserSettings(user_id=user_id))
            return {"status": "ok", "connected": False}

    @recover_store_errors("calendar")
    def get_upcoming_events(self, user_id: str, today: date | None = None) -> Dict[str, object]:
        """Fetch the upcoming window and group it by day key.

        A missing, disconnected or expired credential is reported as
        ``unavailable`` so the board can fall back to outfits and weather.
        """

        with operation_context("agent:calendar.get_upcoming_events") as correlation_id:
            settings = self.store.get_user_settings(user_id)
            try:
                credentials = settings.calendar_credentials() if settings else None
            except ValueError as exc:
                log_event(
                    LOGGER,
                    logging.WARNING,
                    "calendar_expiry_unreadable",
                    correlation_id=correlation_id,
                    error=str(exc),
                )
                return {"status": "unavailable", "message": EXPIRED_MESSAGE, "events_by_day": {}}
            if credentials is None:
                return {"status": "unavailable", "message": NOT_CONNECTED_MESSAGE, "events_by_day": {}}
            if credentials.expired:
                log_event(LOGGER, logging.INFO, "calendar_token_expired", correlation_id=correlation_id)
                return {"status": "unavailable", "message": EXPIRED_MESSAGE, "events_by_day": {}}

            start_day = today or local_today()
            time_min = local_midnight(start_day)
            time_max = local_midnight(start_day + timedelta(days=self.config.calendar_window_days))
            try:
                events = self.provider.get_events(credentials, time_min, time_max)
            except CalendarUnavailableError as exc:
                log_event(
                    LOGGER,
                    logging.WARNING,
                    "calendar_fetch_failed",
                    correlation_id=correlation_id,
                    error=str(exc),
                )
                return {"status": "error", "message": str(exc), "events_by_day": {}}

            events_by_day = group_events_by_day(events)
            log_event(
                LOGGER,
                logging.INFO,
                "agent_call_completed",
                agent="calendar",
                method="get_upcoming_events",
                correlation_id=correlation_id,
                event_count=len(events),
                day_count=len(events_by_day),
            )
            return {"status": "ok", "events_by_day": events_by_day, "event_count": len(events)}


__all__ = ["CalendarAgent"]
