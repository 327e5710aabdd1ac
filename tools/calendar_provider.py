"""Calendar provider abstractions and the Google Calendar implementation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

import requests
from google.oauth2.credentials import Credentials

from tools.observability import instrument_call


LOGGER = logging.getLogger(__name__)
EVENTS_URL = "https://www.googleapis.com/calendar/v3/calendars/{calendar_id}/events"


class CalendarUnavailableError(RuntimeError):
    """Calendar could not be read; the message is safe to show to users."""


@dataclass
class CalendarEvent:
    """Read-only event. Exactly one start form is normally present:
    ``start_date_time`` for timed events, ``start_date`` for all-day events."""

    event_id: str
    title: str
    description: Optional[str] = None
    start_date_time: Optional[str] = None
    start_date: Optional[str] = None
    time_zone: Optional[str] = None

    @property
    def is_all_day(self) -> bool:
        return not self.start_date_time and bool(self.start_date)

    def to_dict(self) -> dict:
        return {
            "event_id": self.event_id,
            "title": self.title,
            "description": self.description,
            "start_date_time": self.start_date_time,
            "start_date": self.start_date,
            "time_zone": self.time_zone,
            "is_all_day": self.is_all_day,
        }


def _rfc3339(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class CalendarProvider(ABC):
    """Read-only calendar source."""

    @abstractmethod
    def get_events(self, credentials: Credentials | None, time_min: datetime, time_max: datetime) -> List[CalendarEvent]:
        """Return events starting in ``[time_min, time_max)`` ordered by start time."""


class GoogleCalendarProvider(CalendarProvider):
    """Google Calendar v3 client using a stored user access token."""

    def __init__(self, calendar_id: str = "primary", timeout_seconds: float = 5.0) -> None:
        self.calendar_id = calendar_id or "primary"
        self.timeout_seconds = timeout_seconds

    def _coerce_event(self, payload: dict) -> CalendarEvent:
        if not payload.get("id"):
            raise ValueError("Calendar event without id")
        start_info = payload.get("start") or {}
        return CalendarEvent(
            event_id=str(payload["id"]),
            title=payload.get("summary") or "Untitled event",
            description=payload.get("description"),
            start_date_time=start_info.get("dateTime"),
            start_date=start_info.get("date"),
            time_zone=start_info.get("timeZone"),
        )

    @instrument_call("google_calendar.events")
    def get_events(self, credentials: Credentials | None, time_min: datetime, time_max: datetime) -> List[CalendarEvent]:
        if credentials is None or not credentials.token:
            raise CalendarUnavailableError("Google Calendar is not connected")
        if credentials.expired:
            raise CalendarUnavailableError("Google Calendar access has expired; reconnect to continue")
        if time_min > time_max:
            raise ValueError("time_min must be on or before time_max")

        headers: dict = {}
        credentials.apply(headers)
        params = {
            "timeMin": _rfc3339(time_min),
            "timeMax": _rfc3339(time_max),
            "showDeleted": "false",
            "singleEvents": "true",
            "orderBy": "startTime",
        }
        url = EVENTS_URL.format(calendar_id=self.calendar_id)

        try:
            response = requests.get(url, headers=headers, params=params, timeout=self.timeout_seconds)
            response.raise_for_status()
            payload = response.json()
        except requests.Timeout as exc:
            LOGGER.error("Google Calendar request timed out")
            raise CalendarUnavailableError("Google Calendar timed out") from exc
        except (requests.RequestException, ValueError) as exc:
            LOGGER.error("Calendar API unreachable", exc_info=exc)
            raise CalendarUnavailableError("Failed to fetch calendar events") from exc

        if not isinstance(payload, dict):
            LOGGER.error("Calendar API returned a non-object body")
            raise CalendarUnavailableError("Unexpected calendar data")

        events: List[CalendarEvent] = []
        for item in payload.get("items") or []:
            try:
                events.append(self._coerce_event(item))
            except (TypeError, ValueError, AttributeError) as exc:
                LOGGER.warning("Skipping malformed calendar event", exc_info=exc)
        return events


class MockCalendarProvider(CalendarProvider):
    """Offline deterministic calendar provider for tests."""

    def __init__(self, events: List[CalendarEvent] | None = None, error: str | None = None) -> None:
        self._events = events or []
        self.error = error
        self.calls: list = []

    def get_events(self, credentials: Credentials | None, time_min: datetime, time_max: datetime) -> List[CalendarEvent]:
        self.calls.append((time_min, time_max))
        if self.error:
            raise CalendarUnavailableError(self.error)
        return list(self._events)


__all__ = [
    "CalendarEvent",
    "CalendarProvider",
    "CalendarUnavailableError",
    "GoogleCalendarProvider",
    "MockCalendarProvider",
]
