"""Bucket calendar events by local calendar day."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from logic.date_keys import InvalidDateError, date_key
from tools.calendar_provider import CalendarEvent

logger = logging.getLogger(__name__)


def event_date_key(event: CalendarEvent) -> Optional[str]:
    """Day key for the event start; timed starts win over all-day dates.

    Raises :class:`InvalidDateError` for an unparseable start.
    """

    if event.start_date_time:
        return date_key(event.start_date_time)
    if event.start_date:
        return date_key(event.start_date)
    return None


def group_events_by_day(events: Iterable[CalendarEvent]) -> Dict[str, List[CalendarEvent]]:
    """Group events by day key, keeping upstream order within each day."""

    grouped: Dict[str, List[CalendarEvent]] = {}
    for event in events:
        try:
            key = event_date_key(event)
        except InvalidDateError as exc:
            logger.warning("Skipping event with invalid start", extra={"event_id": event.event_id, "error": str(exc)})
            continue
        if key is None:
            logger.warning("Skipping event with no start date", extra={"event_id": event.event_id})
            continue
        grouped.setdefault(key, []).append(event)
    return grouped


__all__ = ["event_date_key", "group_events_by_day"]
