"""Canonical local calendar-day keys.

Every comparison between schedules, calendar events and forecast samples goes
through :func:`date_key`, which renders the calendar day in the timezone of the
running process as ``YYYY-MM-DD``.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import List, Union

DateLike = Union[str, date, datetime, int, float]

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class InvalidDateError(ValueError):
    """Raised when a value cannot be read as a calendar day."""


def _to_local(moment: datetime) -> datetime:
    # Naive values are already local wall time.
    return moment.astimezone() if moment.tzinfo is not None else moment


def _parse_string(value: str) -> date:
    text = value.strip()
    try:
        if _DATE_ONLY.match(text):
            # Midnight local, never midnight UTC.
            return date.fromisoformat(text)
        return _to_local(datetime.fromisoformat(text.replace("Z", "+00:00"))).date()
    except ValueError as exc:
        raise InvalidDateError(f"Unparseable date value: {value!r}") from exc


def to_local_date(value: DateLike) -> date:
    """Resolve any supported date representation to a local calendar date."""

    if isinstance(value, bool):
        raise InvalidDateError(f"Unsupported date value: {value!r}")
    if isinstance(value, datetime):
        return _to_local(value).date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value).date()
        except (OverflowError, OSError, ValueError) as exc:
            raise InvalidDateError(f"Epoch out of range: {value!r}") from exc
    if isinstance(value, str):
        return _parse_string(value)
    raise InvalidDateError(f"Unsupported date value: {value!r}")


def date_key(value: DateLike) -> str:
    """Return the ``YYYY-MM-DD`` key for ``value`` in the local timezone."""

    return to_local_date(value).isoformat()


def local_today() -> date:
    return datetime.now().date()


def local_midnight(day: date) -> datetime:
    """Aware datetime for the start of ``day`` in the local timezone."""

    return datetime.combine(day, time.min).astimezone()


def next_date_keys(start: date | None = None, days: int = 5) -> List[str]:
    """Keys for ``days`` consecutive days beginning at ``start`` (default today)."""

    first = start or local_today()
    return [(first + timedelta(days=offset)).isoformat() for offset in range(days)]


__all__ = [
    "DateLike",
    "InvalidDateError",
    "date_key",
    "local_midnight",
    "local_today",
    "next_date_keys",
    "to_local_date",
]
