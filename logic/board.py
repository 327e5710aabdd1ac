"""Assemble the 5-day planner board from schedules, events and forecasts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Mapping, Optional, Sequence

from logic.date_keys import local_today, next_date_keys
from logic.forecast import FORECAST_DAYS, forecast_by_day
from logic.schedule_join import pick_schedule
from models.outfit import HydratedOutfit, HydratedSchedule
from tools.calendar_provider import CalendarEvent
from tools.weather_provider import ForecastSample


@dataclass
class DayColumn:
    """One day of the board. Absent data is ``None`` or an empty list."""

    date_key: str
    schedule: Optional[HydratedSchedule] = None
    events: List[CalendarEvent] = field(default_factory=list)
    forecast: Optional[ForecastSample] = None

    @property
    def outfit(self) -> Optional[HydratedOutfit]:
        return self.schedule.outfit if self.schedule else None

    def to_dict(self) -> Dict[str, object]:
        return {
            "date": self.date_key,
            "schedule": self.schedule.to_dict() if self.schedule else None,
            "events": [event.to_dict() for event in self.events],
            "forecast": self.forecast.to_dict() if self.forecast else None,
        }


def assemble_board(
    schedules: Sequence[HydratedSchedule],
    events_by_day: Mapping[str, List[CalendarEvent]],
    forecasts: Sequence[ForecastSample],
    today: date | None = None,
    days: int = FORECAST_DAYS,
) -> List[DayColumn]:
    """Build one column per day from today, never skipping a day."""

    keys = sorted(next_date_keys(today or local_today(), days))
    weather = forecast_by_day(forecasts)
    return [
        DayColumn(
            date_key=key,
            schedule=pick_schedule(schedules, key),
            events=list(events_by_day.get(key, [])),
            forecast=weather.get(key),
        )
        for key in keys
    ]


__all__ = ["DayColumn", "assemble_board"]
