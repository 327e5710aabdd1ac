"""Reduce a 3-hourly forecast feed to one reading per local day."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, List, Sequence, Tuple

from logic.date_keys import date_key, local_midnight, local_today
from tools.weather_provider import ForecastSample, WeatherIcon

logger = logging.getLogger(__name__)

FORECAST_DAYS = 5
PLACEHOLDER_CONDITION = "Unavailable"

# Checked in order; the first keyword hit wins.
_ICON_RULES: Tuple[Tuple[WeatherIcon, Tuple[str, ...]], ...] = (
    (WeatherIcon.THUNDERSTORM, ("thunderstorm",)),
    (WeatherIcon.DRIZZLE, ("drizzle",)),
    (WeatherIcon.RAIN, ("rain", "shower")),
    (WeatherIcon.SNOW, ("snow", "sleet")),
    (WeatherIcon.FOG, ("mist", "fog", "haze", "smoke")),
    (WeatherIcon.CLEAR_DAY, ("clear",)),
    (WeatherIcon.CLOUDY, ("cloud",)),
)


def is_daytime(hour: int) -> bool:
    return 6 <= hour < 18


def _match(text: str) -> WeatherIcon | None:
    for icon, keywords in _ICON_RULES:
        if any(keyword in text for keyword in keywords):
            return icon
    return None


def weather_icon(condition: str, description: str = "", is_night: bool = False) -> WeatherIcon:
    """Map an OpenWeather condition/description pair to an icon category.

    The coarse condition decides first; the description is only consulted when
    the condition matches nothing. Rain whose description mentions drizzle is
    shown as drizzle.
    """

    condition_text = (condition or "").lower()
    description_text = (description or "").lower()
    icon = _match(condition_text) or _match(description_text) or WeatherIcon.DEFAULT
    if icon is WeatherIcon.RAIN and "drizzle" in description_text:
        icon = WeatherIcon.DRIZZLE
    if icon is WeatherIcon.CLEAR_DAY and is_night:
        icon = WeatherIcon.CLEAR_NIGHT
    return icon


def _local_hour(moment: datetime) -> int:
    return (moment.astimezone() if moment.tzinfo is not None else moment).hour


def placeholder_sample(today: date) -> ForecastSample:
    return ForecastSample(
        timestamp=local_midnight(today),
        temperature=0.0,
        condition=PLACEHOLDER_CONDITION,
        description="",
        icon=WeatherIcon.DEFAULT,
        placeholder=True,
    )


def dedupe_forecast(
    samples: Iterable[ForecastSample],
    today: date | None = None,
    limit: int = FORECAST_DAYS,
) -> List[ForecastSample]:
    """Keep the first sample of each local day, always including today.

    Samples dated before ``today`` are ignored. Scanning stops once ``limit``
    days are collected and today is among them. When the feed has no reading
    for today, an ``Unavailable`` placeholder is prepended and the tail is
    trimmed back to ``limit``.
    """

    today = today or local_today()
    today_key = today.isoformat()
    seen: set[str] = set()
    daily: List[ForecastSample] = []

    for sample in samples:
        key = date_key(sample.timestamp)
        if key < today_key or key in seen:
            continue
        icon = weather_icon(sample.condition, sample.description, not is_daytime(_local_hour(sample.timestamp)))
        daily.append(replace(sample, icon=icon))
        seen.add(key)
        if len(daily) >= limit and today_key in seen:
            break

    if today_key not in seen:
        logger.warning("No forecast sample for today; inserting placeholder", extra={"date": today_key})
        daily.insert(0, placeholder_sample(today))

    return daily[:limit]


def forecast_by_day(forecasts: Sequence[ForecastSample]) -> dict[str, ForecastSample]:
    """Index daily forecasts by date key, first sample per key winning."""

    indexed: dict[str, ForecastSample] = {}
    for sample in forecasts:
        indexed.setdefault(date_key(sample.timestamp), sample)
    return indexed


__all__ = [
    "FORECAST_DAYS",
    "PLACEHOLDER_CONDITION",
    "dedupe_forecast",
    "forecast_by_day",
    "is_daytime",
    "placeholder_sample",
    "weather_icon",
]
