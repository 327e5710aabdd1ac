"""Weather provider abstractions and the OpenWeather implementation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import List

import requests
from pydantic import BaseModel, Field, ValidationError

from tools.observability import instrument_call


LOGGER = logging.getLogger(__name__)
BASE_URL = "https://api.openweathermap.org/data/2.5"


class WeatherUnavailableError(RuntimeError):
    """Weather could not be loaded; the message is safe to show to users."""


class WeatherIcon(Enum):
    CLEAR_DAY = "clear-day"
    CLEAR_NIGHT = "clear-night"
    CLOUDY = "cloudy"
    RAIN = "rain"
    DRIZZLE = "drizzle"
    SNOW = "snow"
    THUNDERSTORM = "thunderstorm"
    FOG = "fog"
    DEFAULT = "default"


@dataclass(frozen=True)
class ForecastSample:
    """One forecast reading. ``icon`` is assigned during deduplication."""

    timestamp: datetime
    temperature: float
    condition: str
    description: str = ""
    icon: WeatherIcon | None = None
    placeholder: bool = False

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "temperature": round(self.temperature),
            "condition": self.condition,
            "description": self.description,
            "icon": self.icon.value if self.icon else None,
            "placeholder": self.placeholder,
        }


@dataclass(frozen=True)
class CurrentConditions:
    timestamp: datetime
    temperature: float
    condition: str
    description: str
    is_night: bool

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "temperature": round(self.temperature),
            "condition": self.condition,
            "description": self.description,
            "is_night": self.is_night,
        }


class _Condition(BaseModel):
    main: str = "Unknown"
    description: str = ""


class _Main(BaseModel):
    temp: float


class _Sys(BaseModel):
    sunrise: int | None = None
    sunset: int | None = None


class _CurrentResponse(BaseModel):
    dt: int
    main: _Main
    weather: List[_Condition] = []
    sys: _Sys = Field(default_factory=_Sys)


class _ForecastEntry(BaseModel):
    dt: int
    main: _Main
    weather: List[_Condition] = []


class _ForecastResponse(BaseModel):
    list: List[_ForecastEntry] = []


def _utc(epoch: int) -> datetime:
    return datetime.fromtimestamp(epoch, tz=timezone.utc)


class WeatherProvider(ABC):
    """Read-only weather source keyed by city name."""

    @abstractmethod
    def get_current(self, city: str | None = None) -> CurrentConditions:
        """Return current conditions for the city."""

    @abstractmethod
    def get_forecast_samples(self, city: str | None = None) -> List[ForecastSample]:
        """Return the 3-hourly forecast in chronological order."""


class OpenWeatherProvider(WeatherProvider):
    """OpenWeather client with schema validation."""

    def __init__(
        self,
        api_key: str | None = None,
        city: str = "Calgary",
        units: str = "metric",
        timeout_seconds: float = 5.0,
    ) -> None:
        self.api_key = api_key
        self.city = city
        self.units = units
        self.timeout_seconds = timeout_seconds

    def _fetch(self, endpoint: str, city: str | None) -> dict:
        if not self.api_key:
            raise WeatherUnavailableError("OpenWeather API key is not configured")
        params = {"q": city or self.city, "appid": self.api_key, "units": self.units}
        try:
            response = requests.get(f"{BASE_URL}/{endpoint}", params=params, timeout=self.timeout_seconds)
            response.raise_for_status()
            return response.json()
        except requests.Timeout as exc:
            LOGGER.error("OpenWeather request timed out", extra={"endpoint": endpoint})
            raise WeatherUnavailableError("Weather service timed out") from exc
        except (requests.RequestException, ValueError) as exc:
            LOGGER.error("OpenWeather unreachable", extra={"endpoint": endpoint}, exc_info=exc)
            raise WeatherUnavailableError(f"Failed to fetch {endpoint} data") from exc

    @instrument_call("openweather.current")
    def get_current(self, city: str | None = None) -> CurrentConditions:
        payload = self._fetch("weather", city)
        try:
            parsed = _CurrentResponse.model_validate(payload)
        except ValidationError as exc:
            LOGGER.error("Current weather payload failed validation", exc_info=exc)
            raise WeatherUnavailableError("Unexpected current weather data") from exc

        condition = parsed.weather[0] if parsed.weather else _Condition()
        sunrise, sunset = parsed.sys.sunrise, parsed.sys.sunset
        is_night = bool(sunrise and sunset and (parsed.dt > sunset or parsed.dt < sunrise))
        return CurrentConditions(
            timestamp=_utc(parsed.dt),
            temperature=parsed.main.temp,
            condition=condition.main,
            description=condition.description,
            is_night=is_night,
        )

    @instrument_call("openweather.forecast")
    def get_forecast_samples(self, city: str | None = None) -> List[ForecastSample]:
        payload = self._fetch("forecast", city)
        try:
            parsed = _ForecastResponse.model_validate(payload)
        except ValidationError as exc:
            LOGGER.error("Forecast payload failed validation", exc_info=exc)
            raise WeatherUnavailableError("Unexpected forecast data") from exc

        samples = []
        for entry in parsed.list:
            condition = entry.weather[0] if entry.weather else _Condition()
            samples.append(
                ForecastSample(
                    timestamp=_utc(entry.dt),
                    temperature=entry.main.temp,
                    condition=condition.main,
                    description=condition.description,
                )
            )
        return samples


class MockWeatherProvider(WeatherProvider):
    """Offline deterministic weather provider for tests."""

    def __init__(
        self,
        samples: List[ForecastSample] | None = None,
        current: CurrentConditions | None = None,
        error: str | None = None,
    ) -> None:
        self.samples = samples or []
        self.current = current
        self.error = error

    def get_current(self, city: str | None = None) -> CurrentConditions:
        if self.error or self.current is None:
            raise WeatherUnavailableError(self.error or "No current conditions")
        return self.current

    def get_forecast_samples(self, city: str | None = None) -> List[ForecastSample]:
        if self.error:
            raise WeatherUnavailableError(self.error)
        return list(self.samples)


__all__ = [
    "CurrentConditions",
    "ForecastSample",
    "MockWeatherProvider",
    "OpenWeatherProvider",
    "WeatherIcon",
    "WeatherProvider",
    "WeatherUnavailableError",
]
