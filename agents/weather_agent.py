"""Weather agent: current conditions and the one-reading-per-day forecast."""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict

from planner_app.config import PlannerConfig
from planner_app.logging_config import get_logger, log_event, operation_context
from logic.forecast import dedupe_forecast, weather_icon
from tools.weather_provider import WeatherProvider, WeatherUnavailableError


LOGGER = get_logger(__name__)


class WeatherAgent:
    """Fetches weather for the configured city and shapes it for the board."""

    def __init__(self, config: PlannerConfig, provider: WeatherProvider) -> None:
        self.config = config
        self.provider = provider

    def get_current_conditions(self, city: str | None = None) -> Dict[str, object]:
        with operation_context("agent:weather.get_current_conditions") as correlation_id:
            try:
                current = self.provider.get_current(city or self.config.weather_city)
            except WeatherUnavailableError as exc:
                log_event(LOGGER, logging.WARNING, "weather_fetch_failed", correlation_id=correlation_id, error=str(exc))
                return {"status": "error", "message": str(exc)}
            icon = weather_icon(current.condition, current.description, current.is_night)
            return {"status": "ok", "current": current, "icon": icon}

    def get_daily_forecast(self, city: str | None = None, today: date | None = None) -> Dict[str, object]:
        """Return at most ``board_days`` readings, one per day, today first."""

        with operation_context("agent:weather.get_daily_forecast") as correlation_id:
            try:
                samples = self.provider.get_forecast_samples(city or self.config.weather_city)
            except WeatherUnavailableError as exc:
                log_event(LOGGER, logging.WARNING, "weather_fetch_failed", correlation_id=correlation_id, error=str(exc))
                return {"status": "error", "message": str(exc), "forecast": []}

            daily = dedupe_forecast(samples, today=today, limit=self.config.board_days)
            log_event(
                LOGGER,
                logging.INFO,
                "agent_call_completed",
                agent="weather",
                method="get_daily_forecast",
                correlation_id=correlation_id,
                sample_count=len(samples),
                day_count=len(daily),
                placeholder=any(sample.placeholder for sample in daily),
            )
            return {"status": "ok", "forecast": daily}


__all__ = ["WeatherAgent"]
