"""Application bootstrap: builds the store, providers and agents."""

from planner_app.config import PlannerConfig
from planner_app.logging_config import configure_logging, get_logger
from agents.calendar_agent import CalendarAgent
from agents.planner_agent import PlannerAgent
from agents.wardrobe_agent import WardrobeAgent
from agents.weather_agent import WeatherAgent
from tools.calendar_provider import CalendarProvider, GoogleCalendarProvider
from tools.wardrobe_store import SQLiteWardrobeStore, WardrobeStore
from tools.weather_provider import OpenWeatherProvider, WeatherProvider


LOGGER = get_logger(__name__)


class WardrobePlannerApp:
    """Wires together the store, external providers and agents.

    Collaborators are passed in explicitly; anything omitted is built from the
    config. An unusable store path fails here, at startup.
    """

    def __init__(
        self,
        config: PlannerConfig | None = None,
        store: WardrobeStore | None = None,
        calendar_provider: CalendarProvider | None = None,
        weather_provider: WeatherProvider | None = None,
    ) -> None:
        self.config = config or PlannerConfig.from_env()
        configure_logging()

        self.store = store or SQLiteWardrobeStore(self.config.wardrobe_db_path)
        self.calendar_provider = calendar_provider or GoogleCalendarProvider(
            calendar_id=self.config.calendar_id,
            timeout_seconds=self.config.request_timeout_seconds,
        )
        self.weather_provider = weather_provider or OpenWeatherProvider(
            api_key=self.config.weather_api_key,
            city=self.config.weather_city,
            units=self.config.weather_units,
            timeout_seconds=self.config.request_timeout_seconds,
        )
        if not self.config.weather_api_key and weather_provider is None:
            LOGGER.warning("OpenWeather API key is not configured; weather will show as unavailable")

        self.wardrobe = WardrobeAgent(self.store)
        self.calendar = CalendarAgent(self.config, self.calendar_provider, self.store)
        self.weather = WeatherAgent(self.config, self.weather_provider)
        self.planner = PlannerAgent(self.config, self.store, self.calendar, self.weather)

    def healthcheck(self) -> dict:
        """Liveness payload for the process entry point and the HTTP probe."""

        return {
            "status": "ok",
            "service": "wardrobe-planner",
            "environment": self.config.environment or "local",
            "weather_configured": bool(self.config.weather_api_key),
        }


__all__ = ["WardrobePlannerApp"]
