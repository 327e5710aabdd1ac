"""Configuration helpers for the wardrobe planner."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_CITY = "Calgary"
DEFAULT_DB_PATH = "data/wardrobe.db"


@dataclass
class PlannerConfig:
    """Configuration values for the planner service.

    Secrets such as the OpenWeather key come from the environment. Everything
    else may also live in an environment file under
    ``config/environments/<env>.yaml``.
    """

    weather_api_key: Optional[str] = None
    weather_city: str = DEFAULT_CITY
    weather_units: str = "metric"
    wardrobe_db_path: str = DEFAULT_DB_PATH
    calendar_id: str = "primary"
    calendar_window_days: int = 30
    board_days: int = 5
    request_timeout_seconds: float = 5.0
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "PlannerConfig":
        """Build a config from environment variables merged over an environment file."""

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("PLANNER_CONFIG_DIR", "config/environments"))
        file_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            file_config = cls._load_config_file(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            return os.getenv(key.upper(), file_config.get(key, default))

        return cls(
            weather_api_key=get_value("openweather_api_key") or None,
            weather_city=str(get_value("weather_city", DEFAULT_CITY) or DEFAULT_CITY),
            weather_units=str(get_value("weather_units", "metric") or "metric"),
            wardrobe_db_path=str(get_value("wardrobe_db_path", DEFAULT_DB_PATH) or ""),
            calendar_id=str(get_value("calendar_id", "primary") or "primary"),
            calendar_window_days=int(get_value("calendar_window_days", "30") or 30),
            board_days=int(get_value("board_days", "5") or 5),
            request_timeout_seconds=float(get_value("request_timeout_seconds", "5.0") or 5.0),
            environment=env_name,
        )

    @staticmethod
    def _load_config_file(path: Path) -> dict:
        """Parse flat ``key: value`` lines, ignoring comments and blanks."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#") or ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
                value = value[1:-1]
            config[key.strip()] = value
        return config
