"""Daily forecast reduction and icon mapping."""

from datetime import date, datetime, timedelta

import pytest

from logic.date_keys import date_key, local_midnight
from logic.forecast import PLACEHOLDER_CONDITION, dedupe_forecast, forecast_by_day, weather_icon
from tools.weather_provider import ForecastSample, WeatherIcon

TODAY = date(2024, 5, 10)


def _sample(day_offset: int, hour: int, condition: str = "Clouds", description: str = "", temp: float = 12.0):
    moment = local_midnight(TODAY + timedelta(days=day_offset)) + timedelta(hours=hour)
    return ForecastSample(timestamp=moment, temperature=temp, condition=condition, description=description)


def _three_hourly(first_day: int, days: int, start_hour: int = 0):
    samples = []
    for day in range(first_day, first_day + days):
        for hour in range(start_hour if day == first_day else 0, 24, 3):
            samples.append(_sample(day, hour, temp=float(day * 100 + hour)))
    return samples


def test_keeps_first_sample_per_day_starting_today() -> None:
    daily = dedupe_forecast(_three_hourly(0, 6, start_hour=15), today=TODAY)

    assert [date_key(sample.timestamp) for sample in daily] == [
        "2024-05-10",
        "2024-05-11",
        "2024-05-12",
        "2024-05-13",
        "2024-05-14",
    ]
    assert daily[0].temperature == 15.0
    assert daily[1].temperature == 100.0
    assert all(sample.icon is not None for sample in daily)
    assert not any(sample.placeholder for sample in daily)


def test_missing_today_gets_placeholder_and_is_truncated() -> None:
    daily = dedupe_forecast(_three_hourly(1, 5), today=TODAY)

    assert len(daily) == 5
    head = daily[0]
    assert head.placeholder
    assert head.condition == PLACEHOLDER_CONDITION
    assert head.temperature == 0
    assert head.icon is WeatherIcon.DEFAULT
    assert date_key(head.timestamp) == "2024-05-10"
    assert [date_key(sample.timestamp) for sample in daily[1:]] == [
        "2024-05-11",
        "2024-05-12",
        "2024-05-13",
        "2024-05-14",
    ]


def test_empty_feed_yields_only_the_placeholder() -> None:
    daily = dedupe_forecast([], today=TODAY)
    assert len(daily) == 1
    assert daily[0].placeholder


def test_samples_before_today_are_ignored() -> None:
    daily = dedupe_forecast([_sample(-1, 21, temp=-5.0), _sample(0, 0, temp=3.0)], today=TODAY)
    assert len(daily) == 1
    assert daily[0].temperature == 3.0


def test_limit_is_respected() -> None:
    assert len(dedupe_forecast(_three_hourly(0, 8), today=TODAY, limit=3)) == 3


def test_dedupe_is_idempotent() -> None:
    once = dedupe_forecast(_three_hourly(1, 6), today=TODAY)
    twice = dedupe_forecast(once, today=TODAY)
    assert twice == once


def test_clear_sky_at_night_uses_night_icon() -> None:
    night, day = dedupe_forecast([_sample(0, 3, "Clear"), _sample(1, 12, "Clear")], today=TODAY)
    assert night.icon is WeatherIcon.CLEAR_NIGHT
    assert day.icon is WeatherIcon.CLEAR_DAY


@pytest.mark.parametrize(
    "condition, description, expected",
    [
        ("Thunderstorm", "thunderstorm with rain", WeatherIcon.THUNDERSTORM),
        ("Drizzle", "light intensity drizzle", WeatherIcon.DRIZZLE),
        ("Rain", "light intensity drizzle rain", WeatherIcon.DRIZZLE),
        ("Rain", "moderate rain", WeatherIcon.RAIN),
        ("Snow", "light shower sleet", WeatherIcon.SNOW),
        ("Smoke", "smoke", WeatherIcon.FOG),
        ("Haze", "haze", WeatherIcon.FOG),
        ("Clouds", "overcast clouds", WeatherIcon.CLOUDY),
        ("Clear", "clear sky", WeatherIcon.CLEAR_DAY),
        ("", "patchy fog", WeatherIcon.FOG),
        ("Tornado", "tornado", WeatherIcon.DEFAULT),
    ],
)
def test_weather_icon_mapping(condition: str, description: str, expected: WeatherIcon) -> None:
    assert weather_icon(condition, description) is expected


def test_condition_takes_precedence_over_description() -> None:
    assert weather_icon("Clouds", "light rain later") is WeatherIcon.CLOUDY


def test_forecast_by_day_keeps_first_entry() -> None:
    first, second = _sample(0, 9, temp=1.0), _sample(0, 12, temp=2.0)
    assert forecast_by_day([first, second]) == {"2024-05-10": first}


def test_naive_timestamps_are_treated_as_local() -> None:
    sample = ForecastSample(timestamp=datetime(2024, 5, 10, 7), temperature=9.0, condition="Clear")
    (daily,) = dedupe_forecast([sample], today=TODAY)
    assert daily.icon is WeatherIcon.CLEAR_DAY
