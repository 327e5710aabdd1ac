"""Board assembly across schedules, events and forecasts."""

from datetime import date, timedelta

from logic.board import assemble_board
from logic.date_keys import local_midnight
from logic.forecast import dedupe_forecast
from logic.schedule_join import hydrate_schedules
from models.clothing_item import ClothingItem
from models.outfit import Outfit, OutfitSchedule
from tools.calendar_provider import CalendarEvent
from tools.weather_provider import ForecastSample

TODAY = date(2024, 12, 29)


def _schedules():
    catalog = [
        ClothingItem(
            item_id="coat",
            user_id="u1",
            image_url="https://img.example/coat.jpg",
            category="Jacket",
            color="Navy",
            occasion="Casual",
        )
    ]
    outfits = [
        Outfit(outfit_id="o1", user_id="u1", name="New Year", item_ids=["coat"]),
        Outfit(outfit_id="o2", user_id="u1", name="Later pick", item_ids=[]),
    ]
    return hydrate_schedules(
        [
            OutfitSchedule(schedule_id="s1", user_id="u1", outfit_id="o1", date="2024-12-31"),
            OutfitSchedule(schedule_id="s2", user_id="u1", outfit_id="o2", date="2024-12-31"),
            OutfitSchedule(schedule_id="s3", user_id="u1", outfit_id="o1", date="2025-02-01"),
        ],
        outfits,
        catalog,
    )


def test_columns_cover_five_consecutive_days_across_year_end() -> None:
    columns = assemble_board([], {}, [], today=TODAY)

    assert [column.date_key for column in columns] == [
        "2024-12-29",
        "2024-12-30",
        "2024-12-31",
        "2025-01-01",
        "2025-01-02",
    ]
    assert all(column.schedule is None and column.events == [] and column.forecast is None for column in columns)


def test_columns_join_schedule_events_and_weather() -> None:
    samples = [
        ForecastSample(
            timestamp=local_midnight(TODAY + timedelta(days=offset)) + timedelta(hours=12),
            temperature=-4.0 + offset,
            condition="Snow",
        )
        for offset in range(1, 5)
    ]
    forecast = dedupe_forecast(samples, today=TODAY)
    events = {"2025-01-01": [CalendarEvent(event_id="e1", title="Brunch", start_date="2025-01-01")]}

    columns = assemble_board(_schedules(), events, forecast, today=TODAY)
    by_key = {column.date_key: column for column in columns}

    assert by_key["2024-12-31"].outfit.name == "New Year"
    assert [item.item_id for item in by_key["2024-12-31"].outfit.items] == ["coat"]
    assert by_key["2024-12-30"].outfit is None
    assert by_key["2025-01-01"].events[0].title == "Brunch"
    assert by_key["2024-12-29"].forecast.placeholder
    assert by_key["2024-12-30"].forecast.temperature == -3.0


def test_column_serialization_shape() -> None:
    column = assemble_board(_schedules(), {}, [], today=TODAY)[2]

    payload = column.to_dict()

    assert payload["date"] == "2024-12-31"
    assert payload["schedule"]["outfit"]["name"] == "New Year"
    assert payload["events"] == []
    assert payload["forecast"] is None


def test_custom_board_length() -> None:
    assert len(assemble_board([], {}, [], today=TODAY, days=7)) == 7
