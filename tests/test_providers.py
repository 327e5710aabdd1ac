"""HTTP providers with the network patched out."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

import pytest
import requests
from google.oauth2.credentials import Credentials

from tools.calendar_provider import CalendarUnavailableError, GoogleCalendarProvider
from tools.weather_provider import OpenWeatherProvider, WeatherUnavailableError


class _FakeResponse:
    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


def _recording_get(monkeypatch: pytest.MonkeyPatch, module: str, response: Any) -> List[Dict[str, Any]]:
    calls: List[Dict[str, Any]] = []

    def fake_get(url: str, **kwargs: Any):
        calls.append({"url": url, **kwargs})
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(f"{module}.requests.get", fake_get)
    return calls


FORECAST_PAYLOAD = {
    "list": [
        {"dt": 1715320800, "main": {"temp": 11.6}, "weather": [{"main": "Clouds", "description": "few clouds"}]},
        {"dt": 1715331600, "main": {"temp": 13.2}, "weather": [{"main": "Rain", "description": "light rain"}]},
        {"dt": 1715342400, "main": {"temp": 9.0}, "weather": []},
    ]
}


def test_forecast_request_and_parsing(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = _recording_get(monkeypatch, "tools.weather_provider", _FakeResponse(FORECAST_PAYLOAD))
    provider = OpenWeatherProvider(api_key="secret", city="Calgary", timeout_seconds=2.5)

    samples = provider.get_forecast_samples()

    assert calls[0]["url"].endswith("/forecast")
    assert calls[0]["params"] == {"q": "Calgary", "appid": "secret", "units": "metric"}
    assert calls[0]["timeout"] == 2.5
    assert [sample.condition for sample in samples] == ["Clouds", "Rain", "Unknown"]
    assert samples[0].timestamp == datetime(2024, 5, 10, 6, tzinfo=timezone.utc)
    assert samples[1].description == "light rain"


def test_current_conditions_detects_night(monkeypatch: pytest.MonkeyPatch) -> None:
    payload = {
        "dt": 1715390000,
        "main": {"temp": 4.4},
        "weather": [{"main": "Clear", "description": "clear sky"}],
        "sys": {"sunrise": 1715340000, "sunset": 1715385000},
    }
    calls = _recording_get(monkeypatch, "tools.weather_provider", _FakeResponse(payload))

    current = OpenWeatherProvider(api_key="secret").get_current("Banff")

    assert calls[0]["params"]["q"] == "Banff"
    assert calls[0]["url"].endswith("/weather")
    assert current.is_night
    assert current.temperature == 4.4


def test_missing_api_key_fails_without_network(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = _recording_get(monkeypatch, "tools.weather_provider", _FakeResponse({}))

    with pytest.raises(WeatherUnavailableError, match="not configured"):
        OpenWeatherProvider(api_key=None).get_forecast_samples()
    assert calls == []


@pytest.mark.parametrize(
    "response",
    [
        requests.Timeout("slow"),
        requests.ConnectionError("down"),
        _FakeResponse({}, status_code=401),
        _FakeResponse(ValueError("not json")),
        _FakeResponse({"list": [{"dt": "soon"}]}),
    ],
)
def test_weather_failures_surface_as_unavailable(monkeypatch: pytest.MonkeyPatch, response: Any) -> None:
    _recording_get(monkeypatch, "tools.weather_provider", response)

    with pytest.raises(WeatherUnavailableError):
        OpenWeatherProvider(api_key="secret").get_forecast_samples()


def _credentials(minutes: int = 60) -> Credentials:
    expiry = (datetime.now(timezone.utc) + timedelta(minutes=minutes)).replace(tzinfo=None)
    return Credentials(token="access-token", expiry=expiry)


def test_calendar_request_shape_and_event_mapping(monkeypatch: pytest.MonkeyPatch) -> None:
    payload = {
        "items": [
            {"id": "e1", "summary": "Standup", "start": {"dateTime": "2024-05-10T09:00:00-06:00", "timeZone": "America/Edmonton"}},
            {"id": "e2", "start": {"date": "2024-05-11"}},
            {"summary": "No id", "start": {"date": "2024-05-12"}},
            "not-an-object",
        ]
    }
    calls = _recording_get(monkeypatch, "tools.calendar_provider", _FakeResponse(payload))
    time_min = datetime(2024, 5, 10, 6, tzinfo=timezone.utc)

    events = GoogleCalendarProvider(calendar_id="work").get_events(
        _credentials(), time_min, time_min + timedelta(days=30)
    )

    call = calls[0]
    assert call["url"].endswith("/calendars/work/events")
    assert call["headers"]["authorization"] == "Bearer access-token"
    assert call["params"]["timeMin"] == "2024-05-10T06:00:00Z"
    assert call["params"]["singleEvents"] == "true"
    assert call["params"]["orderBy"] == "startTime"
    assert [event.event_id for event in events] == ["e1", "e2"]
    assert events[0].time_zone == "America/Edmonton"
    assert events[1].title == "Untitled event"
    assert events[1].is_all_day


def test_calendar_requires_live_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = _recording_get(monkeypatch, "tools.calendar_provider", _FakeResponse({"items": []}))
    provider = GoogleCalendarProvider()
    now = datetime.now(timezone.utc)

    with pytest.raises(CalendarUnavailableError):
        provider.get_events(None, now, now)
    with pytest.raises(CalendarUnavailableError, match="expired"):
        provider.get_events(_credentials(minutes=-10), now, now)
    assert calls == []


def test_calendar_http_error_is_unavailable(monkeypatch: pytest.MonkeyPatch) -> None:
    _recording_get(monkeypatch, "tools.calendar_provider", _FakeResponse({}, status_code=500))
    now = datetime.now(timezone.utc)

    with pytest.raises(CalendarUnavailableError):
        GoogleCalendarProvider().get_events(_credentials(), now, now + timedelta(days=1))


@pytest.mark.parametrize("body", [["not", "an", "object"], "text", None])
def test_calendar_non_object_body_is_unavailable(monkeypatch: pytest.MonkeyPatch, body: Any) -> None:
    _recording_get(monkeypatch, "tools.calendar_provider", _FakeResponse(body))
    now = datetime.now(timezone.utc)

    with pytest.raises(CalendarUnavailableError, match="Unexpected calendar data"):
        GoogleCalendarProvider().get_events(_credentials(), now, now + timedelta(days=1))
