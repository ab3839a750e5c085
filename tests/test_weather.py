import pytest
import requests

from sitetrack.core.config import settings
from sitetrack.utils import weather
from sitetrack.utils.weather import build_insights, fetch_weather_forecast, map_wmo_to_condition

FORECAST = {
    "current": {"temperature_2m": 22.6, "is_day": 1, "weather_code": 61, "wind_speed_10m": 11.2},
    "daily": {
        "time": ["2025-03-10", "2025-03-11"],
        "weather_code": [61, 95],
        "temperature_2m_max": [26.1, 24.0],
        "temperature_2m_min": [15.2, 14.8],
        "precipitation_probability_max": [65, 80],
    },
}


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


@pytest.mark.parametrize("code,condition", [
    (0, "sunny"), (1, "sunny"), (2, "cloudy"), (45, "cloudy"),
    (63, "rainy"), (81, "rainy"), (95, "storm"), (99, "storm"), (71, "cloudy"),
])
def test_map_wmo_to_condition(code, condition):
    assert map_wmo_to_condition(code) == condition


def test_build_insights_thresholds():
    assert build_insights([70, 10])[0].startswith("🔴")
    assert build_insights([40, 10])[0].startswith("🟡")
    assert build_insights([30, 10]) == ["🟢 Dia favorável para atividades externas e concretagem."]
    assert len(build_insights([10, 71])) == 2
    assert build_insights([None]) == ["🟢 Dia favorável para atividades externas e concretagem."]


def test_fetch_weather_forecast(monkeypatch):
    captured = {}

    def fake_get(url, params=None, timeout=None):
        captured.update(url=url, params=params, timeout=timeout)
        return FakeResponse(FORECAST)

    monkeypatch.setattr(weather.requests, "get", fake_get)

    data = fetch_weather_forecast(-27.0, -52.0)

    assert captured["url"] == settings.weather_api_url
    assert (captured["params"]["latitude"], captured["params"]["longitude"]) == (-27.0, -52.0)
    assert data["current"] == {"temperature": 23, "condition": "rainy", "is_day": True, "wind_speed": 11.2}
    assert data["daily"]["rain_prob"] == [65, 80]
    assert len(data["insights"]) == 2


def test_missing_coordinates_use_default_site(monkeypatch):
    captured = {}

    def fake_get(url, params=None, timeout=None):
        captured.update(params)
        return FakeResponse(FORECAST)

    monkeypatch.setattr(weather.requests, "get", fake_get)

    fetch_weather_forecast(None, -52.0)

    assert (captured["latitude"], captured["longitude"]) == (settings.default_latitude, settings.default_longitude)


def test_fetch_failures_return_none(monkeypatch):
    def down(url, params=None, timeout=None):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(weather.requests, "get", down)
    assert fetch_weather_forecast(1.0, 2.0) is None

    monkeypatch.setattr(weather.requests, "get", lambda url, params=None, timeout=None: FakeResponse({}, 503))
    assert fetch_weather_forecast(1.0, 2.0) is None

    monkeypatch.setattr(weather.requests, "get", lambda url, params=None, timeout=None: FakeResponse({"current": {}}))
    assert fetch_weather_forecast(1.0, 2.0) is None


def test_weather_endpoint(client, owner_headers, monkeypatch):
    monkeypatch.setattr(weather.requests, "get", lambda url, params=None, timeout=None: FakeResponse(FORECAST))

    resp = client.get("/weather", params={"lat": -27.0, "lng": -52.0}, headers=owner_headers)
    assert resp.status_code == 200
    assert resp.json()["current"]["condition"] == "rainy"

    assert client.get("/weather").status_code == 401
