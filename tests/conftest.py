# ABOUTME: Shared test fixtures for the weather pipeline test suite.
# ABOUTME: Provides realistic source payloads and a mock HTTP client routed by endpoint path.

from unittest.mock import AsyncMock

import httpx
import pytest

from weatherview.deps import WeatherDeps, WeatherSettings

BASE_URL = "https://weather.test/data/2.5"

# 2025-01-15 00:00 UTC, a Wednesday.
BASE_TS = 1736899200
EST = -18000


def _make_response(json_data, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code=status_code, json=json_data, request=httpx.Request("GET", BASE_URL))


def _routed_client(routes: dict) -> AsyncMock:
    """Create a mock httpx.AsyncClient whose get() answers by the last URL path segment.

    A route value may be a JSON payload, an int status code, an exception to raise, or an
    async callable producing one of those.
    """
    mock = AsyncMock(spec=httpx.AsyncClient)

    async def get(url, params=None, **kwargs):
        result = routes[url.rsplit("/", 1)[-1]]
        if callable(result):
            result = await result()
        if isinstance(result, Exception):
            raise result
        if isinstance(result, int):
            return _make_response({"cod": result, "message": "error"}, status_code=result)
        return _make_response(result)

    mock.get.side_effect = get
    return mock


def _make_deps(routes: dict, api_key: str = "test-key") -> WeatherDeps:
    return WeatherDeps(
        settings=WeatherSettings(api_key=api_key, base_url=BASE_URL),
        http_client=_routed_client(routes),
    )


@pytest.fixture
def make_deps():
    """Factory building WeatherDeps around a mock client routed by endpoint path."""
    return _make_deps


@pytest.fixture
def current_payload() -> dict:
    return {
        "coord": {"lat": 39.9526, "lon": -75.1652},
        "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}],
        "main": {
            "temp": 41.6,
            "feels_like": 35.2,
            "temp_min": 38.4,
            "temp_max": 44.5,
            "pressure": 1013.25,
            "humidity": 65,
        },
        "visibility": 10000,
        "wind": {"speed": 8.05, "deg": 250},
        "dt": BASE_TS + 15 * 3600,
        "sys": {"country": "US", "sunrise": BASE_TS + 44400, "sunset": BASE_TS + 79500},
        "timezone": EST,
        "name": "Philadelphia",
        "cod": 200,
    }


@pytest.fixture
def onecall_payload() -> dict:
    start = BASE_TS + 17 * 3600
    return {
        "lat": 39.9526,
        "lon": -75.1652,
        "timezone": "America/New_York",
        "timezone_offset": EST,
        "current": {"dt": start, "temp": 41.6, "uvi": 2.35},
        "hourly": [
            {
                "dt": start + i * 3600,
                "temp": 40 + i * 0.5,
                "feels_like": 35 + i * 0.5,
                "humidity": 60,
                "wind_speed": 5.5,
                "pop": 0.2,
                "uvi": 1.0,
                "visibility": 10000,
                "weather": [{"id": 804, "description": "overcast clouds", "icon": "04d"}],
            }
            for i in range(30)
        ],
    }


@pytest.fixture
def forecast_payload() -> dict:
    # 40 three-hour samples starting at local midnight: five full local days.
    start = BASE_TS + 5 * 3600
    samples = []
    for i in range(40):
        step = i % 8
        sample = {
            "dt": start + i * 3 * 3600,
            "main": {
                "temp": 35 + step,
                "feels_like": 30 + step,
                "temp_min": 30 + step,
                "temp_max": 40 + step,
                "humidity": 70,
            },
            "wind": {"speed": 10.4},
            "visibility": 10000,
            "weather": [
                {"description": "light rain", "icon": "10d"}
                if step == 0
                else {"description": "clear sky", "icon": "01d"}
            ],
        }
        if i % 2 == 0:
            sample["pop"] = 0.45
        samples.append(sample)
    return {"cod": "200", "cnt": 40, "list": samples, "city": {"name": "Philadelphia", "timezone": EST}}
