# ABOUTME: Source clients for the current-conditions, hourly-detailed, and short-range forecast APIs.
# ABOUTME: Each client makes one request and returns a typed success or failure; raw JSON never leaves here.

import logging
import math

import httpx

from weatherview.deps import WeatherDeps
from weatherview.models import (
    CurrentObservation,
    DetailedForecast,
    ForecastSample,
    ResolvedLocation,
    ShortRangeForecast,
    SourceFailure,
    SourceName,
    SourceSuccess,
)

logger = logging.getLogger(__name__)

CURRENT_PATH = "weather"
ONECALL_PATH = "onecall"
FORECAST_PATH = "forecast"

UNITS = "imperial"
ONECALL_EXCLUDE = "minutely,daily,alerts"

UNKNOWN_LOCATION = "Unknown"


async def fetch_current_conditions(
    deps: WeatherDeps, query: str
) -> SourceSuccess[CurrentObservation] | SourceFailure:
    """Look up current conditions, coordinates, and base UTC offset for a place name."""
    source = SourceName.CURRENT_CONDITIONS
    try:
        raw = await _get_json(deps, CURRENT_PATH, {"q": query})
        return SourceSuccess[CurrentObservation](source=source, payload=parse_current_conditions(raw))
    except (httpx.HTTPError, ValueError) as e:
        return _failure(source, e)


async def fetch_hourly_detailed(
    deps: WeatherDeps, latitude: float, longitude: float
) -> SourceSuccess[DetailedForecast] | SourceFailure:
    """Fetch the hour-by-hour forecast with UV, humidity, and precipitation detail."""
    source = SourceName.HOURLY_DETAILED
    try:
        raw = await _get_json(
            deps, ONECALL_PATH, {"lat": latitude, "lon": longitude, "exclude": ONECALL_EXCLUDE}
        )
        return SourceSuccess[DetailedForecast](source=source, payload=parse_hourly_detailed(raw))
    except (httpx.HTTPError, ValueError) as e:
        return _failure(source, e)


async def fetch_short_range(
    deps: WeatherDeps, latitude: float, longitude: float
) -> SourceSuccess[ShortRangeForecast] | SourceFailure:
    """Fetch the three-hour-step forecast used for daily highs/lows and as the hourly fallback."""
    source = SourceName.SHORT_RANGE
    try:
        raw = await _get_json(deps, FORECAST_PATH, {"lat": latitude, "lon": longitude})
        return SourceSuccess[ShortRangeForecast](source=source, payload=parse_short_range(raw))
    except (httpx.HTTPError, ValueError) as e:
        return _failure(source, e)


async def _get_json(deps: WeatherDeps, path: str, params: dict) -> dict:
    resp = await deps.http_client.get(
        f"{deps.settings.base_url}/{path}",
        params={**params, "units": UNITS, "appid": deps.settings.api_key},
    )
    resp.raise_for_status()
    data = resp.json()
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object from /{path}, got {type(data).__name__}")
    return data


def _failure(source: SourceName, error: Exception) -> SourceFailure:
    # Never log the exception's request URL: it carries the API key.
    reason = type(error).__name__
    if isinstance(error, httpx.HTTPStatusError):
        reason = f"HTTP {error.response.status_code}"
    logger.warning("%s request failed: %s", source.value, reason)
    return SourceFailure(source=source, reason=reason)


def parse_current_conditions(raw: dict) -> CurrentObservation:
    """Parse a current-conditions document, leaving any missing field as None."""
    name = _get(raw, "name")
    country = _get(raw, "sys", "country")
    if name and country:
        display_name = f"{name}, {country}"
    else:
        display_name = name or UNKNOWN_LOCATION

    return CurrentObservation(
        location=ResolvedLocation(
            display_name=display_name,
            latitude=_get(raw, "coord", "lat"),
            longitude=_get(raw, "coord", "lon"),
        ),
        utc_offset=_get(raw, "timezone"),
        icon_code=_get(raw, "weather", 0, "icon"),
        description=_get(raw, "weather", 0, "description"),
        temperature=_get(raw, "main", "temp"),
        feels_like=_get(raw, "main", "feels_like"),
        temp_min=_get(raw, "main", "temp_min"),
        temp_max=_get(raw, "main", "temp_max"),
        humidity=_get(raw, "main", "humidity"),
        wind_speed=_get(raw, "wind", "speed"),
        visibility=_get(raw, "visibility"),
        pressure=_get(raw, "main", "pressure"),
        sunrise=_get(raw, "sys", "sunrise"),
        sunset=_get(raw, "sys", "sunset"),
    )


def parse_hourly_detailed(raw: dict) -> DetailedForecast:
    """Parse the hourly-detailed document into its offset, current UV, and ordered hours."""
    return DetailedForecast(
        utc_offset=_get(raw, "timezone_offset"),
        current_uvi=_get(raw, "current", "uvi"),
        hours=_ordered_samples(_get(raw, "hourly"), _detailed_sample),
    )


def parse_short_range(raw: dict) -> ShortRangeForecast:
    """Parse the short-range list document into its offset and ordered samples."""
    return ShortRangeForecast(
        utc_offset=_get(raw, "city", "timezone"),
        samples=_ordered_samples(_get(raw, "list"), _short_range_sample),
    )


def _detailed_sample(entry: dict) -> ForecastSample:
    return ForecastSample(
        dt=entry["dt"],
        icon_code=_get(entry, "weather", 0, "icon"),
        description=_get(entry, "weather", 0, "description"),
        temperature=_get(entry, "temp"),
        feels_like=_get(entry, "feels_like"),
        humidity=_get(entry, "humidity"),
        wind_speed=_get(entry, "wind_speed"),
        pop=_get(entry, "pop"),
        uvi=_get(entry, "uvi"),
        visibility=_get(entry, "visibility"),
    )


def _short_range_sample(entry: dict) -> ForecastSample:
    return ForecastSample(
        dt=entry["dt"],
        icon_code=_get(entry, "weather", 0, "icon"),
        description=_get(entry, "weather", 0, "description"),
        temperature=_get(entry, "main", "temp"),
        feels_like=_get(entry, "main", "feels_like"),
        temp_min=_get(entry, "main", "temp_min"),
        temp_max=_get(entry, "main", "temp_max"),
        humidity=_get(entry, "main", "humidity"),
        wind_speed=_get(entry, "wind", "speed"),
        pop=_get(entry, "pop"),
        visibility=_get(entry, "visibility"),
    )


def _ordered_samples(entries, build) -> list[ForecastSample]:
    """Build samples sorted by timestamp, dropping entries without one and repeated timestamps."""
    if not isinstance(entries, list):
        return []

    by_time: dict[int, ForecastSample] = {}
    for entry in entries:
        if _get(entry, "dt") is None:
            continue
        sample = build(entry)
        by_time.setdefault(sample.dt, sample)
    return [by_time[dt] for dt in sorted(by_time)]


def _get(data, *path):
    """Safely walk nested dicts and lists, returning None at the first missing step.

    NaN and infinite numbers (which JSON decoding accepts) are treated as missing too.
    """
    for key in path:
        if isinstance(data, dict):
            data = data.get(key)
        elif isinstance(data, list) and isinstance(key, int) and key < len(data):
            data = data[key]
        else:
            return None
    if isinstance(data, float) and not math.isfinite(data):
        return None
    return data
