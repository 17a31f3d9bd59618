# ABOUTME: Orchestrates the three source clients and merges their results into a WeatherReport.
# ABOUTME: Holds the offset and hourly precedence rules, day bucketing, and display normalization.

import asyncio
import logging

from weatherview.deps import WeatherDeps
from weatherview.errors import ConfigurationError, WeatherUnavailableError
from weatherview.formatting import local_clock, local_date, local_day_name, local_hour, map_icon, title_case
from weatherview.models import (
    CurrentConditions,
    CurrentObservation,
    DailyForecastSummary,
    DetailedForecast,
    ForecastSample,
    HourlyForecastEntry,
    ShortRangeForecast,
    SourceFailure,
    SourceName,
    SourceSuccess,
    WeatherReport,
)
from weatherview.units import (
    format_pressure,
    format_visibility,
    pop_to_percent,
    round_to_int,
    round_to_one_decimal,
)
from weatherview.weather_service import fetch_current_conditions, fetch_hourly_detailed, fetch_short_range

logger = logging.getLogger(__name__)

HOURLY_LIMIT = 24
DAILY_LIMIT = 7

# Highest priority first.
OFFSET_PRECEDENCE = (SourceName.SHORT_RANGE, SourceName.HOURLY_DETAILED, SourceName.CURRENT_CONDITIONS)
HOURLY_PRECEDENCE = (SourceName.HOURLY_DETAILED, SourceName.SHORT_RANGE)


async def resolve_weather(deps: WeatherDeps, query: str, timeout: float | None = None) -> WeatherReport:
    """Resolve current, hourly, and daily weather for a place name.

    The current-conditions source is mandatory and supplies the coordinates; the two
    forecast sources are then called concurrently and either may fail without failing
    the resolution.

    Args:
        deps: Settings and HTTP client.
        query: Free-text place name, e.g. "Philadelphia".
        timeout: Optional budget in seconds for the whole resolution. Running out before
            current conditions arrive is fatal; running out later returns what has arrived.

    Raises:
        ValueError: The query is blank.
        ConfigurationError: No API key is configured.
        WeatherUnavailableError: Current conditions could not be loaded.
    """
    if not query or not query.strip():
        raise ValueError("Location query must not be empty")
    if not deps.settings.api_key:
        raise ConfigurationError("Missing API key")

    loop = asyncio.get_running_loop()
    deadline = None if timeout is None else loop.time() + timeout

    try:
        outcome = await asyncio.wait_for(fetch_current_conditions(deps, query), _remaining(loop, deadline))
    except asyncio.TimeoutError:
        logger.warning("Timed out waiting for current conditions for %r", query)
        raise WeatherUnavailableError() from None
    if isinstance(outcome, SourceFailure):
        raise WeatherUnavailableError()

    current = outcome.payload
    location = current.location
    if not location.has_coordinates:
        logger.info("No coordinates for %r, skipping forecast sources", query)
        return merge_report(current)

    detailed, short_range = await _fetch_forecasts(
        deps, location.latitude, location.longitude, _remaining(loop, deadline)
    )
    return merge_report(current, detailed, short_range)


async def _fetch_forecasts(
    deps: WeatherDeps, latitude: float, longitude: float, timeout: float | None
) -> tuple[DetailedForecast | None, ShortRangeForecast | None]:
    """Run both coordinate sources concurrently and return their payloads, None where unavailable."""
    tasks = {
        SourceName.HOURLY_DETAILED: asyncio.ensure_future(fetch_hourly_detailed(deps, latitude, longitude)),
        SourceName.SHORT_RANGE: asyncio.ensure_future(fetch_short_range(deps, latitude, longitude)),
    }
    try:
        done, _ = await asyncio.wait(tasks.values(), timeout=timeout)
    finally:
        # Runs on caller cancellation too: no source request may outlive the resolution.
        unfinished = [task for task in tasks.values() if not task.done()]
        for task in unfinished:
            task.cancel()
        if unfinished:
            await asyncio.gather(*unfinished, return_exceptions=True)

    payloads = {}
    for source, task in tasks.items():
        if task in done:
            outcome = task.result()
        else:
            logger.warning("%s request timed out", source.value)
            outcome = SourceFailure(source=source, reason="timeout")
        payloads[source] = outcome.payload if isinstance(outcome, SourceSuccess) else None
    return payloads[SourceName.HOURLY_DETAILED], payloads[SourceName.SHORT_RANGE]


def _remaining(loop: asyncio.AbstractEventLoop, deadline: float | None) -> float | None:
    if deadline is None:
        return None
    return max(0.0, deadline - loop.time())


def merge_report(
    current: CurrentObservation,
    detailed: DetailedForecast | None = None,
    short_range: ShortRangeForecast | None = None,
) -> WeatherReport:
    """Merge the mandatory observation with whichever forecasts arrived into one report.

    Every timestamp-derived string is rendered with the single offset chosen by
    OFFSET_PRECEDENCE, so a report never mixes offsets.
    """
    offset = resolve_offset(
        {
            SourceName.CURRENT_CONDITIONS: current.utc_offset,
            SourceName.HOURLY_DETAILED: detailed.utc_offset if detailed else None,
            SourceName.SHORT_RANGE: short_range.utc_offset if short_range else None,
        }
    )

    hourly_candidates = {
        SourceName.HOURLY_DETAILED: detailed.hours if detailed else [],
        SourceName.SHORT_RANGE: short_range.samples if short_range else [],
    }
    hourly: list[HourlyForecastEntry] = []
    for source in HOURLY_PRECEDENCE:
        samples = hourly_candidates[source]
        if samples:
            hourly = build_hourly(samples, offset, coarse=source == SourceName.SHORT_RANGE)
            break

    return WeatherReport(
        location=current.location,
        utc_offset=offset,
        current=build_current(current, offset, current_uv_index(detailed)),
        hourly=hourly,
        daily=bucket_days(short_range.samples, offset) if short_range else [],
    )


def resolve_offset(candidates: dict[SourceName, int | None]) -> int:
    """Pick the offset of the highest-precedence source that reported one, else 0."""
    for source in OFFSET_PRECEDENCE:
        value = candidates.get(source)
        if value is not None:
            return value
    return 0


def current_uv_index(detailed: DetailedForecast | None) -> float | None:
    """UV right now from the detailed source, falling back to its first hour."""
    if detailed is None:
        return None
    if detailed.current_uvi is not None:
        return round_to_one_decimal(detailed.current_uvi)
    if detailed.hours:
        return round_to_one_decimal(detailed.hours[0].uvi)
    return None


def build_current(observation: CurrentObservation, offset: int, uv_index: float | None) -> CurrentConditions:
    return CurrentConditions(
        location=observation.location.display_name,
        icon=map_icon(observation.icon_code),
        description=title_case(observation.description),
        temperature=round_to_int(observation.temperature),
        high=round_to_int(observation.temp_max),
        low=round_to_int(observation.temp_min),
        humidity=round_to_int(observation.humidity),
        wind=round_to_int(observation.wind_speed),
        feels_like=round_to_int(observation.feels_like),
        uv_index=uv_index,
        visibility=format_visibility(observation.visibility),
        pressure=format_pressure(observation.pressure),
        sunrise=local_clock(observation.sunrise, offset),
        sunset=local_clock(observation.sunset, offset),
    )


def build_hourly(samples: list[ForecastSample], offset: int, coarse: bool = False) -> list[HourlyForecastEntry]:
    """Build up to 24 hourly entries.

    Coarse (short-range) samples carry no UV reading and report a missing
    precipitation probability as 0 rather than None.
    """
    entries = []
    for index, sample in enumerate(samples[:HOURLY_LIMIT]):
        pop = sample.pop
        if coarse and pop is None:
            pop = 0
        entries.append(
            HourlyForecastEntry(
                index=index,
                time=local_hour(sample.dt, offset),
                icon=map_icon(sample.icon_code),
                temperature=round_to_int(sample.temperature),
                description=title_case(sample.description),
                feels_like=round_to_int(sample.feels_like),
                humidity=round_to_int(sample.humidity),
                wind=round_to_int(sample.wind_speed),
                precipitation=pop_to_percent(pop),
                uv_index=None if coarse else round_to_one_decimal(sample.uvi),
                visibility=format_visibility(sample.visibility),
            )
        )
    return entries


def bucket_days(samples: list[ForecastSample], offset: int) -> list[DailyForecastSummary]:
    """Group samples by local calendar day and aggregate each day's high and low.

    The first sample of a day sets its icon and description; later samples only
    raise the high and lower the low. Missing values are skipped, never treated as 0.
    """
    buckets: dict = {}
    for sample in samples:
        key = local_date(sample.dt, offset)
        bucket = buckets.get(key)
        if bucket is None:
            buckets[key] = {
                "first": sample,
                "high": sample.temp_max,
                "low": sample.temp_min,
            }
            continue
        bucket["high"] = _widen(bucket["high"], sample.temp_max, max)
        bucket["low"] = _widen(bucket["low"], sample.temp_min, min)

    days = []
    for index, key in enumerate(sorted(buckets)[:DAILY_LIMIT]):
        bucket = buckets[key]
        first = bucket["first"]
        days.append(
            DailyForecastSummary(
                index=index,
                day=local_day_name(first.dt, offset, index),
                icon=map_icon(first.icon_code),
                description=title_case(first.description),
                high=round_to_int(bucket["high"]),
                low=round_to_int(bucket["low"]),
            )
        )
    return days


def _widen(current: float | None, value: float | None, pick) -> float | None:
    if current is None:
        return value
    if value is None:
        return current
    return pick(current, value)
