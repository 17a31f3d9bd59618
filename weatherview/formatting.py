# ABOUTME: Pure display helpers: icon code lookup, title casing, and offset-based local times.
# ABOUTME: Local times bake the UTC offset into the instant instead of using a timezone database.

from datetime import date, datetime, timedelta, timezone

from weatherview.models import IconSymbol
from weatherview.units import PLACEHOLDER

DEFAULT_ICON = IconSymbol.PARTLY_CLOUDY

ICON_CODES: dict[str, IconSymbol] = {
    "01d": IconSymbol.SUNNY,
    "01n": IconSymbol.CLEAR_NIGHT,
    "02d": IconSymbol.PARTLY_SUNNY,
    "02n": IconSymbol.CLOUDY,
    "03d": IconSymbol.PARTLY_CLOUDY,
    "03n": IconSymbol.CLOUDY,
    "04d": IconSymbol.CLOUDY,
    "04n": IconSymbol.CLOUDY,
    "09d": IconSymbol.RAIN,
    "09n": IconSymbol.RAIN,
    "10d": IconSymbol.SUN_SHOWERS,
    "10n": IconSymbol.RAIN,
    "11d": IconSymbol.THUNDERSTORM,
    "11n": IconSymbol.THUNDERSTORM,
    "13d": IconSymbol.SNOW,
    "13n": IconSymbol.SNOW,
    "50d": IconSymbol.FOG,
    "50n": IconSymbol.FOG,
}

# Fixed English names so output does not depend on the process locale.
WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

TODAY = "Today"


def map_icon(code: str | None) -> IconSymbol:
    """Map a provider condition code like "10d" to an icon; unknown codes get the default."""
    if code is None:
        return DEFAULT_ICON
    return ICON_CODES.get(code, DEFAULT_ICON)


def title_case(text: str | None) -> str:
    """Capitalize the first letter of every space-separated word, keeping the spacing as-is."""
    if not text:
        return ""
    return " ".join(part[:1].upper() + part[1:] for part in text.split(" "))


def _local_datetime(timestamp: int | float, offset: int) -> datetime:
    return datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=timestamp + offset)


def local_clock(timestamp: int | float | None, offset: int, with_minutes: bool = True) -> str:
    """Format a timestamp as the location's 12-hour wall clock time, e.g. "3:45 PM" or "3 PM"."""
    if timestamp is None:
        return PLACEHOLDER
    moment = _local_datetime(timestamp, offset)
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    if with_minutes:
        return f"{hour}:{moment.minute:02d} {meridiem}"
    return f"{hour} {meridiem}"


def local_hour(timestamp: int | float | None, offset: int) -> str:
    return local_clock(timestamp, offset, with_minutes=False)


def local_date(timestamp: int | float, offset: int) -> date:
    """Calendar date at the location, used as the day-bucket key."""
    return _local_datetime(timestamp, offset).date()


def local_day_name(timestamp: int | float | None, offset: int, index: int) -> str:
    """Weekday name at the location; the first entry of a forecast is always "Today"."""
    if index == 0:
        return TODAY
    if timestamp is None:
        return PLACEHOLDER
    return WEEKDAYS[local_date(timestamp, offset).weekday()]
