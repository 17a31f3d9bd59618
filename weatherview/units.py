# ABOUTME: Unit conversion and rounding helpers for normalized weather values.
# ABOUTME: None, NaN, and infinite inputs all come out as None so missing upstream data stays missing.

import math
from decimal import ROUND_HALF_UP, Decimal

PLACEHOLDER = "--"

METERS_PER_MILE = 1609.34
INHG_PER_HPA = 0.02953


def _missing(value: float | None) -> bool:
    return value is None or not math.isfinite(value)


def _round(value: float, places: int) -> float:
    """Round half away from zero (Python's round() would round half to even)."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_to_int(value: float | None) -> int | None:
    if _missing(value):
        return None
    return int(_round(value, 0))


def round_to_one_decimal(value: float | None) -> float | None:
    if _missing(value):
        return None
    return _round(value, 1)


def meters_to_miles(meters: float | None) -> float | None:
    """Convert a visibility distance in meters to miles, one decimal place."""
    if _missing(meters):
        return None
    return _round(meters / METERS_PER_MILE, 1)


def hpa_to_inhg(pressure: float | None) -> float | None:
    """Convert a pressure in hectopascals to inches of mercury, one decimal place."""
    if _missing(pressure):
        return None
    return _round(pressure * INHG_PER_HPA, 1)


def pop_to_percent(pop: float | None) -> int | None:
    """Convert a provider's precipitation probability fraction (0-1) to a whole percent."""
    if _missing(pop):
        return None
    return int(_round(pop * 100, 0))


def format_number(value: float) -> str:
    """Render 1.0 as "1" and 29.9 as "29.9"."""
    if value == int(value):
        return str(int(value))
    return str(value)


def format_visibility(meters: float | None) -> str:
    miles = meters_to_miles(meters)
    if miles is None:
        return PLACEHOLDER
    return f"{format_number(miles)} mi"


def format_pressure(pressure: float | None) -> str:
    inches = hpa_to_inhg(pressure)
    if inches is None:
        return PLACEHOLDER
    return f"{format_number(inches)} in"
