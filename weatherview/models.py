# ABOUTME: Pydantic BaseModels for parsed source data and the canonical weather report.
# ABOUTME: Defines source outcomes, forecast samples, and the current/hourly/daily output shapes.

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

PayloadT = TypeVar("PayloadT")


class IconSymbol(str, Enum):
    """The small, fixed icon vocabulary used in every canonical structure."""

    SUNNY = "☀️"
    CLEAR_NIGHT = "🌙"
    PARTLY_SUNNY = "🌤️"
    PARTLY_CLOUDY = "⛅"
    CLOUDY = "☁️"
    RAIN = "🌧️"
    SUN_SHOWERS = "🌦️"
    THUNDERSTORM = "⛈️"
    SNOW = "❄️"
    FOG = "🌫️"


class SourceName(str, Enum):
    CURRENT_CONDITIONS = "current_conditions"
    HOURLY_DETAILED = "hourly_detailed"
    SHORT_RANGE = "short_range"


class ResolvedLocation(BaseModel):
    """Display label and, when the provider knew them, the coordinates of a query."""

    model_config = ConfigDict(frozen=True)

    display_name: str
    latitude: float | None = None
    longitude: float | None = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class CurrentObservation(BaseModel):
    """Current-conditions response with every field the provider may omit left optional."""

    model_config = ConfigDict(frozen=True)

    location: ResolvedLocation
    utc_offset: int | None = None
    icon_code: str | None = None
    description: str | None = None
    temperature: float | None = None
    feels_like: float | None = None
    temp_min: float | None = None
    temp_max: float | None = None
    humidity: float | None = None
    wind_speed: float | None = None
    visibility: float | None = None
    pressure: float | None = None
    sunrise: int | None = None
    sunset: int | None = None


class ForecastSample(BaseModel):
    """One timestamped sample from either forecast source."""

    model_config = ConfigDict(frozen=True)

    dt: int
    icon_code: str | None = None
    description: str | None = None
    temperature: float | None = None
    feels_like: float | None = None
    temp_min: float | None = None
    temp_max: float | None = None
    humidity: float | None = None
    wind_speed: float | None = None
    pop: float | None = None
    uvi: float | None = None
    visibility: float | None = None


class DetailedForecast(BaseModel):
    """Hour-by-hour forecast with UV and precipitation detail."""

    model_config = ConfigDict(frozen=True)

    utc_offset: int | None = None
    current_uvi: float | None = None
    hours: list[ForecastSample] = []


class ShortRangeForecast(BaseModel):
    """Coarse three-hour-step forecast covering several days."""

    model_config = ConfigDict(frozen=True)

    utc_offset: int | None = None
    samples: list[ForecastSample] = []


class SourceSuccess(BaseModel, Generic[PayloadT]):
    model_config = ConfigDict(frozen=True)

    source: SourceName
    payload: PayloadT


class SourceFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: SourceName
    reason: str


class CurrentConditions(BaseModel):
    """Normalized conditions at the queried location right now."""

    model_config = ConfigDict(frozen=True)

    location: str
    icon: IconSymbol
    description: str
    temperature: int | None = None
    high: int | None = None
    low: int | None = None
    humidity: int | None = None
    wind: int | None = None
    feels_like: int | None = None
    uv_index: float | None = None
    visibility: str = "--"
    pressure: str = "--"
    sunrise: str = "--"
    sunset: str = "--"


class HourlyForecastEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    time: str
    icon: IconSymbol
    temperature: int | None = None
    description: str
    feels_like: int | None = None
    humidity: int | None = None
    wind: int | None = None
    precipitation: int | None = None
    uv_index: float | None = None
    visibility: str = "--"


class DailyForecastSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    day: str
    icon: IconSymbol
    description: str
    high: int | None = None
    low: int | None = None


class WeatherReport(BaseModel):
    """The canonical result of resolving weather for one location query."""

    model_config = ConfigDict(frozen=True)

    location: ResolvedLocation
    utc_offset: int
    current: CurrentConditions
    hourly: list[HourlyForecastEntry] = []
    daily: list[DailyForecastSummary] = []
