# ABOUTME: Configuration and dependency container for the weather pipeline.
# ABOUTME: Loads settings from the environment (.env aware) and builds the shared httpx.AsyncClient.

import os

import httpx
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from weatherview.errors import ConfigurationError

DEFAULT_BASE_URL = "https://api.openweathermap.org/data/2.5"
DEFAULT_TIMEOUT = 10.0


class WeatherSettings(BaseModel):
    """Static credential and endpoint settings for the data sources."""

    model_config = ConfigDict(frozen=True)

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT


class WeatherDeps(BaseModel):
    """Everything a resolution needs: settings plus the HTTP client used for every source."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    settings: WeatherSettings
    http_client: httpx.AsyncClient


def load_settings() -> WeatherSettings:
    """Read settings from the environment, failing before any request when the key is missing."""
    load_dotenv()
    api_key = os.environ.get("WEATHER_API_KEY", "").strip()
    if not api_key:
        raise ConfigurationError("Missing API key")
    raw_timeout = os.environ.get("WEATHER_HTTP_TIMEOUT", str(DEFAULT_TIMEOUT))
    try:
        timeout = float(raw_timeout)
    except ValueError as e:
        raise ConfigurationError(f"Invalid WEATHER_HTTP_TIMEOUT: {raw_timeout!r}") from e
    return WeatherSettings(
        api_key=api_key,
        base_url=os.environ.get("WEATHER_API_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        timeout=timeout,
    )


def create_http_client(settings: WeatherSettings) -> httpx.AsyncClient:
    """Create the httpx client. Each source is called once per resolution, so there is no retry transport."""
    return httpx.AsyncClient(timeout=settings.timeout)


def create_deps(settings: WeatherSettings | None = None) -> WeatherDeps:
    settings = settings or load_settings()
    return WeatherDeps(settings=settings, http_client=create_http_client(settings))
