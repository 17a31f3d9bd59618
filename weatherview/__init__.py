# ABOUTME: Multi-source weather aggregation: one call resolves current, hourly, and daily weather.
# ABOUTME: Re-exports the resolution entry point, its dependencies, and its error types.

from weatherview.aggregator import resolve_weather
from weatherview.deps import WeatherDeps, create_deps, load_settings
from weatherview.errors import ConfigurationError, WeatherError, WeatherUnavailableError
from weatherview.models import WeatherReport

__all__ = [
    "ConfigurationError",
    "WeatherDeps",
    "WeatherError",
    "WeatherReport",
    "WeatherUnavailableError",
    "create_deps",
    "load_settings",
    "resolve_weather",
]
