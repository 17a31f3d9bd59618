# ABOUTME: Exceptions surfaced to callers of the weather resolution pipeline.
# ABOUTME: Only configuration problems and a failed current-conditions lookup are fatal.


class WeatherError(Exception):
    """Base class for fatal weather resolution errors."""


class ConfigurationError(WeatherError):
    """Raised when the data sources cannot be called at all, e.g. no API key."""


class WeatherUnavailableError(WeatherError):
    """Raised when the mandatory current-conditions source cannot be used."""

    def __init__(self, message: str = "Unable to load weather data"):
        super().__init__(message)
