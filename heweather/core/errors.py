from __future__ import annotations

STATUS_CODE_REFERENCE = "https://dev.qweather.com/docs/start/status-code/"


class WeatherError(Exception):
    """Base class for every failure raised while answering a weather query."""


class ConfigurationError(WeatherError):
    """Credentials or forecast settings cannot be used with the provider."""


class CityNotFoundError(WeatherError):
    def __init__(self, location: str | None = None) -> None:
        self.location = location
        super().__init__("City not found" if location is None else f"City not found: {location}")


class TransportError(WeatherError):
    """The provider could not be reached or answered with a non-2xx status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ApiError(WeatherError):
    """The provider answered, but with a non-success status code.

    ``failures`` maps a facet name to the status code it reported, so a single
    error can describe several failing facets at once.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        failures: dict[str, str] | None = None,
    ) -> None:
        self.code = code
        self.failures = dict(failures or {})
        super().__init__(message)


class RenderError(WeatherError):
    """The weather card could not be turned into an image."""
