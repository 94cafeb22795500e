"""
OpenWeatherMap current-weather client.

API:   https://api.openweathermap.org/data/2.5/weather
Docs:  https://openweathermap.org/current

Credential setup (.env, gitignored):
  WEATHER_API_KEY=your_openweathermap_key

Query forms:
    GET /data/2.5/weather?q=Ludhiana&appid=<key>&units=metric
    GET /data/2.5/weather?lat=30.9&lon=75.85&appid=<key>&units=metric

Only three fields are extracted: ``main.temp`` (rounded to a whole degree),
``main.humidity`` and ``weather[0].description``.

The client never raises. Every failure becomes a ``WeatherFetchResult`` with
``success=False`` and one of the ``ERROR_*`` codes, and the advisory is then
composed without weather advice.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, ClassVar, Optional

import httpx
from pydantic import ValidationError

from agro_advisor.models.advisory import WeatherReading

logger = logging.getLogger(__name__)

ERROR_INVALID_API_KEY = "INVALID_API_KEY"
ERROR_LOCATION_NOT_FOUND = "LOCATION_NOT_FOUND"
ERROR_RATE_LIMIT = "RATE_LIMIT_EXCEEDED"
ERROR_API = "API_ERROR"
ERROR_NETWORK = "NETWORK_ERROR"
ERROR_UNKNOWN = "UNKNOWN_ERROR"


# ── Response types ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class WeatherFetchResult:
    """Outcome of one weather lookup."""

    success: bool
    data: Optional[WeatherReading] = None
    location: Optional[str] = None   # city name as resolved by the API
    country: Optional[str] = None
    error: Optional[str] = None
    code: Optional[str] = None


class _WeatherInputError(ValueError):
    """Request rejected before any HTTP call."""


# ── Client ─────────────────────────────────────────────────────────────────────

class WeatherClient:
    """Client for the OpenWeatherMap current-weather endpoint.

    Usage::

        import os
        client = WeatherClient(api_key=os.environ.get("WEATHER_API_KEY"))
        result = client.fetch_by_location("Ludhiana")
        if result.success:
            print(result.data.temperature)
    """

    DEFAULT_BASE_URL: ClassVar[str] = "https://api.openweathermap.org/data/2.5/weather"

    STATUS_ERRORS: ClassVar[dict[int, tuple[str, str]]] = {
        401: (ERROR_INVALID_API_KEY,
              "Invalid API key. Please check your weather API configuration."),
        404: (ERROR_LOCATION_NOT_FOUND,
              "Location not found. Please check the city name and try again."),
        429: (ERROR_RATE_LIMIT, "Too many requests. Please try again later."),
    }

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        units: str = "metric",
        timeout_s: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """Initialise the client.

        Args:
            api_key: OpenWeatherMap key from WEATHER_API_KEY.
            base_url: Current-weather endpoint URL.
            units: ``"metric"`` for °C.
            timeout_s: Request timeout in seconds.
            transport: Optional httpx transport (tests inject ``MockTransport``).
        """
        self.api_key = api_key
        self.base_url = base_url
        self.units = units
        self.timeout_s = timeout_s
        self._transport = transport
        if not api_key:
            logger.warning("Weather API key not configured; weather lookups will fail.")

    def status(self) -> dict[str, Any]:
        """Configuration summary for diagnostics (never includes the key)."""
        return {
            "configured": bool(self.api_key),
            "base_url": self.base_url,
            "units": self.units,
            "timeout_s": self.timeout_s,
        }

    def fetch_by_location(self, location: Optional[str]) -> WeatherFetchResult:
        """Current weather for a city name, e.g. ``"Ludhiana"`` or ``"Pune,IN"``."""
        if not isinstance(location, str) or not location.strip():
            return self._failure(
                _WeatherInputError("Location is required and must be a string")
            )
        return self._fetch({"q": location.strip()})

    def fetch_by_coordinates(self, lat: Any, lon: Any) -> WeatherFetchResult:
        """Current weather at a latitude/longitude."""
        if not _is_number(lat) or not _is_number(lon):
            return self._failure(
                _WeatherInputError("Latitude and longitude must be numbers")
            )
        if not -90 <= lat <= 90:
            return self._failure(_WeatherInputError("Latitude must be between -90 and 90"))
        if not -180 <= lon <= 180:
            return self._failure(_WeatherInputError("Longitude must be between -180 and 180"))
        return self._fetch({"lat": lat, "lon": lon})

    # ── Internals ──────────────────────────────────────────────────────────────

    def _fetch(self, query: dict[str, Any]) -> WeatherFetchResult:
        if not self.api_key:
            return self._failure(_WeatherInputError("Weather API key is not configured"))

        params = {**query, "appid": self.api_key, "units": self.units}
        try:
            with httpx.Client(transport=self._transport, timeout=self.timeout_s) as client:
                resp = client.get(self.base_url, params=params)
                resp.raise_for_status()
                payload = resp.json()
            reading = extract_weather_reading(payload)
            location = payload.get("name")
            country = (payload.get("sys") or {}).get("country")
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError, AttributeError) as exc:
            return self._failure(exc)

        return WeatherFetchResult(success=True, data=reading, location=location, country=country)

    def _failure(self, exc: Exception) -> WeatherFetchResult:
        code, message = _classify(exc)
        logger.warning("Weather lookup failed [%s]: %s", code, exc, extra={"weather_error": code})
        return WeatherFetchResult(success=False, error=message, code=code)


def extract_weather_reading(payload: dict[str, Any]) -> WeatherReading:
    """Pick temperature, humidity and description out of an API payload.

    Raises:
        KeyError, IndexError, TypeError: On a payload missing required fields.
        pydantic.ValidationError: On out-of-range values.
    """
    main = payload["main"]
    return WeatherReading(
        # Half-up rounding to a whole degree; round() would go to even.
        temperature=math.floor(float(main["temp"]) + 0.5),
        humidity=main["humidity"],
        description=payload["weather"][0]["description"],
    )


def _classify(exc: Exception) -> tuple[str, str]:
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        if status in WeatherClient.STATUS_ERRORS:
            return WeatherClient.STATUS_ERRORS[status]
        try:
            detail = exc.response.json().get("message") or "Weather API error"
        except (ValueError, AttributeError):
            detail = "Weather API error"
        return ERROR_API, f"Weather API error: {detail}"
    if isinstance(exc, httpx.TransportError):
        return (
            ERROR_NETWORK,
            "Unable to connect to weather service. Please check your internet connection.",
        )
    if isinstance(exc, (KeyError, IndexError, TypeError, AttributeError, ValidationError)):
        return ERROR_UNKNOWN, f"Unexpected weather API response: {exc}"
    return ERROR_UNKNOWN, str(exc) or "An unexpected error occurred"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
