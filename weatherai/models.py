"""Weather data model returned by the AI weather lookup.

The backend answers with camelCase JSON (``locationName``, ``windSpeed``,
``maxTemp``...). ``WeatherSnapshot.from_dict`` maps that shape onto frozen
dataclasses; leaf values the model left out fall back to neutral defaults.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum


class WeatherDataError(Exception):
    """Raised when a decoded payload does not have the weather shape."""


class WeatherCondition(str, Enum):
    """Canonical conditions the prompt asks the model to map onto."""

    SUNNY = "Sunny"
    CLOUDY = "Cloudy"
    RAINY = "Rainy"
    SNOWY = "Snowy"
    STORMY = "Stormy"
    PARTLY_CLOUDY = "PartlyCloudy"


class ViewMode(str, Enum):
    """Which forecast series the chart and detail list show."""

    HOURLY = "HOURLY"
    WEEKLY = "WEEKLY"


@dataclass(frozen=True)
class CurrentWeather:
    """Current conditions.

    Attributes:
        temp: Temperature in Celsius.
        condition: Condition string, expected to be a WeatherCondition value.
        humidity: Relative humidity percentage (0-100).
        wind_speed: Wind speed in m/s.
        description: Short Korean description.
    """

    temp: float
    condition: str
    humidity: float
    wind_speed: float
    description: str = ""


@dataclass(frozen=True)
class HourlyForecast:
    """One hour of the 24-hour forecast (time is an "HH:00" label)."""

    time: str
    temp: float
    condition: str


@dataclass(frozen=True)
class WeeklyForecast:
    """One day of the 7-day forecast (day is a Korean day name)."""

    day: str
    max_temp: float
    min_temp: float
    condition: str


@dataclass(frozen=True)
class WeatherSource:
    """A grounding citation from the web search."""

    title: str
    uri: str


@dataclass(frozen=True)
class WeatherSnapshot:
    """Complete weather payload for one location.

    A new snapshot replaces the previous one wholesale; nothing is merged.
    """

    location_name: str
    current: CurrentWeather
    hourly: list[HourlyForecast] = field(default_factory=list)
    weekly: list[WeeklyForecast] = field(default_factory=list)
    sources: list[WeatherSource] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> WeatherSnapshot:
        """Build a snapshot from the backend's JSON object.

        Raises:
            WeatherDataError: If the root is not an object or ``current`` is
                missing.
        """
        if not isinstance(data, dict):
            raise WeatherDataError("Weather payload is not a JSON object.")
        current = data.get("current")
        if not isinstance(current, dict):
            raise WeatherDataError("Weather payload has no current conditions.")

        try:
            return cls(
                location_name=str(data.get("locationName", "")),
                current=CurrentWeather(
                    temp=_number(current.get("temp")),
                    condition=str(current.get("condition", "")),
                    humidity=_number(current.get("humidity")),
                    wind_speed=_number(current.get("windSpeed")),
                    description=str(current.get("description", "")),
                ),
                hourly=[
                    HourlyForecast(
                        time=str(h.get("time", "")),
                        temp=_number(h.get("temp")),
                        condition=str(h.get("condition", "")),
                    )
                    for h in data.get("hourly") or []
                ],
                weekly=[
                    WeeklyForecast(
                        day=str(w.get("day", "")),
                        max_temp=_number(w.get("maxTemp")),
                        min_temp=_number(w.get("minTemp")),
                        condition=str(w.get("condition", "")),
                    )
                    for w in data.get("weekly") or []
                ],
            )
        except (AttributeError, TypeError, ValueError) as exc:
            raise WeatherDataError(f"Unexpected weather payload format: {exc}") from exc

    def with_sources(self, sources: list[WeatherSource]) -> WeatherSnapshot:
        """Return a copy of this snapshot carrying the given citations."""
        return replace(self, sources=list(sources))


def _number(value) -> float:
    """Coerce a JSON number (or numeric string) to float; missing is 0.

    NaN and infinities are rejected along with non-numeric values.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    result = float(value)
    if not math.isfinite(result):
        raise ValueError(f"not a finite number: {value!r}")
    return result


# ---------------------------------------------------------------------------
# Weather queries
# ---------------------------------------------------------------------------

def encode_coordinates(latitude: float, longitude: float) -> str:
    """Encode a device position as a free-text weather query."""
    return f"latitude: {latitude}, longitude: {longitude}"


def is_coordinate_query(query: str) -> bool:
    """Whether a query is an encoded position rather than a place name."""
    return "latitude" in query
