"""Day weather adapter using Open-Meteo API (keyless, free tier)."""

import logging
from datetime import date

import httpx
from pydantic import BaseModel

from tripsmith.models.common import Coordinates
from tripsmith.models.itinerary import DayPlan, Itinerary

logger = logging.getLogger(__name__)

# WMO weather interpretation codes: (first code, last code, label)
_WMO_RANGES: list[tuple[int, int, str]] = [
    (0, 0, "Clear sky"),
    (1, 3, "Partly cloudy"),
    (45, 48, "Foggy"),
    (51, 55, "Drizzle"),
    (61, 67, "Rain"),
    (71, 77, "Snow"),
    (80, 82, "Showers"),
    (85, 86, "Snow showers"),
    (95, 99, "Thunderstorm"),
]


class WeatherDay(BaseModel):
    """Daily forecast for one date."""

    date: date
    temp_c_high: float
    temp_c_low: float
    weather_code: int

    @property
    def label(self) -> str:
        return describe_weather_code(self.weather_code)


def describe_weather_code(code: int) -> str:
    """Map a WMO weather code to a short label ("Unknown" if unmapped)."""
    for first, last, label in _WMO_RANGES:
        if first <= code <= last:
            return label
    return "Unknown"


def day_weather_coordinates(day: DayPlan, itinerary: Itinerary) -> Coordinates | None:
    """Pick where to look up a day's weather.

    The first activity with coordinates wins, else the accommodation.
    """
    for activity in day.activities:
        if activity.coordinates is not None:
            return activity.coordinates
    if itinerary.logistics is not None:
        return itinerary.logistics.accommodation.coordinates
    return None


async def fetch_day_weather(
    coordinates: Coordinates,
    day: date,
    base_url: str = "https://api.open-meteo.com/v1/forecast",
    client: httpx.AsyncClient | None = None,
    timeout_seconds: float = 4.0,
) -> WeatherDay | None:
    """Fetch the daily forecast for a single date.

    Dates outside the forecast window come back without data; that and any
    network or payload error yield None.

    Args:
        coordinates: Where to look up
        day: Date to fetch
        base_url: Open-Meteo API base URL
        client: Optional httpx client (for testing with mocks)
        timeout_seconds: Request timeout when creating a client

    Returns:
        WeatherDay, or None when unavailable
    """
    # Docs: https://open-meteo.com/en/docs
    params: dict[str, str | float] = {
        "latitude": coordinates.lat,
        "longitude": coordinates.lng,
        "daily": "weather_code,temperature_2m_max,temperature_2m_min",
        "start_date": day.isoformat(),
        "end_date": day.isoformat(),
        "timezone": "auto",
    }

    close_client = False
    if client is None:
        client = httpx.AsyncClient(timeout=timeout_seconds)
        close_client = True

    try:
        response = await client.get(base_url, params=params)
        response.raise_for_status()
        daily = response.json().get("daily") or {}

        # Response structure: {daily: {time: [...], weather_code: [...], ...}}
        if not daily.get("time"):
            return None

        return WeatherDay(
            date=day,
            temp_c_high=daily["temperature_2m_max"][0],
            temp_c_low=daily["temperature_2m_min"][0],
            weather_code=daily["weather_code"][0],
        )
    except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as e:
        logger.warning(f"Failed to fetch weather for {day.isoformat()}: {e}")
        return None
    finally:
        if close_client:
            await client.aclose()
