"""Current weather from Open-Meteo."""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import httpx
from loguru import logger

from ..core.config import WeatherConfig


FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
CURRENT_FIELDS = "temperature_2m,apparent_temperature,wind_speed_10m,weather_code,is_day"

NOT_CONFIGURED = "Configure in settings"
UNAVAILABLE = "Weather unavailable"

WEATHER_CODES = {
    0: "Clear",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow",
    73: "Moderate snow",
    75: "Heavy snow",
    77: "Snow grains",
    80: "Rain showers",
    81: "Heavy rain showers",
    82: "Violent rain showers",
    85: "Snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with hail",
    99: "Thunderstorm with heavy hail",
}


@dataclass(frozen=True)
class WeatherReport:
    temperature: int
    feels_like: int
    wind: int
    description: str
    icon: str
    temp_unit: str
    wind_unit: str

    @property
    def temperature_label(self) -> str:
        return f"{self.temperature}°{self.temp_unit}"

    @property
    def feels_like_label(self) -> str:
        return f"Feels {self.feels_like}°"

    @property
    def wind_label(self) -> str:
        return f"{self.wind} {self.wind_unit}"


def weather_code_to_text(code: Optional[int]) -> str:
    return WEATHER_CODES.get(code, "")


def choose_weather_icon(code: Optional[int], is_night: bool = False) -> str:
    """Lucide icon name for a WMO weather code."""
    if code is None:
        return "cloud"
    if code == 0:
        return "moon" if is_night else "sun"
    if code == 1:
        return "moon-star" if is_night else "sun"
    if code == 2:
        return "cloud-sun"
    if code == 3:
        return "cloud"
    if code in (45, 48):
        return "fog"
    if 51 <= code <= 57 or 61 <= code <= 67 or code in (80, 81, 82):
        return "cloud-rain"
    if 71 <= code <= 77 or code in (85, 86):
        return "cloud-snow"
    if code >= 95:
        return "cloud-lightning"
    return "cloud"


def round_half_up(value: float) -> int:
    """Round .5 upwards, so 2.5 shows as 3 and -2.5 as -2."""
    return math.floor(value + 0.5)


def forecast_params(config: WeatherConfig) -> Dict[str, Any]:
    return {
        "latitude": config.lat,
        "longitude": config.lon,
        "current": CURRENT_FIELDS,
        "temperature_unit": "fahrenheit" if config.temp_imperial else "celsius",
        "windspeed_unit": "mph" if config.wind_imperial else "kmh",
    }


def parse_report(data: Dict[str, Any], config: WeatherConfig) -> WeatherReport:
    current = data.get("current") or {}
    code = current.get("weather_code")
    is_night = current.get("is_day") is not None and int(current["is_day"]) == 0
    return WeatherReport(
        temperature=round_half_up(current["temperature_2m"]),
        feels_like=round_half_up(current["apparent_temperature"]),
        wind=round_half_up(current["wind_speed_10m"]),
        description=weather_code_to_text(code),
        icon=choose_weather_icon(code, is_night),
        temp_unit="F" if config.temp_imperial else "C",
        wind_unit="mph" if config.wind_imperial else "km/h",
    )


async def fetch_weather(
    config: WeatherConfig,
    client: httpx.AsyncClient,
    timeout: float = 5.0,
) -> Union[WeatherReport, str]:
    """
    Fetch the current weather.

    Returns a WeatherReport, or the fallback text to show in its place
    when the location is not configured or the request fails.
    """
    if not config.configured:
        return NOT_CONFIGURED

    try:
        response = await client.get(FORECAST_URL, params=forecast_params(config), timeout=timeout)
        response.raise_for_status()
        return parse_report(response.json(), config)
    except httpx.HTTPError as e:
        logger.warning(f"Weather request failed: {e}")
    except (ValueError, KeyError, TypeError) as e:
        logger.error(f"Unexpected weather payload: {e}")
    return UNAVAILABLE
