"""
Open-Meteo forecast for the site, mapped to the app's weather conditions
plus a few practical insights for the crew.
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from sitetrack.core.config import settings
from sitetrack.core.constants import WeatherCondition

logger = logging.getLogger(__name__)

RAIN_CODES = {51, 53, 55, 61, 63, 65, 80, 81, 82}
STORM_CODES = {95, 96, 99}


def map_wmo_to_condition(code: int) -> str:
    """WMO weather code to sunny/cloudy/rainy/storm (fog and unknown codes are cloudy)."""
    if code in (0, 1):
        return WeatherCondition.SUNNY.value
    if code in RAIN_CODES:
        return WeatherCondition.RAINY.value
    if code in STORM_CODES:
        return WeatherCondition.STORM.value
    return WeatherCondition.CLOUDY.value


def build_insights(rain_probabilities: List[Optional[int]]) -> List[str]:
    today = (rain_probabilities[0] if rain_probabilities else None) or 0
    tomorrow = (rain_probabilities[1] if len(rain_probabilities) > 1 else None) or 0

    insights = []
    if today > 60:
        insights.append("🔴 Alta chance de chuva hoje. Priorizar tarefas internas (alvenaria, reboco interno).")
    elif today > 30:
        insights.append("🟡 Risco de chuva passageira. Mantenha lonas de proteção acessíveis.")
    else:
        insights.append("🟢 Dia favorável para atividades externas e concretagem.")

    if tomorrow > 70:
        insights.append(
            "⚠️ Alerta: Chuva forte prevista para amanhã. "
            "Programe recebimento de materiais sensíveis para outro dia."
        )
    return insights


def resolve_coordinates(latitude: Optional[float], longitude: Optional[float]):
    if latitude is None or longitude is None:
        return settings.default_latitude, settings.default_longitude
    return latitude, longitude


def fetch_weather_forecast(
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> Optional[Dict[str, Any]]:
    """
    Current conditions and daily forecast for the coordinates.

    Missing coordinates fall back to the configured default site. Any
    network or payload error is logged and yields None; callers render the
    weather section empty.
    """
    lat, lng = resolve_coordinates(latitude, longitude)
    params = {
        "latitude": lat,
        "longitude": lng,
        "current": "temperature_2m,is_day,weather_code,wind_speed_10m",
        "daily": "weather_code,temperature_2m_max,temperature_2m_min,precipitation_probability_max",
        "timezone": "auto",
    }

    try:
        response = requests.get(
            settings.weather_api_url,
            params=params,
            timeout=settings.weather_timeout_seconds,
        )
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("Weather fetch failed for (%s, %s): %s", lat, lng, e)
        return None

    try:
        current = data["current"]
        daily = data["daily"]
        rain_prob = daily["precipitation_probability_max"]
        return {
            "current": {
                "temperature": round(current["temperature_2m"]),
                "condition": map_wmo_to_condition(current["weather_code"]),
                "is_day": bool(current["is_day"]),
                "wind_speed": current["wind_speed_10m"],
            },
            "daily": {
                "time": daily["time"],
                "weather_code": daily["weather_code"],
                "max_temp": daily["temperature_2m_max"],
                "min_temp": daily["temperature_2m_min"],
                "rain_prob": rain_prob,
            },
            "insights": build_insights(rain_prob),
        }
    except (KeyError, TypeError) as e:
        logger.warning("Unexpected weather payload: %s", e)
        return None
