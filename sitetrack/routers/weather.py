from fastapi import APIRouter, Depends, Query
from typing import Optional

from sitetrack.core.security import get_current_user
from sitetrack.models import Profile
from sitetrack.schemas.dashboard import WeatherData
from sitetrack.utils import weather as weather_service

router = APIRouter(tags=["Weather"])


@router.get("/weather", response_model=Optional[WeatherData])
def get_weather(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    current_user: Profile = Depends(get_current_user),
):
    """Forecast for the coordinates (default site when omitted); null when the provider is unavailable."""
    return weather_service.fetch_weather_forecast(lat, lng)
