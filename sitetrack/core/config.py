import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


class Settings(BaseModel):
    app_name: str = os.getenv("APP_NAME", "SiteTrack")
    environment: str = os.getenv("ENVIRONMENT", "development")
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./sitetrack.db")

    # Auth
    secret_key: str = os.getenv("SECRET_KEY", "CHANGE_ME_IN_PRODUCTION")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

    # CORS
    cors_origins: List[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
        if origin.strip()
    ]

    # File storage (uploads are served back under /media)
    storage_dir: str = os.getenv("STORAGE_DIR", "./media")
    public_media_url: str = os.getenv("PUBLIC_MEDIA_URL", "/media")

    # Weather (Open-Meteo)
    weather_api_url: str = os.getenv("WEATHER_API_URL", "https://api.open-meteo.com/v1/forecast")
    weather_timeout_seconds: float = float(os.getenv("WEATHER_TIMEOUT_SECONDS", "5"))
    default_latitude: float = float(os.getenv("DEFAULT_LATITUDE", "-26.7753"))
    default_longitude: float = float(os.getenv("DEFAULT_LONGITUDE", "-51.0150"))

    # Generative AI (Gemini REST)
    gemini_api_key: str = os.getenv("GEMINI_API_KEY", "")
    gemini_api_url: str = os.getenv(
        "GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta/models"
    )
    gemini_fast_model: str = os.getenv("GEMINI_FAST_MODEL", "gemini-2.5-flash")
    gemini_reasoning_model: str = os.getenv("GEMINI_REASONING_MODEL", "gemini-2.5-pro")
    ai_timeout_seconds: float = float(os.getenv("AI_TIMEOUT_SECONDS", "30"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
