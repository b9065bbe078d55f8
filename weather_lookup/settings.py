from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized configuration.

    Loaded from:
    - environment variables
    - .env file (if present)

    The API key is read once at startup. A missing key is not fatal here;
    OpenWeather rejects the first request and that surfaces as a provider error.
    """
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    openweather_api_key: str = ""
    openweather_base_url: str = "https://api.openweathermap.org"
    request_timeout_s: float = 10.0

    # SQLite file path for the search history
    sqlite_path: str = "weather_lookup.sqlite3"
    history_limit: int = 5

    # Where "current location" is when no browser reports one
    default_latitude: Optional[float] = None
    default_longitude: Optional[float] = None

    log_level: str = "INFO"
    app_name: str = "Weather Lookup"


settings = Settings()
