"""
Response normalization.

Maps raw OpenWeather payloads into the records the rest of the app uses.
Pure functions; no I/O. Payload shapes are validated with strict pydantic
models so that, e.g., a temperature sent as a string is rejected instead of
coerced.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from enum import Enum
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import MalformedResponse

# Format of the forecast `dt_txt` field, e.g. "2025-12-14 12:00:00"
FORECAST_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
DAILY_SAMPLE_TIME = time(12, 0, 0)

ICON_URL = "https://openweathermap.org/img/wn/{icon}@2x.png"


class ConditionCategory(str, Enum):
    CLEAR = "clear"
    CLOUD = "cloud"
    RAIN = "rain"
    THUNDERSTORM = "thunderstorm"
    SNOW = "snow"
    FOG = "fog"


# Checked in order, first match wins. Thunder goes before rain because storm
# descriptions usually mention rain too ("thunderstorm with heavy rain").
CATEGORY_KEYWORDS = (
    (("clear",), ConditionCategory.CLEAR),
    (("cloud",), ConditionCategory.CLOUD),
    (("thunder",), ConditionCategory.THUNDERSTORM),
    (("rain",), ConditionCategory.RAIN),
    (("snow",), ConditionCategory.SNOW),
    (("mist", "fog"), ConditionCategory.FOG),
)


@dataclass(frozen=True)
class CurrentConditions:
    """Current weather for one resolved place. Replaced wholesale, never patched."""
    name: str
    category: ConditionCategory
    description: str
    temperature: float
    humidity: int
    wind_speed: float
    icon: str = ""


@dataclass(frozen=True)
class ForecastDay:
    """One representative (noon) sample per forecast day."""
    timestamp: datetime
    icon: str
    temperature: float

    @property
    def weekday(self) -> str:
        return self.timestamp.strftime("%a")

    @property
    def icon_url(self) -> str:
        return ICON_URL.format(icon=self.icon)


# -------------------------
# OpenWeather payloads
# -------------------------

class _RawModel(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")


class RawWeatherDescription(_RawModel):
    """One element of the `weather` array."""
    main: str
    description: str = ""
    icon: str = ""


class RawCurrentMain(_RawModel):
    temp: float
    humidity: int = Field(..., ge=0, le=100)


class RawWind(_RawModel):
    speed: float = Field(..., ge=0)


class RawCurrentPayload(_RawModel):
    """Response of /data/2.5/weather."""
    name: str
    weather: List[RawWeatherDescription] = Field(..., min_length=1)
    main: RawCurrentMain
    wind: RawWind


class RawForecastMain(_RawModel):
    temp: float


class RawForecastEntry(_RawModel):
    """One 3-hour step of /data/2.5/forecast."""
    dt_txt: str
    weather: List[RawWeatherDescription] = Field(..., min_length=1)
    main: RawForecastMain


class RawForecastPayload(_RawModel):
    list: List[RawForecastEntry]


def classify_condition(text: str) -> ConditionCategory:
    """Map a provider condition string to a category; unknown text counts as clear."""
    lowered = text.lower()
    for keywords, category in CATEGORY_KEYWORDS:
        if any(k in lowered for k in keywords):
            return category
    return ConditionCategory.CLEAR


def normalize_current(raw: Any) -> CurrentConditions:
    """
    Build CurrentConditions from a /data/2.5/weather payload.

    Raises MalformedResponse if the name, primary condition, temperature,
    humidity or wind speed is missing or has the wrong type.
    """
    try:
        payload = RawCurrentPayload.model_validate(raw)
    except ValidationError as e:
        raise MalformedResponse(f"Unexpected current weather payload: {e}") from e

    w = payload.weather[0]
    return CurrentConditions(
        name=payload.name,
        category=classify_condition(w.main),
        description=w.description,
        temperature=float(payload.main.temp),
        humidity=payload.main.humidity,
        wind_speed=float(payload.wind.speed),
        icon=w.icon,
    )


def normalize_forecast(raw: Any) -> List[ForecastDay]:
    """
    Reduce the 3-hour forecast list to one sample per day.

    Only steps stamped exactly 12:00:00 are kept. A list with no noon steps
    gives an empty forecast, not an error.
    """
    try:
        payload = RawForecastPayload.model_validate(raw)
    except ValidationError as e:
        raise MalformedResponse(f"Unexpected forecast payload: {e}") from e

    days: List[ForecastDay] = []
    for item in payload.list:
        try:
            stamp = datetime.strptime(item.dt_txt, FORECAST_TIME_FORMAT)
        except ValueError as e:
            raise MalformedResponse(f"Unexpected forecast timestamp: {item.dt_txt!r}") from e

        if stamp.time() != DAILY_SAMPLE_TIME:
            continue

        days.append(ForecastDay(
            timestamp=stamp,
            icon=item.weather[0].icon,
            temperature=float(item.main.temp),
        ))

    return days
