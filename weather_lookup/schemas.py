"""
Pydantic schemas.

Defines the contract of our REST endpoints. The front end only ever reads
LookupStateOut and HistoryOut; it never mutates state directly.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .coordinator import LookupStatus
from .errors import ErrorKind
from .normalizer import ConditionCategory


class CoordinatesIn(BaseModel):
    """Position reported by the browser Geolocation API."""
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class ConditionsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    category: ConditionCategory
    description: str
    temperature: float
    humidity: int
    wind_speed: float
    icon: str


class ForecastDayOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    timestamp: datetime
    weekday: str
    icon: str
    icon_url: str
    temperature: float


class LookupStateOut(BaseModel):
    """Snapshot the front end renders: loading flag, conditions, forecast or error."""
    model_config = ConfigDict(from_attributes=True)

    status: LookupStatus
    conditions: Optional[ConditionsOut] = None
    forecast: List[ForecastDayOut] = []
    error: Optional[ErrorKind] = None


class HistoryOut(BaseModel):
    history: List[str]
