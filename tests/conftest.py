"""Pytest configuration and fixtures for weather_lookup tests."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from weather_lookup.coordinator import LookupCoordinator
from weather_lookup.errors import LocationNotFound
from weather_lookup.geolocation import StaticGeolocator
from weather_lookup.history import HistoryStore, MemoryKeyValueStore
from weather_lookup.normalizer import ConditionCategory, CurrentConditions, ForecastDay


def make_conditions(name: str = "Paris", temperature: float = 18.5) -> CurrentConditions:
    return CurrentConditions(
        name=name,
        category=ConditionCategory.CLOUD,
        description="scattered clouds",
        temperature=temperature,
        humidity=60,
        wind_speed=3.2,
        icon="03d",
    )


class FakeGateway:
    """
    Stands in for OpenWeatherGateway.

    Answers come from `current` / `forecasts` (a value, or an exception to
    raise). A key present in `gates` blocks until that asyncio.Event is set,
    which lets tests decide which response arrives first.
    """

    def __init__(self) -> None:
        self.current: Dict[Any, Any] = {}
        self.forecasts: Dict[str, Any] = {}
        self.gates: Dict[Any, asyncio.Event] = {}
        self.calls: List[tuple] = []

    async def fetch_current_by_name(self, name: str) -> CurrentConditions:
        self.calls.append(("current", name))
        return await self._answer(name, self.current.get(name, LocationNotFound("Location not found.")))

    async def fetch_current_by_coords(self, lat: float, lon: float) -> CurrentConditions:
        self.calls.append(("coords", lat, lon))
        return await self._answer((lat, lon), self.current.get((lat, lon), LocationNotFound("Location not found.")))

    async def fetch_forecast_by_name(self, name: str) -> List[ForecastDay]:
        self.calls.append(("forecast", name))
        return await self._answer(("forecast", name), self.forecasts.get(name, []))

    async def _answer(self, key: Any, value: Any) -> Any:
        gate = self.gates.get(key)
        if gate is not None:
            await gate.wait()
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def history_store() -> HistoryStore:
    return HistoryStore(MemoryKeyValueStore())


@pytest.fixture
def coordinator(gateway: FakeGateway, history_store: HistoryStore) -> LookupCoordinator:
    return LookupCoordinator(gateway, history_store, StaticGeolocator())


def current_payload(
    name: str = "Paris",
    main: str = "Clouds",
    description: str = "scattered clouds",
    temp: Any = 18.5,
    humidity: Any = 60,
    wind_speed: Any = 3.2,
    cod: Any = 200,
) -> Dict[str, Any]:
    """A /data/2.5/weather response body, trimmed to the fields we read."""
    return {
        "cod": cod,
        "name": name,
        "weather": [{"id": 802, "main": main, "description": description, "icon": "03d"}],
        "main": {"temp": temp, "feels_like": 17.9, "humidity": humidity, "pressure": 1012},
        "wind": {"speed": wind_speed, "deg": 240},
    }


def forecast_entry(dt_txt: str, temp: float = 15.0, icon: str = "10d") -> Dict[str, Any]:
    return {
        "dt": 0,
        "dt_txt": dt_txt,
        "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": icon}],
        "main": {"temp": temp, "humidity": 70},
    }


def forecast_payload(entries: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    """A /data/2.5/forecast response body; `cod` is a string on this endpoint."""
    return {"cod": "200", "cnt": len(entries or []), "list": entries or [], "city": {"name": "Paris"}}
