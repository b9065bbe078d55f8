"""
Lookup coordination.

LookupCoordinator is the single writer of the published LookupState. Every
trigger (startup geolocation, a typed search, a history quick-select, a
position reported later by the browser) goes through it.

Each resolution attempt takes a sequence token when it starts. After every
await the attempt checks that its token is still the newest; if a later
trigger has started in the meantime, the attempt's result is dropped. In-flight
requests are not cancelled, they just lose.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

from .errors import EmptySearchError, ErrorKind, GeolocationUnavailable, WeatherError
from .geolocation import Geolocator
from .history import HistoryStore
from .normalizer import CurrentConditions, ForecastDay
from .weather_clients import OpenWeatherGateway

logger = logging.getLogger(__name__)


class LookupStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class LookupState:
    status: LookupStatus
    conditions: Optional[CurrentConditions] = None
    forecast: Tuple[ForecastDay, ...] = ()
    error: Optional[ErrorKind] = None

    @classmethod
    def idle(cls) -> "LookupState":
        return cls(LookupStatus.IDLE)

    @classmethod
    def loading(cls) -> "LookupState":
        return cls(LookupStatus.LOADING)

    @classmethod
    def ready(cls, conditions: CurrentConditions, forecast: Sequence[ForecastDay]) -> "LookupState":
        return cls(LookupStatus.READY, conditions=conditions, forecast=tuple(forecast))

    @classmethod
    def failed(cls, error: ErrorKind) -> "LookupState":
        return cls(LookupStatus.FAILED, error=error)


Listener = Callable[[LookupState], None]


class LookupCoordinator:
    def __init__(self, gateway: OpenWeatherGateway, history_store: HistoryStore, geolocator: Geolocator):
        self.gateway = gateway
        self.history_store = history_store
        self.geolocator = geolocator

        self._state = LookupState.idle()
        self._history: List[str] = history_store.load()
        self._token = 0
        self._listeners: List[Listener] = []

    @property
    def state(self) -> LookupState:
        return self._state

    @property
    def history(self) -> List[str]:
        return list(self._history)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener` with every published state. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def clear_history(self) -> List[str]:
        self._history = self.history_store.clear()
        return self.history

    async def startup(self) -> LookupState:
        """
        Look up the weather where the device is.

        A denied or unavailable position is expected, not a fault: the state
        stays as it is and nothing is shown to the user.
        """
        try:
            position = await self.geolocator.get_current_position()
        except GeolocationUnavailable as e:
            logger.debug("Skipping current-location lookup: %s", e)
            return self._state
        return await self.search_by_coords(position.latitude, position.longitude)

    async def search_by_name(self, name: str) -> LookupState:
        """Raises EmptySearchError, without touching the state, for blank input."""
        query = name.strip()
        if not query:
            raise EmptySearchError()
        return await self._resolve(lambda: self.gateway.fetch_current_by_name(query), query)

    async def search_by_coords(self, lat: float, lon: float) -> LookupState:
        return await self._resolve(lambda: self.gateway.fetch_current_by_coords(lat, lon), f"{lat},{lon}")

    async def select_history(self, name: str) -> LookupState:
        """Quick re-query of a recent search."""
        return await self.search_by_name(name)

    async def _resolve(self, fetch_current: Callable[[], Awaitable[CurrentConditions]], label: str) -> LookupState:
        token = self._begin()

        try:
            conditions = await fetch_current()
        except WeatherError as e:
            if self._is_stale(token, label):
                return self._state
            logger.warning("Weather lookup for %s failed: %s", label, e)
            self._publish(LookupState.failed(e.kind))
            return self._state

        if self._is_stale(token, label):
            return self._state

        # OpenWeather names coordinates over open water "". There is nothing to
        # query a forecast by, and nothing worth re-selecting from the history.
        place = conditions.name.strip()

        # The forecast is best effort: without it we still show current conditions.
        forecast: List[ForecastDay] = []
        if place:
            try:
                forecast = await self.gateway.fetch_forecast_by_name(place)
            except WeatherError as e:
                logger.warning("Forecast for %s unavailable: %s", place, e)

        if self._is_stale(token, label):
            return self._state

        if place:
            self._record_history(place)
        self._publish(LookupState.ready(conditions, forecast))
        return self._state

    def _record_history(self, place: str) -> None:
        # Keyed on the provider's name, not the raw input, so spelling variants collapse.
        # History is a side effect of the lookup; failing to save it must not hide the weather.
        try:
            self._history = self.history_store.record(place)
        except Exception:
            logger.exception("Could not save %s to the search history", place)

    def _begin(self) -> int:
        self._token += 1
        self._publish(LookupState.loading())
        return self._token

    def _is_stale(self, token: int, label: str) -> bool:
        if token == self._token:
            return False
        logger.debug("Discarding superseded lookup for %s", label)
        return True

    def _publish(self, state: LookupState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("State listener %r failed", listener)
