"""
Weather gateway.

API logic is kept apart from the coordinator and the FastAPI endpoints:
- easier to test in isolation (inject an httpx transport)
- the coordinator only ever sees normalized records or typed errors
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from .errors import LocationNotFound, MalformedResponse, NetworkFailure
from .normalizer import CurrentConditions, ForecastDay, normalize_current, normalize_forecast

UNITS = "metric"


class OpenWeatherGateway:
    """
    OpenWeatherMap wrapper.

    Endpoints used:
    - Current weather:
        /data/2.5/weather?q=...&units=metric&appid=KEY
        /data/2.5/weather?lat=...&lon=...&units=metric&appid=KEY
    - 5-day forecast (3-hour increments):
        /data/2.5/forecast?q=...&units=metric&appid=KEY

    One request per call, no retries. Retrying is the caller's decision.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openweathermap.org",
        timeout_s: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.transport = transport

    async def fetch_current_by_name(self, name: str) -> CurrentConditions:
        raw = await self._get("/data/2.5/weather", {"q": name})
        return normalize_current(raw)

    async def fetch_current_by_coords(self, lat: float, lon: float) -> CurrentConditions:
        raw = await self._get("/data/2.5/weather", {"lat": lat, "lon": lon})
        return normalize_current(raw)

    async def fetch_forecast_by_name(self, name: str) -> List[ForecastDay]:
        raw = await self._get("/data/2.5/forecast", {"q": name})
        return normalize_forecast(raw)

    async def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        params = {**params, "units": UNITS, "appid": self.api_key}
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self.transport) as client:
                r = await client.get(f"{self.base}{path}", params=params)
        except httpx.RequestError as e:
            raise NetworkFailure(f"Could not reach OpenWeather: {e!r}") from e

        try:
            data = r.json()
        except ValueError:
            data = None

        status = self._provider_status(r, data)
        if status == 404:
            raise LocationNotFound("Location not found.")
        if status != 200:
            message = data.get("message", "") if isinstance(data, dict) else r.text
            raise NetworkFailure(f"OpenWeather request failed ({status}): {message}")
        if not isinstance(data, dict):
            raise MalformedResponse("OpenWeather returned a non-object body.")
        return data

    @staticmethod
    def _provider_status(r: httpx.Response, data: Any) -> int:
        """
        OpenWeather reports its status in the body's `cod` field, as an int on
        /weather and as a string on /forecast. Fall back to the HTTP status.
        """
        cod = data.get("cod") if isinstance(data, dict) else None
        try:
            return int(cod)
        except (TypeError, ValueError):
            return r.status_code
