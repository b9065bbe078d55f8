"""
FastAPI entrypoint.

This file focuses on:
- routing
- request/response handling
- wiring together settings + DB + gateway + coordinator

Rendering is the front end's job; it polls /api/state, submits searches and
reports the browser's Geolocation API position to /api/location.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import Depends, FastAPI, HTTPException, Query, Request

from .coordinator import LookupCoordinator
from .db import make_engine, make_session_factory
from .errors import EmptySearchError
from .geolocation import StaticGeolocator
from .history import HistoryStore, SqlKeyValueStore
from .schemas import CoordinatesIn, HistoryOut, LookupStateOut
from .settings import Settings, settings
from .weather_clients import OpenWeatherGateway

logger = logging.getLogger(__name__)


def build_coordinator(config: Settings) -> LookupCoordinator:
    """Construct the gateway, history store and coordinator from configuration."""
    session_factory = make_session_factory(make_engine(config.sqlite_path))
    gateway = OpenWeatherGateway(
        config.openweather_api_key,
        base_url=config.openweather_base_url,
        timeout_s=config.request_timeout_s,
    )
    history = HistoryStore(SqlKeyValueStore(session_factory), limit=config.history_limit)
    geolocator = StaticGeolocator(config.default_latitude, config.default_longitude)
    return LookupCoordinator(gateway, history, geolocator)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=settings.log_level.upper())
    if not settings.openweather_api_key:
        logger.warning("OPENWEATHER_API_KEY is not set; lookups will fail until it is.")

    coordinator = build_coordinator(settings)
    app.state.coordinator = coordinator
    # The current-location lookup runs in the background so a slow provider
    # does not hold up serving requests; /api/state shows it as loading.
    app.state.startup_task = asyncio.create_task(coordinator.startup())
    yield

    startup_task = app.state.startup_task
    if not startup_task.done():
        startup_task.cancel()
    with suppress(asyncio.CancelledError):
        await startup_task


app = FastAPI(title=settings.app_name, lifespan=lifespan)


def get_coordinator(request: Request) -> LookupCoordinator:
    """FastAPI dependency returning the app-wide coordinator."""
    return request.app.state.coordinator


def state_out(coordinator: LookupCoordinator) -> LookupStateOut:
    return LookupStateOut.model_validate(coordinator.state, from_attributes=True)


@app.get("/api/state", response_model=LookupStateOut)
async def api_state(coordinator: LookupCoordinator = Depends(get_coordinator)):
    """Current snapshot: idle, loading, ready (conditions + forecast) or failed."""
    return state_out(coordinator)


@app.post("/api/search", response_model=LookupStateOut)
async def api_search(q: str = Query("", max_length=255), coordinator: LookupCoordinator = Depends(get_coordinator)):
    """Look up a place by name. Blank input is rejected without a lookup."""
    try:
        await coordinator.search_by_name(q)
    except EmptySearchError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return state_out(coordinator)


@app.post("/api/location", response_model=LookupStateOut)
async def api_location(payload: CoordinatesIn, coordinator: LookupCoordinator = Depends(get_coordinator)):
    """Look up the position the browser reported."""
    await coordinator.search_by_coords(payload.latitude, payload.longitude)
    return state_out(coordinator)


@app.get("/api/history", response_model=HistoryOut)
async def api_history(coordinator: LookupCoordinator = Depends(get_coordinator)):
    """Recent searches, most recent first."""
    return HistoryOut(history=coordinator.history)


@app.delete("/api/history", response_model=HistoryOut)
async def api_clear_history(coordinator: LookupCoordinator = Depends(get_coordinator)):
    return HistoryOut(history=coordinator.clear_history())
