"""Request-scoped access to the services owned by the application."""

from __future__ import annotations

from fastapi import Request

from ..data.vehicle_store import VehicleStore
from ..services.geocoding.resolver import GeocodeResolver


def get_resolver(request: Request) -> GeocodeResolver:
    return request.app.state.resolver


def get_vehicle_store(request: Request) -> VehicleStore:
    return request.app.state.vehicle_store
