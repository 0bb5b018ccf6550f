"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...data.vehicle_store import InMemoryVehicleStore, VehicleStore
from ..dependencies import get_vehicle_store

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/store", status_code=status.HTTP_200_OK)
def health_store(store: VehicleStore = Depends(get_vehicle_store)) -> dict:
    """Check that the vehicle store answers a count query."""
    using_mock_data = isinstance(store, InMemoryVehicleStore)
    try:
        total = store.count_vehicles()
        return {"service": "vehicle_store", "healthy": True, "usingMockData": using_mock_data, "totalRecords": total}
    except Exception as e:
        return {"service": "vehicle_store", "healthy": False, "usingMockData": using_mock_data, "error": str(e)}
