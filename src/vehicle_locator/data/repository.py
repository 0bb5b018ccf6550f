"""Vehicle store selection: database first, falling back to mock inventory."""

from __future__ import annotations

import functools
import logging

from ..config import settings
from ..db.supabase import get_supabase_client
from .sample_inventory import generate_inventory
from .supabase_store import SupabaseVehicleStore
from .vehicle_store import InMemoryVehicleStore, VehicleStore

logger = logging.getLogger(__name__)


def build_mock_store(vehicle_count: int | None = None, seed: int | None = None) -> InMemoryVehicleStore:
    count = settings.mock_inventory_size if vehicle_count is None else vehicle_count
    sellers, vehicles = generate_inventory(count, seed=settings.mock_inventory_seed if seed is None else seed)
    store = InMemoryVehicleStore(sellers=sellers, vehicles=vehicles)
    store.sync_seller_coordinates()
    logger.info(f"Using mock inventory with {count} vehicles from {len(sellers)} sellers")
    return store


@functools.lru_cache(maxsize=1)
def get_vehicle_store() -> VehicleStore:
    """Supabase store when configured, otherwise an in-memory mock inventory."""

    client = get_supabase_client()
    if client is not None:
        return SupabaseVehicleStore(client)
    return build_mock_store()
