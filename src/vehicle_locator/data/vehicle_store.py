"""Vehicle and seller storage interface with an in-process implementation."""

from __future__ import annotations

import dataclasses
import logging
import threading
from typing import Iterable, Optional, Protocol

from ..models.domain import Seller, Vehicle
from ..services.geospatial import BoundingBox
from ..services.vehicles.filters import VehicleFilters

logger = logging.getLogger(__name__)

# Vehicle columns copied from the owning seller by coordinate sync, keyed by seller attribute.
DENORMALIZED_SELLER_FIELDS: dict[str, str] = {
    "latitude": "seller_latitude",
    "longitude": "seller_longitude",
    "name": "seller_name",
    "city": "seller_city",
    "state": "seller_state",
    "phone": "seller_phone",
}


class VehicleStore(Protocol):
    def find_in_bounding_box(self, box: BoundingBox, filters: VehicleFilters) -> list[Vehicle]:
        """Vehicles with seller coordinates inside ``box`` that satisfy ``filters``."""
        ...

    def list_vehicles(self, filters: VehicleFilters, offset: int, limit: int) -> tuple[list[Vehicle], int]:
        ...

    def get_vehicle(self, vehicle_id: int) -> Optional[Vehicle]:
        ...

    def count_vehicles(self) -> int:
        ...

    def get_seller(self, account_number: str) -> Optional[Seller]:
        ...

    def list_sellers(self) -> list[Seller]:
        ...

    def upsert_sellers(self, sellers: Iterable[Seller]) -> int:
        ...

    def upsert_vehicles(self, vehicles: Iterable[Vehicle]) -> int:
        """Store listing fields; denormalized seller columns are left to coordinate sync."""
        ...

    def sync_seller_coordinates(self, account_number: Optional[str] = None) -> int:
        """Copy seller location data onto matching vehicles, returning the number of rows changed."""
        ...


class InMemoryVehicleStore:
    """Thread-safe dictionary-backed store used for mock inventory and tests."""

    def __init__(self, sellers: Iterable[Seller] = (), vehicles: Iterable[Vehicle] = ()) -> None:
        self._lock = threading.RLock()
        self._sellers: dict[str, Seller] = {}
        self._vehicles: dict[int, Vehicle] = {}
        self.upsert_sellers(sellers)
        self.upsert_vehicles(vehicles)

    def find_in_bounding_box(self, box: BoundingBox, filters: VehicleFilters) -> list[Vehicle]:
        with self._lock:
            candidates = list(self._vehicles.values())
        return [
            vehicle
            for vehicle in candidates
            if vehicle.has_coordinates
            and box.contains(vehicle.seller_latitude, vehicle.seller_longitude)
            and filters.matches(vehicle)
        ]

    def list_vehicles(self, filters: VehicleFilters, offset: int, limit: int) -> tuple[list[Vehicle], int]:
        with self._lock:
            ordered = sorted(self._vehicles.values(), key=lambda vehicle: vehicle.id)
        matching = [vehicle for vehicle in ordered if filters.matches(vehicle)]
        return matching[offset : offset + limit], len(matching)

    def get_vehicle(self, vehicle_id: int) -> Optional[Vehicle]:
        with self._lock:
            return self._vehicles.get(vehicle_id)

    def count_vehicles(self) -> int:
        with self._lock:
            return len(self._vehicles)

    def get_seller(self, account_number: str) -> Optional[Seller]:
        with self._lock:
            return self._sellers.get(account_number)

    def list_sellers(self) -> list[Seller]:
        with self._lock:
            return list(self._sellers.values())

    def upsert_sellers(self, sellers: Iterable[Seller]) -> int:
        count = 0
        with self._lock:
            for seller in sellers:
                self._sellers[seller.account_number] = dataclasses.replace(seller)
                count += 1
        return count

    def upsert_vehicles(self, vehicles: Iterable[Vehicle]) -> int:
        count = 0
        with self._lock:
            for vehicle in vehicles:
                existing = self._vehicles.get(vehicle.id)
                carried = {
                    column: getattr(existing, column) if existing else None
                    for column in DENORMALIZED_SELLER_FIELDS.values()
                }
                self._vehicles[vehicle.id] = dataclasses.replace(vehicle, **carried)
                count += 1
        return count

    def sync_seller_coordinates(self, account_number: Optional[str] = None) -> int:
        changed = 0
        # whole update applied under the lock so readers never see a partial sync
        with self._lock:
            if account_number is None:
                sellers = self._sellers
            else:
                seller = self._sellers.get(account_number)
                sellers = {account_number: seller} if seller else {}

            for vehicle_id, vehicle in list(self._vehicles.items()):
                seller = sellers.get(vehicle.seller_account_number)
                if seller is None:
                    continue
                updates = {
                    column: getattr(seller, attribute)
                    for attribute, column in DENORMALIZED_SELLER_FIELDS.items()
                }
                if all(getattr(vehicle, column) == value for column, value in updates.items()):
                    continue
                self._vehicles[vehicle_id] = dataclasses.replace(vehicle, **updates)
                changed += 1
        return changed
