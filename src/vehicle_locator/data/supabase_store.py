"""Supabase-backed vehicle and seller storage."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from supabase import Client

from ..models.domain import Seller, SellerType, Vehicle
from ..services.geospatial import BoundingBox
from ..services.vehicles.filters import VehicleFilters
from .vehicle_store import DENORMALIZED_SELLER_FIELDS

logger = logging.getLogger(__name__)

VEHICLES_TABLE = "vehicles"
SELLERS_TABLE = "sellers"
# PostgREST caps rows per response; bounding-box reads are paged in chunks of this size.
FETCH_CHUNK_SIZE = 1000

_VEHICLE_COLUMNS = tuple(Vehicle.__dataclass_fields__)
_LISTING_COLUMNS = tuple(
    column for column in _VEHICLE_COLUMNS if column not in DENORMALIZED_SELLER_FIELDS.values()
)


def _row_to_vehicle(row: dict[str, Any]) -> Vehicle:
    values = {column: row.get(column) for column in _VEHICLE_COLUMNS}
    for column in ("seller_latitude", "seller_longitude"):
        if values[column] is not None:
            values[column] = float(values[column])
    values["price"] = float(values["price"] or 0)
    values["certified"] = bool(values["certified"])
    return Vehicle(**values)


def _row_to_seller(row: dict[str, Any]) -> Seller:
    latitude = row.get("latitude")
    longitude = row.get("longitude")
    return Seller(
        account_number=str(row["account_number"]),
        name=row.get("name") or "",
        type=SellerType(row.get("type") or SellerType.DEALER.value),
        phone=row.get("phone") or "",
        city=row.get("city") or "",
        state=row.get("state") or "",
        zip=row.get("zip") or "",
        latitude=float(latitude) if latitude is not None else None,
        longitude=float(longitude) if longitude is not None else None,
        email=row.get("email"),
        address=row.get("address"),
    )


def _apply_filters(query, filters: VehicleFilters):
    for column, values in filters.multi_value_filters().items():
        query = query.in_(column, values)
    if filters.year is not None:
        query = query.eq("year", filters.year)
    if filters.min_price is not None:
        query = query.gte("price", filters.min_price)
    if filters.max_price is not None:
        query = query.lte("price", filters.max_price)
    if filters.max_mileage is not None:
        query = query.lte("mileage", filters.max_mileage)
    if filters.certified is not None:
        query = query.eq("certified", filters.certified)
    return query


def _apply_bounding_box(query, box: BoundingBox):
    query = query.gte("seller_latitude", box.min_lat).lte("seller_latitude", box.max_lat)
    if box.spans_all_longitudes:
        return query.not_.is_("seller_longitude", "null")
    ranges = box.longitude_ranges()
    if len(ranges) == 1:
        low, high = ranges[0]
        return query.gte("seller_longitude", low).lte("seller_longitude", high)
    # window wraps the antimeridian
    clauses = ",".join(
        f"and(seller_longitude.gte.{low},seller_longitude.lte.{high})" for low, high in ranges
    )
    return query.or_(clauses)


class SupabaseVehicleStore:
    """Vehicle store over the ``vehicles`` and ``sellers`` tables.

    Coordinate sync calls the ``sync_seller_coordinates`` database function
    (see ``db/sql/sync_seller_coordinates.sql``) so the copy is one set-based
    UPDATE rather than a row-by-row loop.
    """

    def __init__(self, client: Client) -> None:
        self.client = client

    def find_in_bounding_box(self, box: BoundingBox, filters: VehicleFilters) -> list[Vehicle]:
        vehicles: list[Vehicle] = []
        start = 0
        while True:
            query = self.client.table(VEHICLES_TABLE).select("*")
            query = _apply_filters(_apply_bounding_box(query, box), filters)
            response = query.order("id").range(start, start + FETCH_CHUNK_SIZE - 1).execute()
            rows = response.data or []
            vehicles.extend(_row_to_vehicle(row) for row in rows)
            if len(rows) < FETCH_CHUNK_SIZE:
                break
            start += FETCH_CHUNK_SIZE
        return vehicles

    def list_vehicles(self, filters: VehicleFilters, offset: int, limit: int) -> tuple[list[Vehicle], int]:
        query = _apply_filters(self.client.table(VEHICLES_TABLE).select("*", count="exact"), filters)
        response = query.order("id").range(offset, offset + limit - 1).execute()
        rows = response.data or []
        total = response.count if response.count is not None else len(rows)
        return [_row_to_vehicle(row) for row in rows], total

    def get_vehicle(self, vehicle_id: int) -> Optional[Vehicle]:
        response = self.client.table(VEHICLES_TABLE).select("*").eq("id", vehicle_id).limit(1).execute()
        rows = response.data or []
        return _row_to_vehicle(rows[0]) if rows else None

    def count_vehicles(self) -> int:
        response = self.client.table(VEHICLES_TABLE).select("id", count="exact").limit(1).execute()
        return response.count or 0

    def get_seller(self, account_number: str) -> Optional[Seller]:
        response = (
            self.client.table(SELLERS_TABLE).select("*").eq("account_number", account_number).limit(1).execute()
        )
        rows = response.data or []
        return _row_to_seller(rows[0]) if rows else None

    def list_sellers(self) -> list[Seller]:
        response = self.client.table(SELLERS_TABLE).select("*").execute()
        return [_row_to_seller(row) for row in response.data or []]

    def upsert_sellers(self, sellers: Iterable[Seller]) -> int:
        rows = [
            {
                "account_number": seller.account_number,
                "name": seller.name,
                "type": seller.type.value,
                "phone": seller.phone,
                "email": seller.email,
                "address": seller.address,
                "city": seller.city,
                "state": seller.state,
                "zip": seller.zip,
                "latitude": seller.latitude,
                "longitude": seller.longitude,
            }
            for seller in sellers
        ]
        if not rows:
            return 0
        self.client.table(SELLERS_TABLE).upsert(rows, on_conflict="account_number").execute()
        return len(rows)

    def upsert_vehicles(self, vehicles: Iterable[Vehicle]) -> int:
        rows = [{column: getattr(vehicle, column) for column in _LISTING_COLUMNS} for vehicle in vehicles]
        if not rows:
            return 0
        for start in range(0, len(rows), FETCH_CHUNK_SIZE):
            chunk = rows[start : start + FETCH_CHUNK_SIZE]
            self.client.table(VEHICLES_TABLE).upsert(chunk, on_conflict="id").execute()
        return len(rows)

    def sync_seller_coordinates(self, account_number: Optional[str] = None) -> int:
        response = self.client.rpc("sync_seller_coordinates", {"p_account_number": account_number}).execute()
        data = response.data
        if isinstance(data, list):
            data = data[0] if data else 0
        return int(data or 0)
