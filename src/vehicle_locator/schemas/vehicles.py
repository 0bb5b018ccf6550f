"""Vehicle listing API schemas."""

from __future__ import annotations

import dataclasses
from typing import List, Optional

from pydantic import BaseModel, field_validator

from ..models.domain import RankedVehicle, Vehicle


class VehicleModel(BaseModel):
    id: int
    year: int
    make: str
    model: str
    trim: str
    body_style: str
    fuel_type: str
    transmission: str
    drivetrain: str
    exterior_color: str
    interior_color: str
    doors: int
    price: float
    mileage: int
    condition: str
    certified: bool
    title_status: str
    seller_account_number: str
    seller_type: str
    seller_latitude: Optional[float] = None
    seller_longitude: Optional[float] = None
    seller_name: Optional[str] = None
    seller_city: Optional[str] = None
    seller_state: Optional[str] = None
    seller_phone: Optional[str] = None
    distance_miles: Optional[float] = None

    @classmethod
    def from_vehicle(cls, vehicle: Vehicle, distance_miles: float | None = None) -> "VehicleModel":
        return cls(**dataclasses.asdict(vehicle), distance_miles=distance_miles)

    @classmethod
    def from_ranked(cls, ranked: RankedVehicle) -> "VehicleModel":
        return cls.from_vehicle(ranked.vehicle, distance_miles=round(ranked.distance_miles, 2))


class PaginationMeta(BaseModel):
    totalRecords: int
    totalPages: int
    currentPage: int
    pageSize: int
    hasNextPage: bool
    hasPreviousPage: bool

    @classmethod
    def build(cls, total: int, page: int, page_size: int) -> "PaginationMeta":
        total_pages = (total + page_size - 1) // page_size if total else 0
        return cls(
            totalRecords=total,
            totalPages=total_pages,
            currentPage=page,
            pageSize=page_size,
            hasNextPage=page < total_pages,
            hasPreviousPage=page > 1,
        )


class SearchLocationModel(BaseModel):
    lat: float
    lng: float
    radius: float
    zip: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    source: Optional[str] = None


class VehicleListResponse(BaseModel):
    success: bool = True
    data: List[VehicleModel]
    meta: PaginationMeta
    location: Optional[SearchLocationModel] = None
    message: Optional[str] = None


class VehicleDetailResponse(BaseModel):
    success: bool = True
    data: VehicleModel


class SyncCoordinatesRequest(BaseModel):
    accountNumber: Optional[str] = None

    @field_validator("accountNumber")
    @classmethod
    def _blank_means_all_sellers(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


class SyncCoordinatesResponse(BaseModel):
    success: bool = True
    updated: int
    accountNumber: Optional[str] = None
