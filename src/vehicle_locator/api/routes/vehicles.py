"""Vehicle listing endpoints, with optional radius search."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from ...config import settings
from ...data.vehicle_store import VehicleStore
from ...models.domain import Location
from ...schemas.vehicles import (
    PaginationMeta,
    SearchLocationModel,
    SyncCoordinatesRequest,
    SyncCoordinatesResponse,
    VehicleDetailResponse,
    VehicleListResponse,
    VehicleModel,
)
from ...services.geocoding.errors import InvalidZipFormat, ZipNotFound
from ...services.geocoding.resolver import GeocodeResolver
from ...services.vehicles.errors import InvalidRadiusQuery
from ...services.vehicles.filters import VehicleFilters
from ...services.vehicles.radius_search import RadiusQuery, RadiusSearchEngine
from ...services.vehicles.sync import sync_seller_coordinates
from ..dependencies import get_resolver, get_vehicle_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


def _validation_message(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"Invalid filter {location}: {first.get('msg')}" if location else str(first.get("msg"))


@router.get("", response_model=VehicleListResponse, status_code=status.HTTP_200_OK)
async def list_vehicles(
    page: int = Query(default=1, description="1-based page index"),
    page_size: int = Query(default=settings.default_page_size, alias="pageSize"),
    make: Optional[str] = Query(default=None, description="Comma-separated makes"),
    model: Optional[str] = Query(default=None, description="Comma-separated models"),
    condition: Optional[str] = Query(default=None, description="Comma-separated conditions"),
    body_style: Optional[str] = Query(default=None, alias="bodyStyle"),
    fuel_type: Optional[str] = Query(default=None, alias="fuelType"),
    transmission: Optional[str] = Query(default=None),
    drivetrain: Optional[str] = Query(default=None),
    seller_type: Optional[str] = Query(default=None, alias="sellerType"),
    year: Optional[int] = Query(default=None),
    min_price: Optional[float] = Query(default=None, alias="minPrice"),
    max_price: Optional[float] = Query(default=None, alias="maxPrice"),
    max_mileage: Optional[int] = Query(default=None, alias="maxMileage"),
    certified: Optional[bool] = Query(default=None),
    lat: Optional[float] = Query(default=None, description="Search center latitude"),
    lng: Optional[float] = Query(default=None, description="Search center longitude"),
    radius: Optional[float] = Query(default=None, description="Search radius in miles"),
    zip_code: Optional[str] = Query(default=None, alias="zip", description="ZIP code used as search center"),
    store: VehicleStore = Depends(get_vehicle_store),
    resolver: GeocodeResolver = Depends(get_resolver),
) -> VehicleListResponse:
    """List vehicles; ranks by distance when a search center and radius are given.

    The center comes from ``lat``/``lng`` or, failing that, from ``zip``. A ZIP
    that cannot be resolved disables the distance filter instead of failing.
    """
    if page < 1:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Page number must be greater than 0")
    if page_size < 1 or page_size > settings.max_page_size:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Page size must be between 1 and {settings.max_page_size}",
        )

    try:
        filters = VehicleFilters.from_query(
            {
                "make": make,
                "model": model,
                "condition": condition,
                "bodyStyle": body_style,
                "fuelType": fuel_type,
                "transmission": transmission,
                "drivetrain": drivetrain,
                "sellerType": seller_type,
                "year": year,
                "minPrice": min_price,
                "maxPrice": max_price,
                "maxMileage": max_mileage,
                "certified": certified,
            }
        )
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_validation_message(exc)) from exc

    center: Location | None = None
    location_meta: SearchLocationModel | None = None
    message: str | None = None
    if radius is not None and lat is not None and lng is not None:
        center = Location(latitude=lat, longitude=lng)
        location_meta = SearchLocationModel(lat=lat, lng=lng, radius=radius)
    elif radius is not None and zip_code:
        try:
            resolution = await resolver.resolve(zip_code)
        except InvalidZipFormat as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        except ZipNotFound as exc:
            logger.info(f"Radius filter disabled: {exc}")
            message = f"{exc} Showing vehicles from all locations."
        else:
            center = resolution.location
            location_meta = SearchLocationModel(
                lat=center.latitude,
                lng=center.longitude,
                radius=radius,
                zip=resolution.zip,
                city=center.city,
                state=center.state,
                source=resolution.source.value,
            )

    try:
        if center is not None:
            query = RadiusQuery(center=center, radius_miles=radius, filters=filters, page=page, page_size=page_size)
            result = await run_in_threadpool(RadiusSearchEngine(store).search, query)
            items = [VehicleModel.from_ranked(ranked) for ranked in result.vehicles]
            total = result.total
        else:
            vehicles, total = await run_in_threadpool(
                store.list_vehicles, filters, (page - 1) * page_size, page_size
            )
            items = [VehicleModel.from_vehicle(vehicle) for vehicle in vehicles]
    except InvalidRadiusQuery as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error listing vehicles: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from exc

    return VehicleListResponse(
        data=items,
        meta=PaginationMeta.build(total=total, page=page, page_size=page_size),
        location=location_meta,
        message=message,
    )


@router.post("/sync-coordinates", response_model=SyncCoordinatesResponse, status_code=status.HTTP_200_OK)
def sync_coordinates(
    payload: SyncCoordinatesRequest | None = Body(default=None),
    store: VehicleStore = Depends(get_vehicle_store),
) -> SyncCoordinatesResponse:
    """Copy seller coordinates onto vehicles for one seller, or all when no account is given."""
    account_number = payload.accountNumber if payload is not None else None
    try:
        updated = sync_seller_coordinates(store, account_number)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to sync seller coordinates: {exc}",
        ) from exc
    return SyncCoordinatesResponse(updated=updated, accountNumber=account_number)


@router.get("/{vehicle_id}", response_model=VehicleDetailResponse, status_code=status.HTTP_200_OK)
def get_vehicle(vehicle_id: int, store: VehicleStore = Depends(get_vehicle_store)) -> VehicleDetailResponse:
    if vehicle_id < 1:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid vehicle ID")
    try:
        vehicle = store.get_vehicle(vehicle_id)
    except Exception as exc:
        logging.exception(f"Error fetching vehicle {vehicle_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from exc
    if vehicle is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vehicle not found")
    return VehicleDetailResponse(data=VehicleModel.from_vehicle(vehicle))
