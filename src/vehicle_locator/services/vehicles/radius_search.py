"""Proximity search over vehicle listings."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from ...data.vehicle_store import VehicleStore
from ...models.domain import Location, RankedVehicle
from ..geospatial import bounding_box, haversine_miles
from .errors import InvalidRadiusQuery
from .filters import VehicleFilters

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


@dataclass(slots=True)
class RadiusQuery:
    center: Location
    radius_miles: float
    filters: VehicleFilters = field(default_factory=VehicleFilters)
    page: int = 1
    page_size: int = 20

    def __post_init__(self) -> None:
        if not math.isfinite(self.radius_miles) or self.radius_miles <= 0:
            raise InvalidRadiusQuery("Radius must be a positive number of miles.")
        if not -90.0 <= self.center.latitude <= 90.0 or not -180.0 <= self.center.longitude <= 180.0:
            raise InvalidRadiusQuery("Search center is outside valid latitude/longitude bounds.")
        if self.page < 1:
            raise InvalidRadiusQuery("Page number must be greater than 0")
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise InvalidRadiusQuery(f"Page size must be between 1 and {MAX_PAGE_SIZE}")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(slots=True)
class SearchResult:
    vehicles: list[RankedVehicle]
    total: int


class RadiusSearchEngine:
    """Two-stage radius search.

    The store narrows candidates to a lat/lng bounding box (plus attribute
    filters); exact great-circle distances are then computed only for those
    survivors, trimmed to the radius and ranked nearest first.
    """

    def __init__(self, store: VehicleStore) -> None:
        self.store = store

    def search(self, query: RadiusQuery) -> SearchResult:
        center = query.center
        box = bounding_box(center.latitude, center.longitude, query.radius_miles)

        try:
            candidates = self.store.find_in_bounding_box(box, query.filters)
        except Exception:
            logger.exception(
                f"search_vehicles_within_radius failed: center=({center.latitude}, {center.longitude}) "
                f"radius={query.radius_miles}mi page={query.page}"
            )
            raise

        ranked: list[RankedVehicle] = []
        for vehicle in candidates:
            if not vehicle.has_coordinates:
                continue
            distance = haversine_miles(
                center.latitude, center.longitude, vehicle.seller_latitude, vehicle.seller_longitude
            )
            if distance <= query.radius_miles:
                ranked.append(RankedVehicle(vehicle=vehicle, distance_miles=distance))

        ranked.sort(key=lambda item: (item.distance_miles, item.vehicle.id))
        logger.debug(
            f"Radius search kept {len(ranked)} of {len(candidates)} bounding-box candidates "
            f"within {query.radius_miles}mi of ({center.latitude}, {center.longitude})"
        )
        page = ranked[query.offset : query.offset + query.page_size]
        return SearchResult(vehicles=page, total=len(ranked))
