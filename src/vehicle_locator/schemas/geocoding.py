"""Pydantic request/response models for geocoding endpoints."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field

from ..models.domain import Location


class GeocodeData(BaseModel):
    lat: float
    lng: float
    city: str
    state: str

    @classmethod
    def from_location(cls, location: Location) -> "GeocodeData":
        return cls(lat=location.latitude, lng=location.longitude, city=location.city, state=location.state)


class GeocodeMeta(BaseModel):
    source: str
    cached: bool


class GeocodeResponse(BaseModel):
    success: bool = True
    data: GeocodeData
    meta: GeocodeMeta


class BatchGeocodeRequest(BaseModel):
    # Left untyped so a missing or malformed list is answered with 400, not 422.
    zips: Any = Field(default=None, description="ZIP codes to resolve (max 50).")


class BatchGeocodeItem(BaseModel):
    zip: Any
    success: bool
    data: Optional[GeocodeData] = None
    source: Optional[str] = None
    error: Optional[str] = None


class BatchGeocodeMeta(BaseModel):
    totalProcessed: int
    successful: int
    failed: int


class BatchGeocodeResponse(BaseModel):
    success: bool = True
    data: List[BatchGeocodeItem]
    meta: BatchGeocodeMeta


class HealthTestResult(GeocodeData):
    source: str


class GeocodeHealthResponse(BaseModel):
    success: bool = True
    message: str
    timestamp: str
    googleMapsApiEnabled: bool
    testZip: str
    testResult: Optional[HealthTestResult] = None
    fallbackZips: int
    cacheSize: int
    capabilities: str


class CacheEntryModel(BaseModel):
    zip: str
    city: str
    state: str
    source: str
    cachedAt: str
    ageSeconds: float
    expired: bool


class CacheStatsData(BaseModel):
    totalCached: int
    entries: List[CacheEntryModel]


class CacheStatsResponse(BaseModel):
    success: bool = True
    data: CacheStatsData


class CacheClearResponse(BaseModel):
    success: bool = True
    message: str
    previousSize: int
    currentSize: int
