"""ZIP code geocoding endpoints."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Body, Depends, HTTPException, status

from ...schemas.geocoding import (
    BatchGeocodeItem,
    BatchGeocodeMeta,
    BatchGeocodeRequest,
    BatchGeocodeResponse,
    CacheClearResponse,
    CacheEntryModel,
    CacheStatsData,
    CacheStatsResponse,
    GeocodeData,
    GeocodeHealthResponse,
    GeocodeMeta,
    GeocodeResponse,
    HealthTestResult,
)
from ...services.geocoding.errors import GeocodingError, InvalidBatch, InvalidZipFormat, ZipNotFound
from ...services.geocoding.resolver import GeocodeResolver
from ..dependencies import get_resolver

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/geocode", tags=["geocoding"])

HEALTH_TEST_ZIP = "98498"


@router.get("/health", response_model=GeocodeHealthResponse, status_code=status.HTTP_200_OK)
async def geocoding_health(resolver: GeocodeResolver = Depends(get_resolver)) -> GeocodeHealthResponse:
    """Report provider availability and run a live resolution of a known ZIP."""
    provider_enabled = resolver.provider_enabled
    try:
        resolution = await resolver.resolve(HEALTH_TEST_ZIP)
        test_result = HealthTestResult(
            **GeocodeData.from_location(resolution.location).model_dump(), source=resolution.source.value
        )
    except GeocodingError as exc:
        logger.warning(f"Geocoding health test for {HEALTH_TEST_ZIP} failed: {exc}")
        test_result = None
    except Exception as exc:
        logging.exception(f"Geocoding service health check failed: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Geocoding service health check failed",
        ) from exc

    return GeocodeHealthResponse(
        message="Geocoding service healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        googleMapsApiEnabled=provider_enabled,
        testZip=HEALTH_TEST_ZIP,
        testResult=test_result,
        fallbackZips=resolver.fallback_size,
        cacheSize=len(resolver.cache),
        capabilities=(
            "Google Maps API + Fallback coordinates + Caching"
            if provider_enabled
            else "Fallback coordinates only + Caching"
        ),
    )


@router.get("/cache/stats", response_model=CacheStatsResponse, status_code=status.HTTP_200_OK)
async def get_cache_stats(resolver: GeocodeResolver = Depends(get_resolver)) -> CacheStatsResponse:
    cache = resolver.cache
    now = datetime.now(timezone.utc)
    entries = [
        CacheEntryModel(
            zip=entry.zip,
            city=entry.location.city,
            state=entry.location.state,
            source=entry.source.value,
            cachedAt=entry.resolved_at.isoformat(),
            ageSeconds=round((now - entry.resolved_at).total_seconds(), 3),
            expired=cache.is_expired(entry, now),
        )
        for entry in cache.entries()
    ]
    return CacheStatsResponse(data=CacheStatsData(totalCached=len(entries), entries=entries))


@router.delete("/cache", response_model=CacheClearResponse, status_code=status.HTTP_200_OK)
async def clear_cache(resolver: GeocodeResolver = Depends(get_resolver)) -> CacheClearResponse:
    previous_size = resolver.cache.clear()
    logger.info(f"Geocoding cache cleared, removed {previous_size} entries")
    return CacheClearResponse(
        message=f"Geocoding cache cleared. Removed {previous_size} entries.",
        previousSize=previous_size,
        currentSize=len(resolver.cache),
    )


@router.post(
    "/batch",
    response_model=BatchGeocodeResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
)
async def geocode_batch(
    payload: BatchGeocodeRequest | None = Body(default=None),
    resolver: GeocodeResolver = Depends(get_resolver),
) -> BatchGeocodeResponse:
    """Resolve up to 50 ZIP codes sequentially; bad ZIPs become per-item errors."""
    zips = payload.zips if payload is not None else None
    try:
        outcome = await resolver.resolve_batch(zips)
    except InvalidBatch as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error in batch geocoding: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error while batch geocoding",
        ) from exc

    items = []
    for item in outcome.items:
        resolution = item.resolution
        items.append(
            BatchGeocodeItem(
                zip=item.zip,
                success=item.success,
                data=GeocodeData.from_location(resolution.location) if resolution else None,
                source=resolution.source.value if resolution else None,
                error=item.error,
            )
        )
    return BatchGeocodeResponse(
        data=items,
        meta=BatchGeocodeMeta(
            totalProcessed=len(items),
            successful=outcome.successful,
            failed=outcome.failed,
        ),
    )


@router.get("/{zip_code}", response_model=GeocodeResponse, status_code=status.HTTP_200_OK)
async def geocode_zip(zip_code: str, resolver: GeocodeResolver = Depends(get_resolver)) -> GeocodeResponse:
    """Convert a 5 or 9 digit ZIP code to coordinates."""
    try:
        resolution = await resolver.resolve(zip_code)
    except InvalidZipFormat as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except ZipNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error geocoding ZIP {zip_code}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error while geocoding ZIP code",
        ) from exc

    return GeocodeResponse(
        data=GeocodeData.from_location(resolution.location),
        meta=GeocodeMeta(source=resolution.source.value, cached=resolution.cached),
    )
