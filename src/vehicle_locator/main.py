"""FastAPI application entry point."""

from __future__ import annotations

import logging
from datetime import timedelta

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.routes import geocoding, health, vehicles
from .config import settings
from .data.vehicle_store import VehicleStore
from .services.geocoding.cache import CoordinateCache
from .services.geocoding.provider import GoogleGeocodingClient
from .services.geocoding.resolver import GeocodeResolver, build_resolver


def build_default_resolver() -> GeocodeResolver:
    cache = CoordinateCache(
        ttl=timedelta(hours=settings.geocode_cache_ttl_hours),
        fallback_ttl_ratio=settings.fallback_cache_ttl_ratio,
    )
    return build_resolver(
        cache=cache,
        client=GoogleGeocodingClient(),
        batch_limit=settings.batch_max_zips,
        batch_delay_seconds=settings.batch_delay_seconds,
    )


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("query", "path", "body"))
    detail = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": f"{field}: {detail}" if field else detail},
    )


def create_app(
    resolver: GeocodeResolver | None = None,
    vehicle_store: VehicleStore | None = None,
) -> FastAPI:
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(title=settings.app_name, root_path="")
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if vehicle_store is None:
        from .data.repository import get_vehicle_store

        vehicle_store = get_vehicle_store()
    # One cache per process; it only ever speeds lookups up and can be rebuilt empty.
    app.state.resolver = resolver if resolver is not None else build_default_resolver()
    app.state.vehicle_store = vehicle_store

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)

    # Root endpoint for diagnostics
    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(geocoding.router, prefix=settings.api_prefix)
    app.include_router(vehicles.router, prefix=settings.api_prefix)
    return app


app = create_app()
