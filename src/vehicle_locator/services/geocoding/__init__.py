"""ZIP code geocoding with caching and fallback coordinates."""

from .cache import CoordinateCache
from .errors import BatchTooLarge, GeocodingError, InvalidBatch, InvalidZipFormat, ProviderUnavailable, ZipNotFound
from .provider import GoogleGeocodingClient
from .resolver import GeocodeResolver, Resolution, build_resolver, normalize_zip

__all__ = [
    "BatchTooLarge",
    "CoordinateCache",
    "GeocodeResolver",
    "GeocodingError",
    "GoogleGeocodingClient",
    "InvalidBatch",
    "InvalidZipFormat",
    "ProviderUnavailable",
    "Resolution",
    "ZipNotFound",
    "build_resolver",
    "normalize_zip",
]
