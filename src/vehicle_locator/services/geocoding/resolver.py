"""ZIP code resolution through cache, provider and fallback table."""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import Protocol, Sequence

from ...models.domain import Location, LocationSource
from .cache import CoordinateCache
from .errors import (
    BatchTooLarge,
    InvalidBatch,
    InvalidZipFormat,
    ProviderFailure,
    ProviderUnavailable,
    ZipNotFound,
)
from .fallback import FALLBACK_ZIP_COORDINATES, GEOGRAPHIC_CENTER
from .provider import GoogleGeocodingClient

logger = logging.getLogger(__name__)

ZIP_PATTERN = re.compile(r"[0-9]{5}(-[0-9]{4})?")
DEFAULT_BATCH_LIMIT = 50
DEFAULT_BATCH_DELAY_SECONDS = 0.1


def normalize_zip(raw: object) -> str:
    """Validate a 5 or 9 digit ZIP and return its 5-digit prefix."""

    if not isinstance(raw, str) or not ZIP_PATTERN.fullmatch(raw):
        raise InvalidZipFormat(raw)
    return raw[:5]


@dataclass(slots=True)
class ResolutionAttempt:
    """Per-call scratchpad shared by the strategies of one resolution."""

    zip: str
    provider_failure: ProviderUnavailable | None = None


class ResolutionStrategy(Protocol):
    source: LocationSource

    async def lookup(self, zip_code: str, attempt: ResolutionAttempt) -> Location | None:
        ...


class ProviderStrategy:
    source = LocationSource.PROVIDER

    def __init__(self, client: GoogleGeocodingClient) -> None:
        self.client = client

    @property
    def enabled(self) -> bool:
        return self.client.enabled

    async def lookup(self, zip_code: str, attempt: ResolutionAttempt) -> Location | None:
        if not self.enabled:
            attempt.provider_failure = ProviderUnavailable(
                ProviderFailure.MISSING_CREDENTIAL, "Geocoding API key is not configured."
            )
            logger.debug(f"Geocoding provider disabled, skipping lookup for {zip_code}")
            return None
        try:
            return await self.client.geocode(zip_code)
        except ProviderUnavailable as exc:
            attempt.provider_failure = exc
            logger.warning(f"Geocoding provider unavailable for {zip_code} ({exc.reason.value}): {exc}")
            return None
        except Exception as exc:
            logger.exception(f"Unexpected geocoding provider error for {zip_code}: {exc}")
            attempt.provider_failure = ProviderUnavailable(ProviderFailure.MALFORMED_PAYLOAD, str(exc))
            return None


class FallbackTableStrategy:
    source = LocationSource.FALLBACK

    def __init__(self, table=FALLBACK_ZIP_COORDINATES, sentinel: Location | None = GEOGRAPHIC_CENTER) -> None:
        self.table = table
        self.sentinel = sentinel

    def __len__(self) -> int:
        return len(self.table)

    async def lookup(self, zip_code: str, attempt: ResolutionAttempt) -> Location | None:
        location = self.table.get(zip_code)
        if location is not None:
            logger.warning(f"Using fallback coordinates for {zip_code}")
            return location
        failure = attempt.provider_failure
        if self.sentinel is not None and failure is not None and failure.is_network_error:
            logger.warning(f"Using default coordinates for unknown ZIP {zip_code} after network failure")
            return self.sentinel
        return None


@dataclass(frozen=True, slots=True)
class Resolution:
    zip: str
    location: Location
    source: LocationSource
    cached: bool


@dataclass(slots=True)
class BatchItem:
    zip: object
    success: bool
    resolution: Resolution | None = None
    error: str | None = None


@dataclass(slots=True)
class BatchOutcome:
    items: list[BatchItem] = field(default_factory=list)

    @property
    def successful(self) -> int:
        return sum(1 for item in self.items if item.success)

    @property
    def failed(self) -> int:
        return len(self.items) - self.successful


class GeocodeResolver:
    """Resolves ZIP codes by trying the cache, then each strategy in order.

    The first strategy to return a location wins and its answer is written back
    to the cache tagged with that strategy's source. Concurrent misses on the
    same ZIP may both reach the provider; the last write to the cache wins.
    """

    def __init__(
        self,
        cache: CoordinateCache,
        strategies: Sequence[ResolutionStrategy],
        batch_limit: int = DEFAULT_BATCH_LIMIT,
        batch_delay_seconds: float = DEFAULT_BATCH_DELAY_SECONDS,
    ) -> None:
        self.cache = cache
        self.strategies = list(strategies)
        self.batch_limit = batch_limit
        self.batch_delay_seconds = batch_delay_seconds

    @property
    def provider_enabled(self) -> bool:
        return any(
            isinstance(strategy, ProviderStrategy) and strategy.enabled for strategy in self.strategies
        )

    @property
    def fallback_size(self) -> int:
        return sum(len(strategy) for strategy in self.strategies if isinstance(strategy, FallbackTableStrategy))

    async def resolve(self, raw_zip: object) -> Resolution:
        zip_code = normalize_zip(raw_zip)

        entry = self.cache.get(zip_code)
        if entry is not None:
            logger.debug(f"Using cached result for {zip_code} ({entry.source.value})")
            return Resolution(zip=zip_code, location=entry.location, source=entry.source, cached=True)

        attempt = ResolutionAttempt(zip=zip_code)
        for strategy in self.strategies:
            location = await strategy.lookup(zip_code, attempt)
            if location is not None:
                self.cache.put(zip_code, location, strategy.source)
                return Resolution(zip=zip_code, location=location, source=strategy.source, cached=False)

        raise ZipNotFound(zip_code)

    async def resolve_batch(self, zips: Sequence[object]) -> BatchOutcome:
        """Resolve ZIPs one after another, pausing after provider calls.

        Malformed or unknown ZIPs become per-item errors. The batch itself is
        rejected up front when empty or larger than ``batch_limit``.
        """

        if not isinstance(zips, (list, tuple)) or not zips:
            raise InvalidBatch("Request body must contain 'zips' array with at least one ZIP code")
        if len(zips) > self.batch_limit:
            raise BatchTooLarge(self.batch_limit)

        outcome = BatchOutcome()
        for raw_zip in zips:
            try:
                resolution = await self.resolve(raw_zip)
            except InvalidZipFormat:
                outcome.items.append(BatchItem(zip=raw_zip, success=False, error="Invalid ZIP code format"))
                continue
            except ZipNotFound:
                outcome.items.append(BatchItem(zip=raw_zip, success=False, error="ZIP code not found"))
                continue

            outcome.items.append(BatchItem(zip=raw_zip, success=True, resolution=resolution))
            if resolution.source is LocationSource.PROVIDER and not resolution.cached and self.batch_delay_seconds:
                await asyncio.sleep(self.batch_delay_seconds)
        return outcome


def build_resolver(
    cache: CoordinateCache | None = None,
    client: GoogleGeocodingClient | None = None,
    batch_limit: int = DEFAULT_BATCH_LIMIT,
    batch_delay_seconds: float = DEFAULT_BATCH_DELAY_SECONDS,
) -> GeocodeResolver:
    """Default chain: provider first, then the static fallback table."""

    return GeocodeResolver(
        cache=cache if cache is not None else CoordinateCache(),
        strategies=[ProviderStrategy(client if client is not None else GoogleGeocodingClient()), FallbackTableStrategy()],
        batch_limit=batch_limit,
        batch_delay_seconds=batch_delay_seconds,
    )
