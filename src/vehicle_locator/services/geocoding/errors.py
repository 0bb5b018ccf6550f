"""Geocoding error taxonomy."""

from __future__ import annotations

from enum import Enum


class GeocodingError(Exception):
    """Base class for geocoding failures that reach callers."""


class InvalidZipFormat(GeocodingError):
    def __init__(self, zip_code: object) -> None:
        self.zip_code = zip_code
        super().__init__(
            "Invalid ZIP code format. Use 5 digits (e.g., 98498) or 9 digits (e.g., 98498-1234)"
        )


class ZipNotFound(GeocodingError):
    def __init__(self, zip_code: str) -> None:
        self.zip_code = zip_code
        super().__init__(f"ZIP code {zip_code} not found. Please verify the ZIP code is valid.")


class InvalidBatch(GeocodingError):
    """Batch request rejected before any lookup is attempted."""


class BatchTooLarge(InvalidBatch):
    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"Maximum {limit} ZIP codes allowed per batch request")


class ProviderFailure(str, Enum):
    MISSING_CREDENTIAL = "missing_credential"
    HTTP_STATUS = "http_status"
    NO_RESULTS = "no_results"
    MALFORMED_PAYLOAD = "malformed_payload"
    NETWORK = "network"


class ProviderUnavailable(Exception):
    """Raised by the provider client; absorbed by the resolver and never surfaced."""

    def __init__(self, reason: ProviderFailure, message: str) -> None:
        self.reason = reason
        super().__init__(message)

    @property
    def is_network_error(self) -> bool:
        return self.reason is ProviderFailure.NETWORK
