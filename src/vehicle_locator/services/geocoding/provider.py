"""HTTP client for the Google Maps Geocoding API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ...config import settings
from ...models.domain import UNKNOWN, Location
from .errors import ProviderFailure, ProviderUnavailable

logger = logging.getLogger(__name__)


class GoogleGeocodingClient:
    """Resolves ZIP codes through the Google geocoder, one attempt per call.

    Every failure mode (no key, bad status, empty result, broken payload,
    network trouble or timeout) is reported as ``ProviderUnavailable``.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.google_maps_api_key
        self.base_url = base_url or settings.geocoding_base_url
        self.timeout = timeout if timeout is not None else settings.geocoding_timeout_seconds
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 10.0)),
            transport=self._transport,
        )

    async def geocode(self, zip_code: str) -> Location:
        if not self.api_key:
            raise ProviderUnavailable(ProviderFailure.MISSING_CREDENTIAL, "Geocoding API key is not configured.")

        params = {"address": zip_code, "key": self.api_key}
        try:
            async with self._get_client() as client:
                response = await client.get(self.base_url, params=params)
        except httpx.TimeoutException as exc:
            raise ProviderUnavailable(
                ProviderFailure.NETWORK, f"Geocoding request for {zip_code} timed out after {self.timeout}s"
            ) from exc
        except (httpx.TransportError, OSError) as exc:
            raise ProviderUnavailable(ProviderFailure.NETWORK, f"Geocoding network error: {exc}") from exc
        except httpx.DecodingError as exc:
            raise ProviderUnavailable(
                ProviderFailure.MALFORMED_PAYLOAD, f"Geocoding response could not be decoded: {exc}"
            ) from exc
        except httpx.TooManyRedirects as exc:
            raise ProviderUnavailable(ProviderFailure.HTTP_STATUS, f"Geocoding API redirect loop: {exc}") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise ProviderUnavailable(ProviderFailure.NETWORK, f"Geocoding request failed: {exc}") from exc

        if not response.is_success:
            raise ProviderUnavailable(
                ProviderFailure.HTTP_STATUS,
                f"Geocoding API error: {response.status_code} {response.reason_phrase}",
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderUnavailable(ProviderFailure.MALFORMED_PAYLOAD, "Geocoding response is not JSON.") from exc

        return _parse_payload(zip_code, payload)


def _parse_payload(zip_code: str, payload: Any) -> Location:
    if not isinstance(payload, dict):
        raise ProviderUnavailable(ProviderFailure.MALFORMED_PAYLOAD, "Geocoding response is not an object.")

    status = payload.get("status")
    results = payload.get("results") or []
    if status != "OK" or not results:
        message = payload.get("error_message") or "No results found"
        raise ProviderUnavailable(ProviderFailure.NO_RESULTS, f"Geocoding API: {status} - {message}")

    try:
        result = results[0]
        point = result["geometry"]["location"]
        latitude = float(point["lat"])
        longitude = float(point["lng"])
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        raise ProviderUnavailable(
            ProviderFailure.MALFORMED_PAYLOAD, f"Geocoding result for {zip_code} has no usable geometry."
        ) from exc

    city, state = _city_and_state(result.get("address_components"))

    logger.info(f"Geocoded {zip_code} to {city or UNKNOWN}, {state or UNKNOWN}")
    return Location(latitude=latitude, longitude=longitude, city=city or UNKNOWN, state=state or UNKNOWN)


def _city_and_state(components: Any) -> tuple[str, str]:
    """First locality long name and first state short name; entries that are not objects are skipped."""
    city = ""
    state = ""
    if not isinstance(components, list):
        return city, state
    for component in components:
        if not isinstance(component, dict):
            continue
        types = component.get("types")
        if not isinstance(types, list):
            continue
        if not city and "locality" in types:
            city = str(component.get("long_name") or "")
        elif not state and "administrative_area_level_1" in types:
            state = str(component.get("short_name") or "")
    return city, state
