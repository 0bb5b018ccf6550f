"""Geospatial helper functions."""

from __future__ import annotations

import math
from dataclasses import dataclass

EARTH_RADIUS_MILES = 3959.0
# Approximate miles per degree of latitude used for the pre-filter window.
MILES_PER_DEGREE = 69.0


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Lat/lng window around a search center.

    Longitudes are kept relative to ``center_lng`` so a window that crosses the
    antimeridian still answers ``contains`` correctly.
    """

    center_lat: float
    center_lng: float
    lat_delta: float
    lng_delta: float

    @property
    def min_lat(self) -> float:
        return max(-90.0, self.center_lat - self.lat_delta)

    @property
    def max_lat(self) -> float:
        return min(90.0, self.center_lat + self.lat_delta)

    @property
    def spans_all_longitudes(self) -> bool:
        return self.lng_delta >= 180.0

    def longitude_ranges(self) -> list[tuple[float, float]]:
        """Longitude intervals within [-180, 180] covered by the window."""

        if self.spans_all_longitudes:
            return [(-180.0, 180.0)]
        low = self.center_lng - self.lng_delta
        high = self.center_lng + self.lng_delta
        if low < -180.0:
            return [(low + 360.0, 180.0), (-180.0, high)]
        if high > 180.0:
            return [(low, 180.0), (-180.0, high - 360.0)]
        return [(low, high)]

    def contains(self, lat: float, lng: float) -> bool:
        if not self.min_lat <= lat <= self.max_lat:
            return False
        if self.spans_all_longitudes:
            return True
        offset = (lng - self.center_lng + 180.0) % 360.0 - 180.0
        return abs(offset) <= self.lng_delta


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in miles between two coordinates.

    Uses the spherical law of cosines form that the listing database evaluates,
    ``R * acos(cos(lat1)cos(lat2)cos(lng2 - lng1) + sin(lat1)sin(lat2))``.
    """

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_lambda = math.radians(lon2 - lon1)

    cosine = math.cos(phi1) * math.cos(phi2) * math.cos(d_lambda) + math.sin(phi1) * math.sin(phi2)
    # Rounding can push identical points slightly above 1.0
    cosine = max(-1.0, min(1.0, cosine))
    return EARTH_RADIUS_MILES * math.acos(cosine)


def _exact_longitude_delta(lat: float, radius_miles: float) -> float:
    """Widest longitude offset (degrees) reached by the search circle on the sphere."""

    angular_radius = radius_miles / EARTH_RADIUS_MILES
    colatitude = math.pi / 2 - abs(math.radians(lat))
    if angular_radius >= colatitude:
        # circle reaches a pole
        return 180.0
    ratio = math.sin(angular_radius) / math.cos(math.radians(lat))
    return math.degrees(math.asin(min(1.0, ratio)))


def bounding_box(lat: float, lng: float, radius_miles: float) -> BoundingBox:
    """Coarse lat/lng window around a center that contains the whole search circle.

    The deltas are ``radius / 69`` and ``radius / (69 * cos(lat))``. That flat
    approximation grows generous towards the poles; where it would instead cut
    into the circle (large radii at high latitudes) the longitude delta is
    widened to the spherical bound. Near a pole the window covers every
    longitude.
    """

    lat_delta = radius_miles / MILES_PER_DEGREE
    cos_lat = math.cos(math.radians(lat))
    if cos_lat < 1e-12:
        lng_delta = 180.0
    else:
        lng_delta = radius_miles / (MILES_PER_DEGREE * cos_lat)
    # slight slack keeps points sitting exactly on the circle inside the window
    lng_delta = min(180.0, max(lng_delta, _exact_longitude_delta(lat, radius_miles) * 1.000001))

    return BoundingBox(center_lat=lat, center_lng=lng, lat_delta=lat_delta, lng_delta=lng_delta)
