"""Static ZIP coordinates used when the geocoding provider is unavailable."""

from __future__ import annotations

from types import MappingProxyType

from ...models.domain import Location

FALLBACK_ZIP_COORDINATES = MappingProxyType(
    {
        "98498": Location(47.0379, -122.9015, "Lakewood", "WA"),
        "90210": Location(34.0901, -118.4065, "Beverly Hills", "CA"),
        "10001": Location(40.7505, -73.9934, "New York", "NY"),
        "60601": Location(41.8781, -87.6298, "Chicago", "IL"),
        "75001": Location(32.9483, -96.7299, "Addison", "TX"),
        "33101": Location(25.7617, -80.1918, "Miami", "FL"),
        "77001": Location(29.7604, -95.3698, "Houston", "TX"),
        "85001": Location(33.4484, -112.074, "Phoenix", "AZ"),
        "80201": Location(39.7392, -104.9903, "Denver", "CO"),
        "97201": Location(45.5152, -122.6784, "Portland", "OR"),
        "30301": Location(33.749, -84.388, "Atlanta", "GA"),
        "02101": Location(42.3601, -71.0589, "Boston", "MA"),
        "19101": Location(39.9526, -75.1652, "Philadelphia", "PA"),
        "63101": Location(38.627, -90.1994, "St. Louis", "MO"),
        "55401": Location(44.9778, -93.265, "Minneapolis", "MN"),
    }
)

# Contiguous-US center, handed out only when the provider could not be reached at all.
GEOGRAPHIC_CENTER = Location(39.8283, -98.5795, "Geographic Center", "US")
