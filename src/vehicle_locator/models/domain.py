"""Domain models for locations, sellers and vehicle listings."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

UNKNOWN = "Unknown"


class LocationSource(str, Enum):
    """Which resolution tier produced a location."""

    PROVIDER = "provider"
    FALLBACK = "fallback"


class SellerType(str, Enum):
    DEALER = "Dealer"
    PRIVATE_SELLER = "Private Seller"


@dataclass(frozen=True, slots=True)
class Location:
    """A geocoded point. City and state are never empty."""

    latitude: float
    longitude: float
    city: str = UNKNOWN
    state: str = UNKNOWN

    def __post_init__(self) -> None:
        if not self.city:
            object.__setattr__(self, "city", UNKNOWN)
        if not self.state:
            object.__setattr__(self, "state", UNKNOWN)


@dataclass(slots=True)
class CacheEntry:
    zip: str
    location: Location
    source: LocationSource
    resolved_at: datetime


@dataclass(slots=True)
class Seller:
    """Dealer or private seller account owning the authoritative coordinate for its vehicles."""

    account_number: str
    name: str
    type: SellerType
    phone: str
    city: str
    state: str
    zip: str
    latitude: Optional[float]
    longitude: Optional[float]
    email: Optional[str] = None
    address: Optional[str] = None


@dataclass(slots=True)
class Vehicle:
    """Vehicle listing with a denormalized copy of its seller's location."""

    id: int
    year: int
    make: str
    model: str
    trim: str
    body_style: str
    fuel_type: str
    transmission: str
    drivetrain: str
    exterior_color: str
    interior_color: str
    doors: int
    price: float
    mileage: int
    condition: str
    certified: bool
    title_status: str
    seller_account_number: str
    seller_type: str
    seller_latitude: Optional[float] = None
    seller_longitude: Optional[float] = None
    seller_name: Optional[str] = None
    seller_city: Optional[str] = None
    seller_state: Optional[str] = None
    seller_phone: Optional[str] = None

    @property
    def has_coordinates(self) -> bool:
        return self.seller_latitude is not None and self.seller_longitude is not None


@dataclass(slots=True)
class RankedVehicle:
    vehicle: Vehicle
    distance_miles: float
