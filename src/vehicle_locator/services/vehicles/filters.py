"""Structured attribute filters for vehicle listings."""

from __future__ import annotations

from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ...models.domain import Vehicle

# filter field -> Vehicle attribute, for the multi-valued text filters
MULTI_VALUE_FIELDS: dict[str, str] = {
    "make": "make",
    "model": "model",
    "condition": "condition",
    "body_style": "body_style",
    "fuel_type": "fuel_type",
    "transmission": "transmission",
    "drivetrain": "drivetrain",
    "seller_type": "seller_type",
}

# storefront query parameter names that differ from the field names
QUERY_ALIASES: dict[str, str] = {
    "bodyStyle": "body_style",
    "fuelType": "fuel_type",
    "sellerType": "seller_type",
    "minPrice": "min_price",
    "maxPrice": "max_price",
    "maxMileage": "max_mileage",
}


def split_csv(value: Optional[str]) -> Optional[list[str]]:
    """Split a comma-separated query value, dropping blanks."""
    if value is None:
        return None
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or None


class VehicleFilters(BaseModel):
    """Attribute filters combined with logical AND.

    Unknown filter names are rejected instead of being silently ignored.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    make: Optional[list[str]] = None
    model: Optional[list[str]] = None
    condition: Optional[list[str]] = None
    body_style: Optional[list[str]] = None
    fuel_type: Optional[list[str]] = None
    transmission: Optional[list[str]] = None
    drivetrain: Optional[list[str]] = None
    seller_type: Optional[list[str]] = None
    year: Optional[int] = Field(default=None, ge=1900, le=2100)
    min_price: Optional[float] = Field(default=None, ge=0)
    max_price: Optional[float] = Field(default=None, ge=0)
    max_mileage: Optional[int] = Field(default=None, ge=0)
    certified: Optional[bool] = None

    @classmethod
    def from_query(cls, params: Mapping[str, object]) -> "VehicleFilters":
        """Build filters from query parameters, accepting storefront camelCase names.

        Missing and blank values are dropped; comma-separated values are split.
        """
        values = {
            QUERY_ALIASES.get(name, name): value for name, value in params.items() if value is not None and value != ""
        }
        return cls(**values)

    @field_validator(*MULTI_VALUE_FIELDS, mode="before")
    @classmethod
    def _accept_csv(cls, value):
        if isinstance(value, str):
            return split_csv(value)
        if isinstance(value, (list, tuple)):
            cleaned = [str(item).strip() for item in value if str(item).strip()]
            return cleaned or None
        return value

    @model_validator(mode="after")
    def _check_price_range(self) -> "VehicleFilters":
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError("min_price must not exceed max_price")
        return self

    def multi_value_filters(self) -> dict[str, list[str]]:
        """Active multi-valued filters keyed by vehicle attribute."""
        active: dict[str, list[str]] = {}
        for field_name, attribute in MULTI_VALUE_FIELDS.items():
            values = getattr(self, field_name)
            if values:
                active[attribute] = values
        return active

    def matches(self, vehicle: Vehicle) -> bool:
        for attribute, values in self.multi_value_filters().items():
            if getattr(vehicle, attribute) not in values:
                return False
        if self.year is not None and vehicle.year != self.year:
            return False
        if self.min_price is not None and vehicle.price < self.min_price:
            return False
        if self.max_price is not None and vehicle.price > self.max_price:
            return False
        if self.max_mileage is not None and vehicle.mileage > self.max_mileage:
            return False
        if self.certified is not None and vehicle.certified != self.certified:
            return False
        return True
