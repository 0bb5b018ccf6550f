"""Deterministic mock inventory used when no database is configured."""

from __future__ import annotations

import random

from ..models.domain import Seller, SellerType, Vehicle
from ..services.geocoding.fallback import FALLBACK_ZIP_COORDINATES

MAKES_AND_MODELS: dict[str, tuple[str, ...]] = {
    "Toyota": ("Camry", "Corolla", "RAV4", "Tacoma", "Highlander"),
    "Honda": ("Civic", "Accord", "CR-V", "Pilot"),
    "Ford": ("F-150", "Escape", "Explorer", "Mustang"),
    "Chevrolet": ("Silverado 1500", "Equinox", "Malibu", "Tahoe"),
    "Nissan": ("Altima", "Rogue", "Sentra"),
    "Subaru": ("Outback", "Forester", "Crosstrek"),
    "Audi": ("A4", "Q5"),
    "Tesla": ("Model 3", "Model Y"),
}
BODY_STYLES = {
    "F-150": "Truck", "Tacoma": "Truck", "Silverado 1500": "Truck",
    "RAV4": "SUV", "Highlander": "SUV", "CR-V": "SUV", "Pilot": "SUV", "Escape": "SUV",
    "Explorer": "SUV", "Equinox": "SUV", "Tahoe": "SUV", "Rogue": "SUV", "Forester": "SUV",
    "Crosstrek": "SUV", "Q5": "SUV", "Model Y": "SUV", "Outback": "Wagon", "Mustang": "Coupe",
}
TRIMS = ("Base", "LE", "SE", "XLE", "Sport", "Limited")
CONDITIONS = ("New", "Used", "Certified")
FUEL_TYPES = ("Gasoline", "Hybrid", "Diesel")
TRANSMISSIONS = ("Automatic", "Manual", "CVT")
DRIVETRAINS = ("FWD", "RWD", "AWD", "4WD")
COLORS = ("Black", "White", "Silver", "Gray", "Blue", "Red")
INTERIOR_COLORS = ("Black", "Gray", "Beige", "Brown")
DEALER_SUFFIXES = ("Motors", "Auto Group", "Car Center", "Autoplex")


def generate_sellers(count: int, rng: random.Random) -> list[Seller]:
    metros = list(FALLBACK_ZIP_COORDINATES.items())
    sellers: list[Seller] = []
    for index in range(count):
        zip_code, metro = metros[index % len(metros)]
        is_dealer = rng.random() < 0.7
        name = (
            f"{metro.city} {rng.choice(DEALER_SUFFIXES)}" if is_dealer else f"Private Seller {index + 1}"
        )
        sellers.append(
            Seller(
                account_number=f"ACC{index + 1:05d}",
                name=name,
                type=SellerType.DEALER if is_dealer else SellerType.PRIVATE_SELLER,
                phone=f"({rng.randint(200, 989)}) {rng.randint(200, 999)}-{rng.randint(1000, 9999)}",
                city=metro.city,
                state=metro.state,
                zip=zip_code,
                # scatter sellers within roughly 60 miles of the metro center
                latitude=round(metro.latitude + rng.uniform(-0.8, 0.8), 6),
                longitude=round(metro.longitude + rng.uniform(-0.8, 0.8), 6),
            )
        )
    return sellers


def generate_vehicles(count: int, sellers: list[Seller], rng: random.Random) -> list[Vehicle]:
    vehicles: list[Vehicle] = []
    for vehicle_id in range(1, count + 1):
        make = rng.choice(tuple(MAKES_AND_MODELS))
        model = rng.choice(MAKES_AND_MODELS[make])
        seller = rng.choice(sellers)
        condition = rng.choice(CONDITIONS)
        year = rng.randint(2015, 2025)
        mileage = 0 if condition == "New" else rng.randint(5_000, 150_000)
        vehicles.append(
            Vehicle(
                id=vehicle_id,
                year=year,
                make=make,
                model=model,
                trim=rng.choice(TRIMS),
                body_style=BODY_STYLES.get(model, "Sedan"),
                fuel_type="Electric" if make == "Tesla" else rng.choice(FUEL_TYPES),
                transmission="Automatic" if make == "Tesla" else rng.choice(TRANSMISSIONS),
                drivetrain=rng.choice(DRIVETRAINS),
                exterior_color=rng.choice(COLORS),
                interior_color=rng.choice(INTERIOR_COLORS),
                doors=2 if BODY_STYLES.get(model) == "Coupe" else 4,
                price=float(rng.randrange(8_000, 75_000, 250)),
                mileage=mileage,
                condition=condition,
                certified=condition == "Certified",
                title_status="Clean" if rng.random() < 0.9 else "Rebuilt",
                seller_account_number=seller.account_number,
                seller_type=seller.type.value,
            )
        )
    return vehicles


def generate_inventory(vehicle_count: int, seed: int = 42) -> tuple[list[Seller], list[Vehicle]]:
    """Sellers spread over the fallback metros and ``vehicle_count`` listings among them."""

    rng = random.Random(seed)
    seller_count = max(1, min(200, vehicle_count // 10))
    sellers = generate_sellers(seller_count, rng)
    return sellers, generate_vehicles(vehicle_count, sellers, rng)
