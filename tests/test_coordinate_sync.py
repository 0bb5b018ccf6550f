import dataclasses

import pytest

from vehicle_locator.data.vehicle_store import InMemoryVehicleStore
from vehicle_locator.models.domain import Location, Seller, SellerType, Vehicle
from vehicle_locator.services.vehicles.radius_search import RadiusQuery, RadiusSearchEngine
from vehicle_locator.services.vehicles.sync import sync_seller_coordinates


def _seller(account: str, lat: float, lng: float, city: str = "Lakewood") -> Seller:
    return Seller(
        account_number=account,
        name=f"{city} Motors",
        type=SellerType.DEALER,
        phone="(253) 555-0100",
        city=city,
        state="WA",
        zip="98498",
        latitude=lat,
        longitude=lng,
    )


def _vehicle(vid: int, account: str) -> Vehicle:
    return Vehicle(
        id=vid,
        year=2021,
        make="Honda",
        model="Civic",
        trim="Sport",
        body_style="Sedan",
        fuel_type="Gasoline",
        transmission="CVT",
        drivetrain="FWD",
        exterior_color="Blue",
        interior_color="Black",
        doors=4,
        price=22_500,
        mileage=12_000,
        condition="Used",
        certified=False,
        title_status="Clean",
        seller_account_number=account,
        seller_type="Dealer",
    )


@pytest.fixture
def store() -> InMemoryVehicleStore:
    sellers = [_seller("A1", 47.0379, -122.9015), _seller("B2", 45.5152, -122.6784, city="Portland")]
    vehicles = [_vehicle(1, "A1"), _vehicle(2, "A1"), _vehicle(3, "B2"), _vehicle(4, "ORPHAN")]
    return InMemoryVehicleStore(sellers=sellers, vehicles=vehicles)


def test_full_sync_copies_seller_fields(store: InMemoryVehicleStore):
    changed = sync_seller_coordinates(store)

    assert changed == 3
    vehicle = store.get_vehicle(3)
    assert (vehicle.seller_latitude, vehicle.seller_longitude) == (45.5152, -122.6784)
    assert vehicle.seller_name == "Portland Motors"
    assert vehicle.seller_city == "Portland"
    assert vehicle.seller_state == "WA"
    assert vehicle.seller_phone == "(253) 555-0100"
    assert store.get_vehicle(4).seller_latitude is None


def test_second_sync_changes_nothing(store: InMemoryVehicleStore):
    sync_seller_coordinates(store)

    assert sync_seller_coordinates(store) == 0
    assert sync_seller_coordinates(store, "A1") == 0


def test_single_seller_sync_leaves_others_untouched(store: InMemoryVehicleStore):
    changed = sync_seller_coordinates(store, "A1")

    assert changed == 2
    assert store.get_vehicle(1).seller_latitude == 47.0379
    assert store.get_vehicle(3).seller_latitude is None


def test_unknown_seller_is_a_no_op(store: InMemoryVehicleStore):
    assert sync_seller_coordinates(store, "NOPE") == 0
    assert store.get_vehicle(1).seller_latitude is None


def test_seller_move_is_visible_to_search_only_after_sync(store: InMemoryVehicleStore):
    sync_seller_coordinates(store)
    engine = RadiusSearchEngine(store)
    spokane = Location(47.6588, -117.4260, "Spokane", "WA")

    moved = dataclasses.replace(store.get_seller("B2"), latitude=47.6588, longitude=-117.4260, city="Spokane")
    store.upsert_sellers([moved])
    before = engine.search(RadiusQuery(center=spokane, radius_miles=25))

    assert sync_seller_coordinates(store, "B2") == 1
    after = engine.search(RadiusQuery(center=spokane, radius_miles=25))

    assert before.total == 0
    assert [ranked.vehicle.id for ranked in after.vehicles] == [3]
    assert after.vehicles[0].vehicle.seller_city == "Spokane"


def test_upsert_vehicles_does_not_write_seller_columns(store: InMemoryVehicleStore):
    sync_seller_coordinates(store)
    tampered = dataclasses.replace(store.get_vehicle(1), seller_latitude=0.0, seller_longitude=0.0, price=19_000)

    store.upsert_vehicles([tampered])

    vehicle = store.get_vehicle(1)
    assert vehicle.price == 19_000
    assert vehicle.seller_latitude == 47.0379


def test_sync_errors_propagate():
    class BrokenStore:
        def get_seller(self, account_number):
            return None

        def sync_seller_coordinates(self, account_number=None):
            raise ConnectionError("database unreachable")

    with pytest.raises(ConnectionError):
        sync_seller_coordinates(BrokenStore())
