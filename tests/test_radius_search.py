import math

import pytest

from vehicle_locator.data.vehicle_store import InMemoryVehicleStore
from vehicle_locator.models.domain import Location, Seller, SellerType, Vehicle
from vehicle_locator.services.geospatial import EARTH_RADIUS_MILES
from vehicle_locator.services.vehicles.errors import InvalidRadiusQuery
from vehicle_locator.services.vehicles.filters import VehicleFilters
from vehicle_locator.services.vehicles.radius_search import RadiusQuery, RadiusSearchEngine

CENTER = Location(47.0379, -122.9015, "Lakewood", "WA")


def _north_of(center: Location, miles: float) -> tuple[float, float]:
    return center.latitude + math.degrees(miles / EARTH_RADIUS_MILES), center.longitude


def _seller(account: str, lat: float | None, lng: float | None) -> Seller:
    return Seller(
        account_number=account,
        name=f"Seller {account}",
        type=SellerType.DEALER,
        phone="(253) 555-0100",
        city="Lakewood",
        state="WA",
        zip="98498",
        latitude=lat,
        longitude=lng,
    )


def _vehicle(vid: int, account: str, make: str = "Toyota", price: float = 20_000, condition: str = "Used") -> Vehicle:
    return Vehicle(
        id=vid,
        year=2020,
        make=make,
        model="Camry",
        trim="LE",
        body_style="Sedan",
        fuel_type="Gasoline",
        transmission="Automatic",
        drivetrain="FWD",
        exterior_color="Black",
        interior_color="Gray",
        doors=4,
        price=price,
        mileage=30_000,
        condition=condition,
        certified=False,
        title_status="Clean",
        seller_account_number=account,
        seller_type="Dealer",
    )


def _store(sellers, vehicles) -> InMemoryVehicleStore:
    store = InMemoryVehicleStore(sellers=sellers, vehicles=vehicles)
    store.sync_seller_coordinates()
    return store


@pytest.fixture
def three_distance_store() -> InMemoryVehicleStore:
    sellers = [
        _seller("FAR", *_north_of(CENTER, 120)),
        _seller("NEAR", *_north_of(CENTER, 5)),
        _seller("MID", *_north_of(CENTER, 40)),
    ]
    vehicles = [_vehicle(1, "FAR"), _vehicle(2, "NEAR"), _vehicle(3, "MID")]
    return _store(sellers, vehicles)


def test_search_returns_vehicles_within_radius_nearest_first(three_distance_store):
    engine = RadiusSearchEngine(three_distance_store)

    result = engine.search(RadiusQuery(center=CENTER, radius_miles=50))

    assert result.total == 2
    assert [ranked.vehicle.id for ranked in result.vehicles] == [2, 3]
    assert result.vehicles[0].distance_miles == pytest.approx(5, abs=0.01)
    assert result.vehicles[1].distance_miles == pytest.approx(40, abs=0.01)


def test_search_results_are_sorted_by_distance():
    sellers = [_seller(f"S{i}", *_north_of(CENTER, miles)) for i, miles in enumerate([30, 2, 18, 9, 25, 1])]
    vehicles = [_vehicle(i + 1, f"S{i}") for i in range(len(sellers))]
    engine = RadiusSearchEngine(_store(sellers, vehicles))

    result = engine.search(RadiusQuery(center=CENTER, radius_miles=100, page_size=100))

    distances = [ranked.distance_miles for ranked in result.vehicles]
    assert distances == sorted(distances)
    assert result.total == 6


def test_vehicles_without_seller_coordinates_are_excluded():
    sellers = [_seller("HOME", CENTER.latitude, CENTER.longitude), _seller("NOWHERE", None, None)]
    vehicles = [_vehicle(1, "HOME"), _vehicle(2, "NOWHERE"), _vehicle(3, "UNSYNCED")]
    engine = RadiusSearchEngine(_store(sellers, vehicles))

    result = engine.search(RadiusQuery(center=CENTER, radius_miles=3000))

    assert [ranked.vehicle.id for ranked in result.vehicles] == [1]
    assert result.vehicles[0].distance_miles == pytest.approx(0.0, abs=1e-3)


def test_attribute_filters_apply_together_with_radius():
    sellers = [_seller("NEAR", *_north_of(CENTER, 10)), _seller("FAR", *_north_of(CENTER, 300))]
    vehicles = [
        _vehicle(1, "NEAR", make="Toyota", price=15_000),
        _vehicle(2, "NEAR", make="Honda", price=15_000),
        _vehicle(3, "NEAR", make="Toyota", price=45_000),
        _vehicle(4, "FAR", make="Toyota", price=15_000),
        _vehicle(5, "NEAR", make="Toyota", price=18_000, condition="New"),
    ]
    engine = RadiusSearchEngine(_store(sellers, vehicles))
    filters = VehicleFilters(make="Toyota", condition=["Used"], max_price=20_000)

    result = engine.search(RadiusQuery(center=CENTER, radius_miles=50, filters=filters))

    assert [ranked.vehicle.id for ranked in result.vehicles] == [1]
    assert result.total == 1


def test_pagination_slices_after_ranking():
    sellers = [_seller(f"S{i}", *_north_of(CENTER, i + 1)) for i in range(25)]
    vehicles = [_vehicle(100 - i, f"S{i}") for i in range(25)]
    engine = RadiusSearchEngine(_store(sellers, vehicles))

    page_one = engine.search(RadiusQuery(center=CENTER, radius_miles=100, page=1, page_size=10))
    page_three = engine.search(RadiusQuery(center=CENTER, radius_miles=100, page=3, page_size=10))

    assert page_one.total == page_three.total == 25
    assert [ranked.vehicle.id for ranked in page_one.vehicles] == list(range(100, 90, -1))
    assert [ranked.vehicle.id for ranked in page_three.vehicles] == list(range(80, 75, -1))
    assert page_one.vehicles[-1].distance_miles <= page_three.vehicles[0].distance_miles


@pytest.mark.parametrize("radius", [0, -5, float("nan"), float("inf")])
def test_non_positive_or_non_finite_radius_is_rejected(radius):
    with pytest.raises(InvalidRadiusQuery):
        RadiusQuery(center=CENTER, radius_miles=radius)


@pytest.mark.parametrize("page, page_size", [(0, 20), (1, 0), (1, 101)])
def test_invalid_paging_is_rejected(page, page_size):
    with pytest.raises(InvalidRadiusQuery):
        RadiusQuery(center=CENTER, radius_miles=10, page=page, page_size=page_size)


def test_store_errors_propagate():
    class BrokenStore:
        def find_in_bounding_box(self, box, filters):
            raise ConnectionError("database unreachable")

    engine = RadiusSearchEngine(BrokenStore())

    with pytest.raises(ConnectionError):
        engine.search(RadiusQuery(center=CENTER, radius_miles=10))


def test_store_only_sees_bounding_box_and_filters():
    seen = {}

    class RecordingStore:
        def find_in_bounding_box(self, box, filters):
            seen["box"] = box
            seen["filters"] = filters
            return []

    filters = VehicleFilters(make=["Ford"])
    RadiusSearchEngine(RecordingStore()).search(RadiusQuery(center=CENTER, radius_miles=69, filters=filters))

    assert seen["box"].min_lat == pytest.approx(CENTER.latitude - 1)
    assert seen["box"].max_lat == pytest.approx(CENTER.latitude + 1)
    assert seen["filters"] is filters


def test_filters_reject_unknown_names_and_inverted_price_range():
    with pytest.raises(ValueError):
        VehicleFilters(colour="Red")
    with pytest.raises(ValueError):
        VehicleFilters(min_price=30_000, max_price=10_000)


def test_filters_from_query_accept_storefront_names():
    filters = VehicleFilters.from_query(
        {"make": "Toyota, Honda", "bodyStyle": "SUV", "minPrice": 1000, "maxMileage": "", "certified": None}
    )

    assert filters.make == ["Toyota", "Honda"]
    assert filters.body_style == ["SUV"]
    assert filters.min_price == 1000
    assert filters.max_mileage is None
    with pytest.raises(ValueError):
        VehicleFilters.from_query({"colour": "Red"})
