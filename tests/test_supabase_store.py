from types import SimpleNamespace

from vehicle_locator.data.supabase_store import FETCH_CHUNK_SIZE, SupabaseVehicleStore, _row_to_vehicle
from vehicle_locator.db import load_sql
from vehicle_locator.services.geospatial import bounding_box
from vehicle_locator.services.vehicles.filters import VehicleFilters


def _row(vid: int, lat=47.1, lng=-122.9) -> dict:
    return {
        "id": vid,
        "year": 2018,
        "make": "Subaru",
        "model": "Outback",
        "trim": "Premium",
        "body_style": "Wagon",
        "fuel_type": "Gasoline",
        "transmission": "CVT",
        "drivetrain": "AWD",
        "exterior_color": "Green",
        "interior_color": "Tan",
        "doors": 4,
        "price": "24500.00",
        "mileage": 51_000,
        "condition": "Used",
        "certified": None,
        "title_status": "Clean",
        "seller_account_number": "A1",
        "seller_type": "Dealer",
        "seller_latitude": str(lat) if lat is not None else None,
        "seller_longitude": str(lng) if lng is not None else None,
        "seller_name": "Puget Sound Subaru",
        "seller_city": "Lakewood",
        "seller_state": "WA",
        "seller_phone": None,
    }


class FakeQuery:
    """Records the PostgREST builder chain and answers ``execute`` from a canned list."""

    def __init__(self, client: "FakeClient", table: str) -> None:
        self.client = client
        self.table = table
        self.calls: list[tuple] = []

    def __getattr__(self, name):
        def record(*args, **kwargs):
            self.calls.append((name, *args))
            return self

        return record

    @property
    def not_(self):
        self.calls.append(("not",))
        return self

    def execute(self):
        self.client.executed.append(self)
        return self.client.responses.pop(0)


class FakeClient:
    def __init__(self, *responses) -> None:
        self.responses = list(responses)
        self.executed: list[FakeQuery] = []
        self.rpc_calls: list[tuple] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: dict) -> FakeQuery:
        self.rpc_calls.append((name, params))
        return FakeQuery(self, "rpc")


def _response(data, count=None):
    return SimpleNamespace(data=data, count=count)


def test_bounding_box_query_pushes_window_and_filters_to_database():
    client = FakeClient(_response([_row(1)]))
    store = SupabaseVehicleStore(client)
    box = bounding_box(47.0, -122.9, 50)

    vehicles = store.find_in_bounding_box(box, VehicleFilters(make="Subaru,Toyota", max_price=30_000))

    calls = client.executed[0].calls
    assert ("gte", "seller_latitude", box.min_lat) in calls
    assert ("lte", "seller_latitude", box.max_lat) in calls
    assert any(call[:2] == ("gte", "seller_longitude") for call in calls)
    assert ("in_", "make", ["Subaru", "Toyota"]) in calls
    assert ("lte", "price", 30_000) in calls
    assert vehicles[0].seller_latitude == 47.1
    assert vehicles[0].price == 24_500.0
    assert vehicles[0].certified is False


def test_bounding_box_query_reads_in_chunks():
    full = [_row(i) for i in range(FETCH_CHUNK_SIZE)]
    client = FakeClient(_response(full), _response([_row(FETCH_CHUNK_SIZE)]))
    store = SupabaseVehicleStore(client)

    vehicles = store.find_in_bounding_box(bounding_box(47.0, -122.9, 10), VehicleFilters())

    assert len(vehicles) == FETCH_CHUNK_SIZE + 1
    assert ("range", 0, FETCH_CHUNK_SIZE - 1) in client.executed[0].calls
    assert ("range", FETCH_CHUNK_SIZE, 2 * FETCH_CHUNK_SIZE - 1) in client.executed[1].calls


def test_antimeridian_window_uses_or_clause():
    client = FakeClient(_response([]))
    store = SupabaseVehicleStore(client)

    store.find_in_bounding_box(bounding_box(51.0, 179.5, 60), VehicleFilters())

    or_calls = [call for call in client.executed[0].calls if call[0] == "or_"]
    assert len(or_calls) == 1
    assert or_calls[0][1].count("and(") == 2


def test_list_vehicles_uses_exact_count():
    client = FakeClient(_response([_row(5), _row(6, lat=None, lng=None)], count=42))
    store = SupabaseVehicleStore(client)

    vehicles, total = store.list_vehicles(VehicleFilters(certified=True), offset=20, limit=2)

    assert total == 42
    assert [vehicle.id for vehicle in vehicles] == [5, 6]
    assert not vehicles[1].has_coordinates
    assert ("range", 20, 21) in client.executed[0].calls
    assert ("eq", "certified", True) in client.executed[0].calls


def test_upsert_vehicles_leaves_seller_columns_to_sync():
    client = FakeClient(_response([]))
    store = SupabaseVehicleStore(client)

    store.upsert_vehicles([_row_to_vehicle(_row(9))])

    name, rows = client.executed[0].calls[0][:2]
    assert name == "upsert"
    assert rows[0]["id"] == 9
    assert not any(key.startswith("seller_") and key not in ("seller_account_number", "seller_type") for key in rows[0])


def test_sync_calls_database_function():
    client = FakeClient(_response(7))
    store = SupabaseVehicleStore(client)

    assert store.sync_seller_coordinates("A1") == 7
    assert client.rpc_calls == [("sync_seller_coordinates", {"p_account_number": "A1"})]


def test_bundled_sync_sql_defines_the_called_function():
    sql = load_sql("sync_seller_coordinates")

    assert "create or replace function sync_seller_coordinates" in sql
    assert "p_account_number" in sql
