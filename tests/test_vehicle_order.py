import pytest

from assembly_sync.vehicle_order import DateEntry, VehicleOrder


@pytest.mark.parametrize(
    "value", [None, "", "47010000", "4701000011", 470100001, "4701"]
)
def test_invalid_order_numbers_are_ignored(value):
    record = VehicleOrder()
    record.set_order_number(value)
    assert record.order_number is None
    assert record.series_number is None


def test_invalid_order_number_keeps_previous_value():
    record = VehicleOrder()
    record.set_order_number("470100001")
    record.set_order_number("too-long-value")
    assert record.order_number == "470100001"
    assert record.series_number == "4701"


@pytest.mark.parametrize("value", ["470100001", "ABCD12345", "         "])
def test_series_number_is_first_four_characters(value):
    record = VehicleOrder()
    record.set_order_number(value)
    assert record.order_number == value
    assert record.series_number == value[:4]


def test_set_features_copies_and_appends_series():
    record = VehicleOrder()
    record.set_order_number("470100001")
    codes = ["D12", "OPT1"]

    record.set_features(codes)

    assert codes == ["D12", "OPT1"]
    assert record.features == ["D12", "OPT1", "4701"]
    assert record.features is not codes


def test_set_features_without_series_adds_nothing():
    record = VehicleOrder()
    record.set_features(["OPT1"])
    assert record.features == ["OPT1"]


def test_add_date_appends_in_order():
    record = VehicleOrder()
    record.add_date("2024-03-01", "Station1", "PLAN")
    record.add_date("2024-03-01", "Station1", "PLAN")
    assert record.dates == [
        DateEntry("2024-03-01", "Station1", "PLAN"),
        DateEntry("2024-03-01", "Station1", "PLAN"),
    ]


def test_serialize_unset_record():
    assert VehicleOrder().serialize() == {
        "orderNumber": None,
        "model": None,
        "description": None,
        "dates": [],
        "features": [],
    }


def test_round_trip_preserves_fields():
    record = VehicleOrder()
    record.set_order_number("470100001")
    record.set_model("CARAVAN-X")
    record.set_description("CARAVAN-X")
    record.add_date("2024-03-01T08:30:00.0000000+01:00", "Station1", "PLAN")
    record.set_features(["D12", "OPT1"])

    copy = VehicleOrder.from_wire(record.serialize())

    assert copy.order_number == "470100001"
    assert copy.series_number == "4701"
    assert copy.model == "CARAVAN-X"
    assert copy.description == "CARAVAN-X"
    assert copy.dates == record.dates
    assert copy.features == ["D12", "OPT1", "4701"]
    assert copy.features.count("4701") == 1


def test_deserialize_is_defensive():
    record = VehicleOrder.from_wire(
        {
            "orderNumber": "470200002",
            "model": 17,
            "dates": [{"date": "2024-03-01", "type": "PLAN"}, "bogus", None],
            "features": ["A", 3, None, {"code": "B"}, "C"],
        }
    )
    assert record.order_number == "470200002"
    assert record.series_number == "4702"
    assert record.model is None
    assert record.description is None
    assert record.dates == [DateEntry("2024-03-01", None, "PLAN")]
    assert record.features == ["A", "C"]


def test_deserialize_replaces_previous_state():
    record = VehicleOrder()
    record.set_order_number("470100001")
    record.add_date("2024-03-01", "Station1", "PLAN")
    record.set_features(["OLD"])

    record.deserialize({"features": ["NEW"]})

    assert record.order_number is None
    assert record.series_number is None
    assert record.dates == []
    assert record.features == ["NEW"]


def test_deserialize_short_order_number_has_no_series():
    record = VehicleOrder.from_wire({"orderNumber": "47"})
    assert record.order_number == "47"
    assert record.series_number is None


def test_same_order_compares_order_numbers():
    first = VehicleOrder()
    first.set_order_number("470100001")
    second = VehicleOrder.from_wire({"orderNumber": "470100001"})
    other = VehicleOrder.from_wire({"orderNumber": "470100002"})

    assert first.same_order(second)
    assert not first.same_order(other)
    assert not first.same_order(None)
    assert not VehicleOrder().same_order(VehicleOrder())
