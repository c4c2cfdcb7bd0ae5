import json
from datetime import date
from decimal import Decimal

import pytest

from app.storage.base import StorageError
from app.storage.local import LocalRentalStore


def test_collections_are_seeded_on_first_access(local_store, tmp_path):
    rooms = local_store.list_rooms()
    assert [r.room_number for r in rooms] == ["101", "102", "201", "202"]
    assert (tmp_path / "demo_rooms.json").exists()

    tenants = local_store.list_tenants()
    assert {t.name for t in tenants} == {"राम बहादुर", "सीता कुमारी", "हरि प्रसाद"}
    assert local_store.get_tenant(1).room_number == "101"

    readings = local_store.list_readings()
    assert [r.reading_date_nepali for r in readings] == ["2081-01-17", "2081-01-16", "2081-01-15"]
    assert [r.units_consumed for r in readings] == [Decimal("180"), Decimal("120"), Decimal("150")]
    assert readings[0].electricity_cost == Decimal("2700.00")


def test_unseeded_store_starts_empty(tmp_path):
    store = LocalRentalStore(tmp_path, seed=False)
    assert store.list_rooms() == []
    assert store.list_bills() == []


def test_writes_persist_across_instances(local_store, tmp_path):
    room = local_store.create_room(
        {"room_number": "301", "floor_number": 3, "monthly_rent": Decimal("10000"), "room_type": "single", "description": None}
    )
    assert room.id == 5

    reopened = LocalRentalStore(tmp_path)
    assert reopened.get_room_by_number("301").monthly_rent == Decimal("10000")

    on_disk = json.loads((tmp_path / "demo_rooms.json").read_text(encoding="utf-8"))
    assert on_disk[-1]["monthly_rent"] == "10000"


def test_tenant_writes_do_not_touch_room_flags(local_store):
    local_store.create_tenant(
        {
            "name": "New",
            "phone": None,
            "email": None,
            "room_id": 4,
            "monthly_rent": Decimal("9500"),
            "security_deposit": Decimal("19000"),
            "move_in_date": date(2024, 6, 1),
        }
    )
    assert local_store.get_room(4).is_occupied is False

    local_store.update_tenant(1, {"is_active": False, "move_out_date": date(2024, 7, 1)})
    assert local_store.get_room(1).is_occupied is True

    result = local_store.sync_room_occupancy()
    assert result.reconciled is False
    assert (result.occupied_rooms, result.total_rooms) == (3, 4)


def test_delete_tenant_drops_readings_and_detaches_bills(local_store):
    reading = local_store.list_readings(tenant_id=1)[0]
    bill = local_store.create_bill(
        {
            "tenant_id": 1,
            "reading_id": reading.id,
            "tenant_name": "राम बहादुर",
            "room_number": "101",
            "bill_date": date(2024, 5, 20),
            "bill_date_nepali": "2081-01-20",
            "rent_amount": Decimal("8000"),
            "electricity_amount": Decimal("2250"),
            "previous_balance": Decimal("0"),
            "total_amount": Decimal("10250"),
            "notes": None,
        }
    )

    assert local_store.delete_tenant(1) is True
    assert local_store.list_readings(tenant_id=1) == []
    kept = local_store.get_bill(bill.id)
    assert (kept.tenant_id, kept.reading_id, kept.tenant_name) == (None, None, "राम बहादुर")


def test_bill_paid_flag_round_trip(local_store):
    bill = local_store.create_bill(
        {
            "tenant_id": 2,
            "reading_id": 2,
            "tenant_name": "सीता कुमारी",
            "room_number": "102",
            "bill_date": date(2024, 5, 20),
            "bill_date_nepali": "2081-01-20",
            "rent_amount": Decimal("8500"),
            "electricity_amount": Decimal("1800"),
            "previous_balance": Decimal("0"),
            "total_amount": Decimal("10300"),
            "notes": None,
        }
    )
    paid = local_store.set_bill_paid(bill.id, True)
    assert paid.is_paid is True and paid.paid_date == date.today()
    assert local_store.set_bill_paid(bill.id, False).paid_date is None
    assert local_store.set_bill_paid(999, True) is None


def test_corrupt_file_raises_storage_error(tmp_path):
    (tmp_path / "demo_rooms.json").write_text("{not json", encoding="utf-8")
    store = LocalRentalStore(tmp_path)
    with pytest.raises(StorageError):
        store.list_rooms()
    assert store.ping() is False


def test_demo_api_flow(demo_client):
    assert demo_client.get("/status").json()["storage"] == "local"

    r = demo_client.post("/tenants", json={"name": "Gita", "room_id": 4})
    assert r.status_code == 201
    assert Decimal(r.json()["security_deposit"]) == Decimal("19000")
    # room 101 is held by a seeded tenant
    assert demo_client.post("/tenants", json={"name": "X", "room_id": 1}).status_code == 409

    r = demo_client.post("/readings", json={"tenant_id": 1, "meter_type": "single", "current_reading": "1400"})
    assert r.status_code == 201
    assert Decimal(r.json()["previous_reading"]) == Decimal("1350")
    assert Decimal(r.json()["units_consumed"]) == Decimal("50")

    r = demo_client.post("/bills", json={"tenant_id": 1, "reading_id": r.json()["id"]})
    assert r.status_code == 201
    assert Decimal(r.json()["total_amount"]) == Decimal("8750")

    assert demo_client.post("/rooms/sync-occupancy").json()["reconciled"] is False


def test_unreadable_store_answers_503(demo_client, tmp_path):
    (tmp_path / "demo_bills.json").write_text("[broken", encoding="utf-8")
    r = demo_client.get("/bills")
    assert r.status_code == 503
    assert r.json()["detail"].startswith("Storage unavailable")
