from datetime import date
from decimal import Decimal

import pytest

from app.core.nepali_date import format_bilingual_date


@pytest.fixture
def billed_tenant(client, make_room, make_tenant, make_reading):
    room = make_room("101", monthly_rent="8000")
    tenant = make_tenant(room["id"], name="राम बहादुर")
    reading = make_reading(tenant["id"], current="1350", previous="1200", rate="15")
    return tenant, reading


def test_preview_computes_without_saving(client, billed_tenant):
    tenant, reading = billed_tenant
    r = client.post(
        "/bills/preview",
        json={"tenant_id": tenant["id"], "reading_id": reading["id"], "previous_balance": "-500"},
    )
    assert r.status_code == 200
    data = r.json()
    assert Decimal(data["rent_amount"]) == Decimal("8000")
    assert Decimal(data["units_consumed"]) == Decimal("150")
    assert Decimal(data["electricity_amount"]) == Decimal("2250")
    assert Decimal(data["total_amount"]) == Decimal("9750")
    assert data["total_display"] == "रू 9,750.00"
    assert client.get("/bills").json() == []


def test_create_bill_snapshots_tenant_and_room(client, billed_tenant):
    tenant, reading = billed_tenant
    r = client.post(
        "/bills",
        json={
            "tenant_id": tenant["id"],
            "reading_id": reading["id"],
            "previous_balance": "-500",
            "bill_date_nepali": "2081-04-10",
            "notes": "Advance adjusted",
        },
    )
    assert r.status_code == 201, r.text
    bill = r.json()
    assert bill["tenant_name"] == "राम बहादुर"
    assert bill["room_number"] == "101"
    assert bill["bill_date"] == date.today().isoformat()
    assert bill["bill_date_nepali"] == "2081-04-10"
    assert Decimal(bill["total_amount"]) == Decimal("9750")
    assert bill["is_paid"] is False
    assert bill["total_display"] == "रू 9,750.00"
    assert bill["bill_date_display"] == format_bilingual_date(date.today())

    # the snapshot survives the tenant being renamed
    client.patch(f"/tenants/{tenant['id']}", json={"name": "Ram B."})
    assert client.get(f"/bills/{bill['id']}").json()["tenant_name"] == "राम बहादुर"


def test_operator_rent_is_kept(client, billed_tenant):
    tenant, reading = billed_tenant
    r = client.post("/bills", json={"tenant_id": tenant["id"], "reading_id": reading["id"], "rent_amount": "7000"})
    assert Decimal(r.json()["total_amount"]) == Decimal("9250")


def test_reading_must_belong_to_tenant(client, billed_tenant, make_room, make_tenant):
    _, reading = billed_tenant
    other = make_tenant(make_room("102")["id"], name="Other")
    r = client.post("/bills", json={"tenant_id": other["id"], "reading_id": reading["id"]})
    assert r.status_code == 400

    assert client.post("/bills", json={"tenant_id": other["id"], "reading_id": 999}).status_code == 404
    assert client.post("/bills", json={"tenant_id": 999, "reading_id": reading["id"]}).status_code == 404


def test_mark_paid_and_unpaid(client, billed_tenant):
    tenant, reading = billed_tenant
    bill = client.post("/bills", json={"tenant_id": tenant["id"], "reading_id": reading["id"]}).json()

    paid = client.patch(f"/bills/{bill['id']}", json={"is_paid": True}).json()
    assert paid["is_paid"] is True
    assert paid["paid_date"] == date.today().isoformat()
    assert [b["id"] for b in client.get("/bills", params={"is_paid": True}).json()] == [bill["id"]]

    unpaid = client.patch(f"/bills/{bill['id']}", json={"is_paid": False}).json()
    assert unpaid["is_paid"] is False
    assert unpaid["paid_date"] is None

    assert client.patch("/bills/999", json={"is_paid": True}).status_code == 404


def test_delete_requires_confirmation(client, billed_tenant):
    tenant, reading = billed_tenant
    bill = client.post("/bills", json={"tenant_id": tenant["id"], "reading_id": reading["id"]}).json()

    r = client.delete(f"/bills/{bill['id']}")
    assert r.status_code == 409
    assert r.json()["detail"] == "Delete bill for राम बहादुर - Room 101?"
    assert client.get(f"/bills/{bill['id']}").status_code == 200

    assert client.delete(f"/bills/{bill['id']}", params={"confirm": True}).status_code == 204
    assert client.get(f"/bills/{bill['id']}").status_code == 404


def test_filter_by_nepali_month(client, billed_tenant):
    tenant, reading = billed_tenant
    for bs in ("2081-04-10", "2081-05-02"):
        client.post(
            "/bills",
            json={"tenant_id": tenant["id"], "reading_id": reading["id"], "bill_date_nepali": bs},
        )

    shravan = client.get("/bills", params={"nepali_month": "04"}).json()
    assert [b["bill_date_nepali"] for b in shravan] == ["2081-04-10"]
    assert client.get("/bills", params={"nepali_month": "13"}).status_code == 422
    assert len(client.get("/bills", params={"search": "101"}).json()) == 2


def test_bill_validation(client, billed_tenant):
    tenant, reading = billed_tenant
    base = {"tenant_id": tenant["id"], "reading_id": reading["id"]}
    assert client.post("/bills", json={**base, "rent_amount": "-1"}).status_code == 422
    assert client.post("/bills", json={**base, "bill_date_nepali": "not-a-date"}).status_code == 422
