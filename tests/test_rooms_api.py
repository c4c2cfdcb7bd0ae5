from decimal import Decimal


def test_create_and_get_room(client, make_room):
    room = make_room("101", monthly_rent="8000", room_type="single")
    assert room["is_occupied"] is False
    assert Decimal(room["monthly_rent"]) == Decimal("8000")

    r = client.get(f"/rooms/{room['id']}")
    assert r.status_code == 200
    assert r.json()["room_number"] == "101"


def test_missing_room_is_404(client):
    assert client.get("/rooms/999").status_code == 404
    assert client.patch("/rooms/999", json={"monthly_rent": "1"}).status_code == 404
    assert client.delete("/rooms/999").status_code == 404


def test_duplicate_room_number_conflicts(client, make_room):
    make_room("101")
    r = client.post("/rooms", json={"room_number": "101", "monthly_rent": "9000"})
    assert r.status_code == 409


def test_renaming_onto_existing_number_conflicts(client, make_room):
    make_room("101")
    other = make_room("102")
    r = client.patch(f"/rooms/{other['id']}", json={"room_number": "101"})
    assert r.status_code == 409

    r = client.patch(f"/rooms/{other['id']}", json={"room_number": "103", "monthly_rent": "9500"})
    assert r.status_code == 200
    assert r.json()["room_number"] == "103"


def test_room_validation(client):
    assert client.post("/rooms", json={"room_number": "  ", "monthly_rent": "100"}).status_code == 422
    assert client.post("/rooms", json={"room_number": "1", "monthly_rent": "-1"}).status_code == 422
    assert client.post("/rooms", json={"room_number": "1", "room_type": "triple"}).status_code == 422


def test_is_occupied_cannot_be_set_directly(client, make_room):
    room = make_room("101")
    r = client.patch(f"/rooms/{room['id']}", json={"is_occupied": True})
    assert r.status_code == 200
    assert r.json()["is_occupied"] is False


def test_list_filters_and_availability(client, make_room, make_tenant):
    a = make_room("101", floor_number=1)
    make_room("201", floor_number=2, room_type="double")
    make_tenant(a["id"])

    assert [r["room_number"] for r in client.get("/rooms").json()] == ["101", "201"]
    assert [r["room_number"] for r in client.get("/rooms", params={"status": "occupied"}).json()] == ["101"]
    assert [r["room_number"] for r in client.get("/rooms", params={"status": "vacant"}).json()] == ["201"]
    assert [r["room_number"] for r in client.get("/rooms", params={"floor": 2}).json()] == ["201"]
    assert [r["room_number"] for r in client.get("/rooms", params={"search": "double"}).json()] == ["201"]
    assert client.get("/rooms", params={"status": "full"}).status_code == 422

    data = client.get("/rooms/availability").json()
    assert (data["total"], data["available"], data["occupied"]) == (2, 1, 1)
    assert data["available_rooms"][0]["room_number"] == "201"


def test_occupied_room_cannot_be_deleted(client, make_room, make_tenant):
    room = make_room("101")
    tenant = make_tenant(room["id"])
    before = client.get("/rooms").json()

    r = client.delete(f"/rooms/{room['id']}")
    assert r.status_code == 409
    assert "101" in r.json()["detail"]
    assert client.get("/rooms").json() == before

    client.patch(f"/tenants/{tenant['id']}", json={"is_active": False})
    assert client.delete(f"/rooms/{room['id']}").status_code == 204
    assert client.get(f"/rooms/{room['id']}").status_code == 404
    # the former tenant keeps their record without a room
    assert client.get(f"/tenants/{tenant['id']}").json()["room_id"] is None


def test_sync_occupancy_endpoint(client, make_room, make_tenant):
    a = make_room("101")
    make_room("102")
    make_tenant(a["id"])

    r = client.post("/rooms/sync-occupancy")
    assert r.status_code == 200
    assert r.json() == {"occupied_rooms": 1, "total_rooms": 2, "reconciled": True}
