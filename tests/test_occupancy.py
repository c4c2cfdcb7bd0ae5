from datetime import date
from types import SimpleNamespace

from app.models.room import Room
from app.services.occupancy import occupied_room_ids, reconcile_rooms, room_is_taken


def _tenant(id, room_id, is_active=True):
    return SimpleNamespace(id=id, room_id=room_id, is_active=is_active)


def _rooms(*ids):
    return [SimpleNamespace(id=i) for i in ids]


def test_only_active_tenants_occupy_rooms():
    tenants = [_tenant(1, "A"), _tenant(2, "B"), _tenant(3, "C", is_active=False), _tenant(4, None)]
    assert occupied_room_ids(tenants) == {"A", "B"}
    assert reconcile_rooms(_rooms("A", "B", "C"), tenants) == {"A": True, "B": True, "C": False}


def test_reconcile_ignores_previous_room_state():
    rooms = [SimpleNamespace(id=1, is_occupied=True), SimpleNamespace(id=2, is_occupied=False)]
    assert reconcile_rooms(rooms, [_tenant(1, 2)]) == {1: False, 2: True}


def test_reconcile_is_idempotent():
    tenants = [_tenant(1, 1), _tenant(2, 3)]
    rooms = _rooms(1, 2, 3)
    first = reconcile_rooms(rooms, tenants)
    flagged = [SimpleNamespace(id=k, is_occupied=v) for k, v in first.items()]
    assert reconcile_rooms(flagged, tenants) == first


def test_room_is_taken_excludes_the_tenant_being_edited():
    tenants = [_tenant(1, 10), _tenant(2, 20, is_active=False)]
    assert room_is_taken(tenants, 10)
    assert not room_is_taken(tenants, 10, exclude_tenant_id=1)
    assert not room_is_taken(tenants, 20)


# --- SQL adapter ---

def _seed_rooms(sql_store, *numbers):
    return [sql_store.create_room({"room_number": n, "monthly_rent": 8000}) for n in numbers]


def _tenant_data(room_id, name="Tenant", **extra):
    data = {
        "name": name,
        "room_id": room_id,
        "monthly_rent": 8000,
        "security_deposit": 16000,
        "move_in_date": date(2024, 5, 1),
    }
    data.update(extra)
    return data


def _flags(sql_store):
    return {r.room_number: r.is_occupied for r in sql_store.list_rooms()}


def test_tenant_writes_reconcile_in_the_same_transaction(sql_store):
    a, b, c = _seed_rooms(sql_store, "A", "B", "C")
    sql_store.create_tenant(_tenant_data(a.id))
    sql_store.create_tenant(_tenant_data(b.id))
    moved_out = sql_store.create_tenant(_tenant_data(c.id))
    assert _flags(sql_store) == {"A": True, "B": True, "C": True}

    sql_store.update_tenant(moved_out.id, {"is_active": False})
    assert _flags(sql_store) == {"A": True, "B": True, "C": False}


def test_sync_repairs_drift_and_is_idempotent(sql_store, session_factory):
    a, b, c = _seed_rooms(sql_store, "A", "B", "C")
    sql_store.create_tenant(_tenant_data(a.id))
    sql_store.create_tenant(_tenant_data(b.id))

    # Corrupt the flags behind the store's back
    db = session_factory()
    db.query(Room).update({Room.is_occupied: True}, synchronize_session=False)
    db.query(Room).filter(Room.room_number == "A").update({Room.is_occupied: False}, synchronize_session=False)
    db.commit()
    db.close()

    result = sql_store.sync_room_occupancy()
    assert result.reconciled is True
    assert (result.occupied_rooms, result.total_rooms) == (2, 3)
    assert _flags(sql_store) == {"A": True, "B": True, "C": False}

    again = sql_store.sync_room_occupancy()
    assert again == result
    assert _flags(sql_store) == {"A": True, "B": True, "C": False}


def test_reassignment_moves_the_flag(sql_store):
    a, b = _seed_rooms(sql_store, "A", "B")
    tenant = sql_store.create_tenant(_tenant_data(a.id))
    sql_store.update_tenant(tenant.id, {"room_id": b.id})
    assert _flags(sql_store) == {"A": False, "B": True}


def test_deleting_tenant_frees_room(sql_store):
    (a,) = _seed_rooms(sql_store, "A")
    tenant = sql_store.create_tenant(_tenant_data(a.id))
    assert sql_store.delete_tenant(tenant.id) is True
    assert _flags(sql_store) == {"A": False}
    assert sql_store.delete_tenant(tenant.id) is False
