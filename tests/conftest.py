import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from app.main import app
from app.api.deps import get_store
from app.core.database import build_engine, build_session_factory, init_db
from app.storage.local import LocalRentalStore
from app.storage.sql import SqlRentalStore


@pytest.fixture
def session_factory():
    # One shared in-memory connection so every session sees the same tables
    engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield build_session_factory(engine)
    engine.dispose()


@pytest.fixture
def sql_store(session_factory):
    store = SqlRentalStore(session_factory())
    yield store
    store.close()


@pytest.fixture
def local_store(tmp_path):
    return LocalRentalStore(tmp_path)


def _client_for(factory):
    def override_get_store():
        store = factory()
        try:
            yield store
        finally:
            store.close()

    app.dependency_overrides[get_store] = override_get_store
    return TestClient(app)


@pytest.fixture
def client(session_factory):
    """API client backed by the SQL store on in-memory SQLite."""
    yield _client_for(lambda: SqlRentalStore(session_factory()))
    app.dependency_overrides.clear()


@pytest.fixture
def demo_client(local_store):
    """API client backed by the seeded demo JSON store."""
    yield _client_for(lambda: local_store)
    app.dependency_overrides.clear()


@pytest.fixture
def make_room(client):
    def _make(room_number="101", monthly_rent="8000", room_type="single", floor_number=1):
        r = client.post(
            "/rooms",
            json={
                "room_number": room_number,
                "monthly_rent": monthly_rent,
                "room_type": room_type,
                "floor_number": floor_number,
            },
        )
        assert r.status_code == 201, r.text
        return r.json()

    return _make


@pytest.fixture
def make_tenant(client):
    def _make(room_id, name="राम बहादुर", **extra):
        r = client.post("/tenants", json={"name": name, "room_id": room_id, **extra})
        assert r.status_code == 201, r.text
        return r.json()

    return _make


@pytest.fixture
def make_reading(client):
    def _make(tenant_id, current, previous=None, rate=None, **extra):
        body = {"tenant_id": tenant_id, "meter_type": "single", "current_reading": current, **extra}
        if previous is not None:
            body["previous_reading"] = previous
        if rate is not None:
            body["rate_per_unit"] = rate
        r = client.post("/readings", json=body)
        assert r.status_code == 201, r.text
        return r.json()

    return _make
