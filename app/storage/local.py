"""
Demo-mode store: every collection is one JSON file (demo_<name>.json), read
and written whole. Seeded with example rows the first time a collection is
touched.

Occupancy is NOT reconciled here. Tenant writes only touch the tenant list,
so room flags keep whatever the seed or the last room edit left behind.
"""
import json
import logging
import os
import threading
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional

from pydantic import TypeAdapter
from pydantic_core import to_jsonable_python

from app.schemas.bill import BillOut
from app.schemas.payment import PaymentOut
from app.schemas.reading import ReadingOut
from app.schemas.room import OccupancySyncOut, RoomOut
from app.schemas.tenant import TenantOut
from app.storage.base import RentalStore, StorageError
from app.storage.seed import seed_collections

logger = logging.getLogger(__name__)

COLLECTIONS = ("rooms", "tenants", "readings", "bills", "payments")

_reading_adapter = TypeAdapter(ReadingOut)

# Joined in on read, never persisted
_TENANT_JOINED = {"room_number", "room_type"}
_PAYMENT_JOINED = {"tenant_name", "room_number"}
_READING_COMPUTED = {"units_consumed", "electricity_cost"}
_BILL_DISPLAY = {"bill_date_display", "total_display"}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _next_id(rows: List[dict]) -> int:
    return max((r["id"] for r in rows), default=0) + 1


def _newest_first(rows: List[dict], date_field: str) -> List[dict]:
    return sorted(rows, key=lambda r: (r[date_field], r["id"]), reverse=True)


class LocalRentalStore(RentalStore):
    backend = "local"

    def __init__(self, data_dir, seed: bool = True):
        self.data_dir = Path(data_dir)
        self.seed = seed
        self._lock = threading.RLock()

    # --- file access ---

    def _path(self, name: str) -> Path:
        return self.data_dir / f"demo_{name}.json"

    def _load(self, name: str) -> List[dict]:
        path = self._path(name)
        with self._lock:
            try:
                if not path.exists():
                    rows = seed_collections()[name] if self.seed else []
                    self._save(name, rows)
                    if rows:
                        logger.info("Seeded demo collection %s with %s rows", name, len(rows))
                    return rows
                with path.open("r", encoding="utf-8") as f:
                    rows = json.load(f)
            except (OSError, ValueError) as e:
                logger.exception("Failed to read demo collection %s", name)
                raise StorageError(f"cannot read {path}: {e}") from e
        if not isinstance(rows, list):
            raise StorageError(f"{path} does not hold a list")
        return rows

    def _save(self, name: str, rows: List[dict]) -> None:
        path = self._path(name)
        tmp = path.with_suffix(".json.tmp")
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(rows, f, ensure_ascii=False, indent=2)
            os.replace(tmp, path)
        except OSError as e:
            logger.exception("Failed to write demo collection %s", name)
            raise StorageError(f"cannot write {path}: {e}") from e

    def _find(self, rows: List[dict], row_id: int) -> Optional[dict]:
        return next((r for r in rows if r["id"] == row_id), None)

    def _insert(self, name: str, build: Callable[[int], dict]) -> dict:
        with self._lock:
            rows = self._load(name)
            row = build(_next_id(rows))
            rows.append(row)
            self._save(name, rows)
            return row

    def _patch(self, name: str, row_id: int, data: dict, stamp_updated: bool = True) -> Optional[dict]:
        with self._lock:
            rows = self._load(name)
            row = self._find(rows, row_id)
            if row is None:
                return None
            row.update(data)
            if stamp_updated:
                row["updated_at"] = _now()
            self._save(name, rows)
            return row

    def _remove(self, name: str, row_id: int) -> bool:
        with self._lock:
            rows = self._load(name)
            kept = [r for r in rows if r["id"] != row_id]
            if len(kept) == len(rows):
                return False
            self._save(name, kept)
            return True

    # --- rooms ---

    def list_rooms(self, occupied: Optional[bool] = None, floor: Optional[int] = None) -> List[RoomOut]:
        rooms = [RoomOut.model_validate(r) for r in self._load("rooms")]
        if occupied is not None:
            rooms = [r for r in rooms if r.is_occupied == occupied]
        if floor is not None:
            rooms = [r for r in rooms if r.floor_number == floor]
        return sorted(rooms, key=lambda r: r.room_number)

    def get_room(self, room_id: int) -> Optional[RoomOut]:
        row = self._find(self._load("rooms"), room_id)
        return RoomOut.model_validate(row) if row else None

    def get_room_by_number(self, room_number: str) -> Optional[RoomOut]:
        row = next((r for r in self._load("rooms") if r["room_number"] == room_number), None)
        return RoomOut.model_validate(row) if row else None

    def create_room(self, data: dict) -> RoomOut:
        def build(new_id: int) -> dict:
            now = _now()
            room = RoomOut(id=new_id, is_occupied=False, created_at=now, updated_at=now, **data)
            return room.model_dump(mode="json")

        return RoomOut.model_validate(self._insert("rooms", build))

    def update_room(self, room_id: int, data: dict) -> Optional[RoomOut]:
        row = self._patch("rooms", room_id, _as_json(data))
        return RoomOut.model_validate(row) if row else None

    def delete_room(self, room_id: int) -> bool:
        with self._lock:
            if not self._remove("rooms", room_id):
                return False
            # Same as the rooms FK: tenants keep their row, lose the room
            tenants = self._load("tenants")
            for t in tenants:
                if t.get("room_id") == room_id:
                    t["room_id"] = None
            self._save("tenants", tenants)
            return True

    # --- tenants ---

    def _tenant_out(self, row: dict, rooms_by_id: dict) -> TenantOut:
        room = rooms_by_id.get(row.get("room_id"))
        return TenantOut.model_validate(
            dict(
                row,
                room_number=room["room_number"] if room else None,
                room_type=room["room_type"] if room else None,
            )
        )

    def _rooms_by_id(self) -> dict:
        return {r["id"]: r for r in self._load("rooms")}

    def list_tenants(self, active: Optional[bool] = None) -> List[TenantOut]:
        rooms_by_id = self._rooms_by_id()
        rows = self._load("tenants")
        if active is not None:
            rows = [t for t in rows if t["is_active"] == active]
        rows = sorted(rows, key=lambda t: t["id"], reverse=True)
        return [self._tenant_out(t, rooms_by_id) for t in rows]

    def get_tenant(self, tenant_id: int) -> Optional[TenantOut]:
        row = self._find(self._load("tenants"), tenant_id)
        return self._tenant_out(row, self._rooms_by_id()) if row else None

    def create_tenant(self, data: dict) -> TenantOut:
        def build(new_id: int) -> dict:
            now = _now()
            tenant = TenantOut(id=new_id, is_active=True, created_at=now, updated_at=now, **data)
            return tenant.model_dump(mode="json", exclude=_TENANT_JOINED)

        row = self._insert("tenants", build)
        return self._tenant_out(row, self._rooms_by_id())

    def update_tenant(self, tenant_id: int, data: dict) -> Optional[TenantOut]:
        row = self._patch("tenants", tenant_id, _as_json(data))
        return self._tenant_out(row, self._rooms_by_id()) if row else None

    def delete_tenant(self, tenant_id: int) -> bool:
        with self._lock:
            if not self._remove("tenants", tenant_id):
                return False
            # Mirror the FK rules: readings and payments go, bills keep their snapshot
            readings = self._load("readings")
            dropped = {r["id"] for r in readings if r["tenant_id"] == tenant_id}
            self._save("readings", [r for r in readings if r["tenant_id"] != tenant_id])
            payments = self._load("payments")
            self._save("payments", [p for p in payments if p["tenant_id"] != tenant_id])
            bills = self._load("bills")
            for b in bills:
                if b.get("tenant_id") == tenant_id:
                    b["tenant_id"] = None
                if b.get("reading_id") in dropped:
                    b["reading_id"] = None
            self._save("bills", bills)
            return True

    # --- readings ---

    def list_readings(self, tenant_id: Optional[int] = None) -> List[ReadingOut]:
        rows = self._load("readings")
        if tenant_id is not None:
            rows = [r for r in rows if r["tenant_id"] == tenant_id]
        return [_reading_adapter.validate_python(r) for r in _newest_first(rows, "reading_date")]

    def get_reading(self, reading_id: int) -> Optional[ReadingOut]:
        row = self._find(self._load("readings"), reading_id)
        return _reading_adapter.validate_python(row) if row else None

    def create_reading(self, data: dict) -> ReadingOut:
        def build(new_id: int) -> dict:
            reading = _reading_adapter.validate_python(dict(data, id=new_id, created_at=_now()))
            return reading.model_dump(mode="json", exclude=_READING_COMPUTED)

        return _reading_adapter.validate_python(self._insert("readings", build))

    # --- bills ---

    def list_bills(self, tenant_id: Optional[int] = None, is_paid: Optional[bool] = None) -> List[BillOut]:
        rows = self._load("bills")
        if tenant_id is not None:
            rows = [b for b in rows if b.get("tenant_id") == tenant_id]
        if is_paid is not None:
            rows = [b for b in rows if b["is_paid"] == is_paid]
        return [BillOut.model_validate(b) for b in _newest_first(rows, "bill_date")]

    def get_bill(self, bill_id: int) -> Optional[BillOut]:
        row = self._find(self._load("bills"), bill_id)
        return BillOut.model_validate(row) if row else None

    def create_bill(self, data: dict) -> BillOut:
        def build(new_id: int) -> dict:
            now = _now()
            bill = BillOut(id=new_id, is_paid=False, created_at=now, updated_at=now, **data)
            return bill.model_dump(mode="json", exclude=_BILL_DISPLAY)

        return BillOut.model_validate(self._insert("bills", build))

    def set_bill_paid(self, bill_id: int, is_paid: bool) -> Optional[BillOut]:
        paid_date = date.today().isoformat() if is_paid else None
        row = self._patch("bills", bill_id, {"is_paid": is_paid, "paid_date": paid_date})
        return BillOut.model_validate(row) if row else None

    def delete_bill(self, bill_id: int) -> bool:
        return self._remove("bills", bill_id)

    # --- payments ---

    def _payment_out(self, row: dict, tenants_by_id: dict, rooms_by_id: dict) -> PaymentOut:
        tenant = tenants_by_id.get(row["tenant_id"])
        room = rooms_by_id.get(tenant.get("room_id")) if tenant else None
        return PaymentOut.model_validate(
            dict(
                row,
                tenant_name=tenant["name"] if tenant else None,
                room_number=room["room_number"] if room else None,
            )
        )

    def list_payments(self, tenant_id: Optional[int] = None, method: Optional[str] = None) -> List[PaymentOut]:
        tenants_by_id = {t["id"]: t for t in self._load("tenants")}
        rooms_by_id = self._rooms_by_id()
        rows = self._load("payments")
        if tenant_id is not None:
            rows = [p for p in rows if p["tenant_id"] == tenant_id]
        if method is not None:
            rows = [p for p in rows if p["payment_method"] == method]
        return [
            self._payment_out(p, tenants_by_id, rooms_by_id)
            for p in _newest_first(rows, "payment_date")
        ]

    def create_payment(self, data: dict) -> PaymentOut:
        def build(new_id: int) -> dict:
            payment = PaymentOut(id=new_id, created_at=_now(), **data)
            return payment.model_dump(mode="json", exclude=_PAYMENT_JOINED)

        row = self._insert("payments", build)
        tenants_by_id = {t["id"]: t for t in self._load("tenants")}
        return self._payment_out(row, tenants_by_id, self._rooms_by_id())

    # --- housekeeping ---

    def sync_room_occupancy(self) -> OccupancySyncOut:
        rooms = self._load("rooms")
        occupied = sum(1 for r in rooms if r["is_occupied"])
        logger.info("Demo store does not reconcile occupancy; %s of %s rooms flagged occupied", occupied, len(rooms))
        return OccupancySyncOut(occupied_rooms=occupied, total_rooms=len(rooms), reconciled=False)

    def ping(self) -> bool:
        try:
            for name in COLLECTIONS:
                self._load(name)
            return True
        except StorageError:
            return False


def _as_json(data: dict) -> dict:
    """Serialise a partial update the same way whole rows are stored."""
    return to_jsonable_python(data)
