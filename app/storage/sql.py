import logging
from contextlib import contextmanager
from datetime import date
from typing import List, Optional

from pydantic import TypeAdapter
from sqlalchemy import func, select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.models.bill import Bill
from app.models.payment import Payment
from app.models.reading import Reading
from app.models.room import Room
from app.models.tenant import Tenant
from app.schemas.bill import BillOut
from app.schemas.payment import PaymentOut
from app.schemas.reading import ReadingOut
from app.schemas.room import OccupancySyncOut, RoomOut
from app.schemas.tenant import TenantOut
from app.storage.base import RentalStore, StorageError

logger = logging.getLogger(__name__)

_reading_adapter = TypeAdapter(ReadingOut)

_SINGLE_FIELDS = ("previous_reading", "current_reading")
_DOUBLE_FIELDS = (
    "room_meter_previous",
    "room_meter_current",
    "kitchen_meter_previous",
    "kitchen_meter_current",
)


def reading_out(row: Reading) -> ReadingOut:
    """Turn a readings row into its meter_type variant; the other column group is ignored."""
    data = {
        "id": row.id,
        "tenant_id": row.tenant_id,
        "reading_date": row.reading_date,
        "reading_date_nepali": row.reading_date_nepali,
        "rate_per_unit": row.rate_per_unit,
        "meter_type": row.meter_type,
        "created_at": row.created_at,
    }
    fields = _DOUBLE_FIELDS if row.meter_type == "double" else _SINGLE_FIELDS
    for name in fields:
        data[name] = getattr(row, name)
    return _reading_adapter.validate_python(data)


class SqlRentalStore(RentalStore):
    """Hosted database adapter. One instance per request, wrapping one Session."""

    backend = "database"

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _transaction(self):
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Database operation failed")
            raise StorageError(str(e)) from e

    @contextmanager
    def _reading(self):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Database query failed")
            raise StorageError(str(e)) from e

    def _reconcile_occupancy(self) -> None:
        """
        One set-based statement: every room becomes occupied iff an active tenant references it.
        Runs inside the caller's transaction so readers never see the all-vacant intermediate state.
        """
        active_room_ids = select(Tenant.room_id).where(
            Tenant.is_active.is_(True),
            Tenant.room_id.isnot(None),
        )
        self.db.execute(
            update(Room)
            .values(is_occupied=Room.id.in_(active_room_ids))
            .execution_options(synchronize_session=False)
        )
        # ORM copies of rooms are stale after a bulk UPDATE
        self.db.expire_all()

    # --- rooms ---

    def list_rooms(self, occupied: Optional[bool] = None, floor: Optional[int] = None) -> List[RoomOut]:
        with self._reading():
            q = self.db.query(Room)
            if occupied is not None:
                q = q.filter(Room.is_occupied.is_(occupied))
            if floor is not None:
                q = q.filter(Room.floor_number == floor)
            return [RoomOut.model_validate(r) for r in q.order_by(Room.room_number).all()]

    def get_room(self, room_id: int) -> Optional[RoomOut]:
        with self._reading():
            room = self.db.get(Room, room_id)
            return RoomOut.model_validate(room) if room else None

    def get_room_by_number(self, room_number: str) -> Optional[RoomOut]:
        with self._reading():
            room = self.db.query(Room).filter(Room.room_number == room_number).first()
            return RoomOut.model_validate(room) if room else None

    def create_room(self, data: dict) -> RoomOut:
        room = Room(**data)
        with self._transaction():
            self.db.add(room)
            self.db.flush()
            self.db.refresh(room)
            out = RoomOut.model_validate(room)
        return out

    def update_room(self, room_id: int, data: dict) -> Optional[RoomOut]:
        with self._transaction():
            room = self.db.get(Room, room_id)
            if room is None:
                return None
            for k, v in data.items():
                setattr(room, k, v)
            self.db.flush()
            self.db.refresh(room)
            out = RoomOut.model_validate(room)
        return out

    def delete_room(self, room_id: int) -> bool:
        with self._transaction():
            room = self.db.get(Room, room_id)
            if room is None:
                return False
            self.db.delete(room)
        return True

    # --- tenants ---

    def _tenant_query(self):
        return self.db.query(Tenant).options(selectinload(Tenant.room))

    def list_tenants(self, active: Optional[bool] = None) -> List[TenantOut]:
        with self._reading():
            q = self._tenant_query()
            if active is not None:
                q = q.filter(Tenant.is_active.is_(active))
            return [TenantOut.model_validate(t) for t in q.order_by(Tenant.id.desc()).all()]

    def get_tenant(self, tenant_id: int) -> Optional[TenantOut]:
        with self._reading():
            tenant = self._tenant_query().filter(Tenant.id == tenant_id).first()
            return TenantOut.model_validate(tenant) if tenant else None

    def create_tenant(self, data: dict) -> TenantOut:
        tenant = Tenant(**data)
        with self._transaction():
            self.db.add(tenant)
            self.db.flush()
            self._reconcile_occupancy()
        return self.get_tenant(tenant.id)

    def update_tenant(self, tenant_id: int, data: dict) -> Optional[TenantOut]:
        with self._transaction():
            tenant = self.db.get(Tenant, tenant_id)
            if tenant is None:
                return None
            for k, v in data.items():
                setattr(tenant, k, v)
            self.db.flush()
            self._reconcile_occupancy()
        return self.get_tenant(tenant_id)

    def delete_tenant(self, tenant_id: int) -> bool:
        with self._transaction():
            tenant = self.db.get(Tenant, tenant_id)
            if tenant is None:
                return False
            self.db.delete(tenant)
            self.db.flush()
            self._reconcile_occupancy()
        return True

    # --- readings ---

    def list_readings(self, tenant_id: Optional[int] = None) -> List[ReadingOut]:
        with self._reading():
            q = self.db.query(Reading)
            if tenant_id is not None:
                q = q.filter(Reading.tenant_id == tenant_id)
            rows = q.order_by(Reading.reading_date.desc(), Reading.id.desc()).all()
            return [reading_out(r) for r in rows]

    def get_reading(self, reading_id: int) -> Optional[ReadingOut]:
        with self._reading():
            row = self.db.get(Reading, reading_id)
            return reading_out(row) if row else None

    def create_reading(self, data: dict) -> ReadingOut:
        row = Reading(**data)
        with self._transaction():
            self.db.add(row)
            self.db.flush()
            self.db.refresh(row)
            out = reading_out(row)
        return out

    # --- bills ---

    def list_bills(self, tenant_id: Optional[int] = None, is_paid: Optional[bool] = None) -> List[BillOut]:
        with self._reading():
            q = self.db.query(Bill)
            if tenant_id is not None:
                q = q.filter(Bill.tenant_id == tenant_id)
            if is_paid is not None:
                q = q.filter(Bill.is_paid.is_(is_paid))
            rows = q.order_by(Bill.bill_date.desc(), Bill.id.desc()).all()
            return [BillOut.model_validate(b) for b in rows]

    def get_bill(self, bill_id: int) -> Optional[BillOut]:
        with self._reading():
            bill = self.db.get(Bill, bill_id)
            return BillOut.model_validate(bill) if bill else None

    def create_bill(self, data: dict) -> BillOut:
        bill = Bill(**data)
        with self._transaction():
            self.db.add(bill)
            self.db.flush()
            self.db.refresh(bill)
            out = BillOut.model_validate(bill)
        return out

    def set_bill_paid(self, bill_id: int, is_paid: bool) -> Optional[BillOut]:
        with self._transaction():
            bill = self.db.get(Bill, bill_id)
            if bill is None:
                return None
            bill.is_paid = is_paid
            bill.paid_date = date.today() if is_paid else None
            self.db.flush()
            self.db.refresh(bill)
            out = BillOut.model_validate(bill)
        return out

    def delete_bill(self, bill_id: int) -> bool:
        with self._transaction():
            bill = self.db.get(Bill, bill_id)
            if bill is None:
                return False
            self.db.delete(bill)
        return True

    # --- payments ---

    def list_payments(self, tenant_id: Optional[int] = None, method: Optional[str] = None) -> List[PaymentOut]:
        with self._reading():
            q = self.db.query(Payment).options(
                selectinload(Payment.tenant).selectinload(Tenant.room)
            )
            if tenant_id is not None:
                q = q.filter(Payment.tenant_id == tenant_id)
            if method is not None:
                q = q.filter(Payment.payment_method == method)
            rows = q.order_by(Payment.payment_date.desc(), Payment.id.desc()).all()
            return [PaymentOut.model_validate(p) for p in rows]

    def create_payment(self, data: dict) -> PaymentOut:
        payment = Payment(**data)
        with self._transaction():
            self.db.add(payment)
            self.db.flush()
            self.db.refresh(payment)
            out = PaymentOut.model_validate(payment)
        return out

    # --- housekeeping ---

    def sync_room_occupancy(self) -> OccupancySyncOut:
        with self._transaction():
            self._reconcile_occupancy()
        with self._reading():
            total = self.db.query(func.count(Room.id)).scalar() or 0
            occupied = (
                self.db.query(func.count(Room.id)).filter(Room.is_occupied.is_(True)).scalar() or 0
            )
        logger.info("Room occupancy synced: %s of %s rooms occupied", occupied, total)
        return OccupancySyncOut(occupied_rooms=occupied, total_rooms=total, reconciled=True)

    def ping(self) -> bool:
        try:
            self.db.execute(text("select 1"))
            return True
        except SQLAlchemyError:
            logger.exception("Database ping failed")
            return False

    def close(self) -> None:
        self.db.close()
