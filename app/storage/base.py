"""
Storage port shared by the hosted database adapter and the demo-mode local store.

Routes only talk to RentalStore. Inputs are plain dicts (already validated by
the request schemas), outputs are the pydantic *Out models, so the API layer
never sees ORM rows or raw JSON.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from app.schemas.bill import BillOut
from app.schemas.payment import PaymentOut
from app.schemas.reading import ReadingOut
from app.schemas.room import OccupancySyncOut, RoomOut
from app.schemas.tenant import TenantOut


class StorageError(Exception):
    """The backend could not complete the operation (database down, data file unreadable)."""


class RentalStore(ABC):
    backend: str = "unknown"

    # --- rooms ---

    @abstractmethod
    def list_rooms(self, occupied: Optional[bool] = None, floor: Optional[int] = None) -> List[RoomOut]:
        """Rooms ordered by room_number."""

    @abstractmethod
    def get_room(self, room_id: int) -> Optional[RoomOut]:
        ...

    @abstractmethod
    def get_room_by_number(self, room_number: str) -> Optional[RoomOut]:
        ...

    @abstractmethod
    def create_room(self, data: dict) -> RoomOut:
        ...

    @abstractmethod
    def update_room(self, room_id: int, data: dict) -> Optional[RoomOut]:
        ...

    @abstractmethod
    def delete_room(self, room_id: int) -> bool:
        ...

    # --- tenants ---
    # Adapters that reconcile occupancy do so inside every tenant write.

    @abstractmethod
    def list_tenants(self, active: Optional[bool] = None) -> List[TenantOut]:
        ...

    @abstractmethod
    def get_tenant(self, tenant_id: int) -> Optional[TenantOut]:
        ...

    @abstractmethod
    def create_tenant(self, data: dict) -> TenantOut:
        ...

    @abstractmethod
    def update_tenant(self, tenant_id: int, data: dict) -> Optional[TenantOut]:
        ...

    @abstractmethod
    def delete_tenant(self, tenant_id: int) -> bool:
        ...

    # --- readings (append-only) ---

    @abstractmethod
    def list_readings(self, tenant_id: Optional[int] = None) -> List[ReadingOut]:
        """Newest first (reading_date desc, then id desc)."""

    @abstractmethod
    def get_reading(self, reading_id: int) -> Optional[ReadingOut]:
        ...

    def latest_reading(self, tenant_id: int) -> Optional[ReadingOut]:
        readings = self.list_readings(tenant_id=tenant_id)
        return readings[0] if readings else None

    @abstractmethod
    def create_reading(self, data: dict) -> ReadingOut:
        ...

    # --- bills ---

    @abstractmethod
    def list_bills(self, tenant_id: Optional[int] = None, is_paid: Optional[bool] = None) -> List[BillOut]:
        """Newest first."""

    @abstractmethod
    def get_bill(self, bill_id: int) -> Optional[BillOut]:
        ...

    @abstractmethod
    def create_bill(self, data: dict) -> BillOut:
        ...

    @abstractmethod
    def set_bill_paid(self, bill_id: int, is_paid: bool) -> Optional[BillOut]:
        ...

    @abstractmethod
    def delete_bill(self, bill_id: int) -> bool:
        ...

    # --- payments (append-only) ---

    @abstractmethod
    def list_payments(self, tenant_id: Optional[int] = None, method: Optional[str] = None) -> List[PaymentOut]:
        ...

    @abstractmethod
    def create_payment(self, data: dict) -> PaymentOut:
        ...

    # --- housekeeping ---

    @abstractmethod
    def sync_room_occupancy(self) -> OccupancySyncOut:
        ...

    @abstractmethod
    def ping(self) -> bool:
        ...

    def close(self) -> None:
        pass
