from pydantic import BaseModel
from decimal import Decimal
from typing import Dict, Optional


class StatusOut(BaseModel):
    """Which storage backend is live and whether it answers."""
    mode: str  # demo | production
    storage: str  # local | database
    connected: bool
    app_version: str


class SummaryOut(BaseModel):
    """Dashboard cards: rooms, tenants, readings, bills and money outstanding."""
    total_rooms: int = 0
    occupied_rooms: int = 0
    vacant_rooms: int = 0
    active_tenants: int = 0
    total_tenants: int = 0
    total_readings: int = 0
    total_bills: int = 0
    unpaid_bills: int = 0
    unpaid_amount: Decimal = Decimal("0")
    total_payments: Decimal = Decimal("0")
    last_reading_date_nepali: Optional[str] = None


class BackupResultOut(BaseModel):
    """Rows written per worksheet, and the error text for any sheet that failed."""
    ok: bool
    backed_up: Dict[str, int] = {}
    errors: Dict[str, str] = {}
