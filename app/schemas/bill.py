from pydantic import BaseModel, field_validator, model_validator
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

from app.core.nepali_date import format_bilingual_date, parse_nepali_date
from app.services.billing import format_currency


class BillCreate(BaseModel):
    tenant_id: int
    reading_id: int
    bill_date: Optional[date] = None  # defaults to today
    bill_date_nepali: Optional[str] = None  # defaults to BS of bill_date
    rent_amount: Optional[Decimal] = None  # defaults to the room's rent
    previous_balance: Decimal = Decimal("0")  # + remaining from last month, - advance paid
    notes: Optional[str] = None

    @field_validator("rent_amount")
    @classmethod
    def rent_non_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("rent_amount cannot be negative")
        return v

    @field_validator("bill_date_nepali")
    @classmethod
    def nepali_date_valid(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if parse_nepali_date(v) is None:
            raise ValueError("bill_date_nepali must be a BS date YYYY-MM-DD")
        return v


class BillUpdate(BaseModel):
    """Bills are immutable apart from the paid flag; corrections mean delete and recreate."""
    is_paid: bool


class BillPreviewOut(BaseModel):
    tenant_id: int
    reading_id: int
    tenant_name: str
    room_number: Optional[str] = None
    units_consumed: Decimal
    rate_per_unit: Decimal
    rent_amount: Decimal
    electricity_amount: Decimal
    previous_balance: Decimal
    total_amount: Decimal
    total_display: str = ""

    @model_validator(mode="after")
    def set_display(self) -> "BillPreviewOut":
        self.total_display = format_currency(self.total_amount)
        return self


class BillOut(BaseModel):
    id: int
    tenant_id: Optional[int] = None
    reading_id: Optional[int] = None
    tenant_name: str
    room_number: Optional[str] = None
    bill_date: date
    bill_date_nepali: str
    rent_amount: Decimal
    electricity_amount: Decimal
    previous_balance: Decimal
    total_amount: Decimal
    is_paid: bool
    paid_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    # Display strings for printed bills, derived on every load
    bill_date_display: str = ""
    total_display: str = ""

    class Config:
        from_attributes = True

    @model_validator(mode="after")
    def set_display(self) -> "BillOut":
        self.bill_date_display = format_bilingual_date(self.bill_date)
        self.total_display = format_currency(self.total_amount)
        return self
