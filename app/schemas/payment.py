from pydantic import BaseModel, field_validator, model_validator
from typing import List, Literal, Optional
from datetime import date, datetime
from decimal import Decimal

from app.services.billing import format_currency

PaymentMethod = Literal["cash", "bank_transfer", "esewa", "khalti", "check"]


class PaymentCreate(BaseModel):
    tenant_id: int
    bill_id: Optional[int] = None
    amount: Decimal
    payment_date: Optional[date] = None  # defaults to today
    payment_method: PaymentMethod = "cash"
    description: Optional[str] = None

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("amount must be greater than 0")
        return v


class PaymentOut(BaseModel):
    id: int
    tenant_id: int
    tenant_name: Optional[str] = None
    room_number: Optional[str] = None
    bill_id: Optional[int] = None
    amount: Decimal
    payment_date: date
    payment_method: PaymentMethod
    description: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class PaymentListOut(BaseModel):
    items: List[PaymentOut]
    total_amount: Decimal
    total_display: str = ""

    @model_validator(mode="after")
    def set_display(self) -> "PaymentListOut":
        self.total_display = format_currency(self.total_amount)
        return self
