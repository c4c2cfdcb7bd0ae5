from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import date, datetime
from decimal import Decimal


def _strip_or_none(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


class TenantCreate(BaseModel):
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    room_id: int
    # Both default from the room when omitted
    monthly_rent: Optional[Decimal] = None
    security_deposit: Optional[Decimal] = None
    move_in_date: Optional[date] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name is required")
        return v

    @field_validator("phone", "email")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return _strip_or_none(v)

    @field_validator("monthly_rent", "security_deposit")
    @classmethod
    def amount_non_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("amount cannot be negative")
        return v


class TenantUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    room_id: Optional[int] = None
    monthly_rent: Optional[Decimal] = None
    security_deposit: Optional[Decimal] = None
    move_in_date: Optional[date] = None
    move_out_date: Optional[date] = None
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be blank")
        return v

    @field_validator("phone", "email")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return _strip_or_none(v)

    @field_validator("monthly_rent", "security_deposit")
    @classmethod
    def amount_non_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("amount cannot be negative")
        return v


class TenantOut(BaseModel):
    id: int
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    room_id: Optional[int] = None
    room_number: Optional[str] = None  # read through the room reference
    room_type: Optional[str] = None
    monthly_rent: Decimal
    security_deposit: Decimal
    move_in_date: date
    move_out_date: Optional[date] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
