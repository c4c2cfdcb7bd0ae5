from pydantic import BaseModel, field_validator
from typing import List, Literal, Optional
from datetime import datetime
from decimal import Decimal

RoomType = Literal["single", "double"]


class RoomBase(BaseModel):
    room_number: str
    floor_number: int = 1
    monthly_rent: Decimal = Decimal("0")
    room_type: RoomType = "single"  # single = one meter, double = room + kitchen meters
    description: Optional[str] = None


class RoomCreate(RoomBase):
    @field_validator("room_number")
    @classmethod
    def room_number_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("room_number is required")
        return v

    @field_validator("monthly_rent")
    @classmethod
    def rent_non_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("monthly_rent cannot be negative")
        return v

    @field_validator("floor_number")
    @classmethod
    def floor_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("floor_number cannot be negative")
        return v


class RoomUpdate(BaseModel):
    # is_occupied is deliberately absent: only the occupancy sync writes it
    room_number: Optional[str] = None
    floor_number: Optional[int] = None
    monthly_rent: Optional[Decimal] = None
    room_type: Optional[RoomType] = None
    description: Optional[str] = None

    @field_validator("room_number")
    @classmethod
    def room_number_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("room_number cannot be blank")
        return v

    @field_validator("monthly_rent")
    @classmethod
    def rent_non_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("monthly_rent cannot be negative")
        return v


class RoomOut(RoomBase):
    id: int
    is_occupied: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RoomAvailabilityOut(BaseModel):
    total: int
    available: int
    occupied: int
    available_rooms: List[RoomOut] = []
    occupied_rooms: List[RoomOut] = []


class OccupancySyncOut(BaseModel):
    occupied_rooms: int
    total_rooms: int
    reconciled: bool  # False when the store does not reconcile (demo mode)
