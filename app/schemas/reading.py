from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Annotated, Literal, Optional, Union
from datetime import date, datetime
from decimal import Decimal

from app.core.nepali_date import parse_nepali_date
from app.services.billing import (
    single_meter_units,
    double_meter_units,
    electricity_cost,
)


def _validate_previous(v: Optional[Decimal]) -> Optional[Decimal]:
    if v is not None and v < 0:
        raise ValueError("previous reading cannot be negative")
    return v


def _validate_current(v: Decimal) -> Decimal:
    if v is None or v <= 0:
        raise ValueError("current reading is required and must be greater than 0")
    return v


class _ReadingCreateBase(BaseModel):
    tenant_id: int
    reading_date: Optional[date] = None  # defaults to today
    reading_date_nepali: Optional[str] = None  # defaults to BS of reading_date
    rate_per_unit: Optional[Decimal] = None  # defaults to previous reading's rate

    @field_validator("rate_per_unit")
    @classmethod
    def rate_positive(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v <= 0:
            raise ValueError("rate_per_unit must be greater than 0")
        return v

    @field_validator("reading_date_nepali")
    @classmethod
    def nepali_date_valid(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if parse_nepali_date(v) is None:
            raise ValueError("reading_date_nepali must be a BS date YYYY-MM-DD")
        return v


class SingleMeterReadingCreate(_ReadingCreateBase):
    meter_type: Literal["single"]
    previous_reading: Optional[Decimal] = None  # None -> last reading's current value
    current_reading: Decimal

    @field_validator("previous_reading")
    @classmethod
    def previous_non_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return _validate_previous(v)

    @field_validator("current_reading")
    @classmethod
    def current_positive(cls, v: Decimal) -> Decimal:
        return _validate_current(v)


class DoubleMeterReadingCreate(_ReadingCreateBase):
    meter_type: Literal["double"]
    room_meter_previous: Optional[Decimal] = None
    room_meter_current: Decimal
    kitchen_meter_previous: Optional[Decimal] = None
    kitchen_meter_current: Decimal

    @field_validator("room_meter_previous", "kitchen_meter_previous")
    @classmethod
    def previous_non_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return _validate_previous(v)

    @field_validator("room_meter_current", "kitchen_meter_current")
    @classmethod
    def current_positive(cls, v: Decimal) -> Decimal:
        return _validate_current(v)


# Request bodies: the meter_type literal picks the variant
ReadingCreate = Union[SingleMeterReadingCreate, DoubleMeterReadingCreate]


class _ReadingOutBase(BaseModel):
    id: int
    tenant_id: int
    reading_date: date
    reading_date_nepali: str
    rate_per_unit: Decimal
    # Computed from the meter values, never stored
    units_consumed: Decimal = Decimal("0")
    electricity_cost: Decimal = Decimal("0")
    created_at: datetime

    class Config:
        from_attributes = True


class SingleMeterReadingOut(_ReadingOutBase):
    meter_type: Literal["single"]
    previous_reading: Decimal
    current_reading: Decimal

    @model_validator(mode="after")
    def set_computed_amounts(self) -> "SingleMeterReadingOut":
        self.units_consumed = single_meter_units(self.previous_reading, self.current_reading)
        self.electricity_cost = electricity_cost(self.units_consumed, self.rate_per_unit)
        return self


class DoubleMeterReadingOut(_ReadingOutBase):
    meter_type: Literal["double"]
    room_meter_previous: Decimal
    room_meter_current: Decimal
    kitchen_meter_previous: Decimal
    kitchen_meter_current: Decimal

    @model_validator(mode="after")
    def set_computed_amounts(self) -> "DoubleMeterReadingOut":
        self.units_consumed = double_meter_units(
            self.room_meter_previous,
            self.room_meter_current,
            self.kitchen_meter_previous,
            self.kitchen_meter_current,
        )
        self.electricity_cost = electricity_cost(self.units_consumed, self.rate_per_unit)
        return self


ReadingOut = Annotated[
    Union[SingleMeterReadingOut, DoubleMeterReadingOut],
    Field(discriminator="meter_type"),
]


class ReadingDefaultsOut(BaseModel):
    """Pre-filled values for the next reading of a tenant."""
    tenant_id: int
    meter_type: Literal["single", "double"]
    previous_reading: Decimal = Decimal("0")
    room_meter_previous: Decimal = Decimal("0")
    kitchen_meter_previous: Decimal = Decimal("0")
    rate_per_unit: Decimal
    reading_date_nepali: str
