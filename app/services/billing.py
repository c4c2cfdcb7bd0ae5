"""
Bill arithmetic and meter consumption.

All amounts are Decimal. Currency values are quantized to 2 places with
ROUND_HALF_UP; consumption is never negative per meter.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    # str() first so floats like 0.1 don't drag in binary noise
    return Decimal(str(value))


def quantize_money(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def meter_units(previous, current) -> Decimal:
    """Consumption of a single meter, floored at 0 (entry error or rollover counts as nothing)."""
    return max(ZERO, to_decimal(current) - to_decimal(previous))


def single_meter_units(previous_reading, current_reading) -> Decimal:
    return meter_units(previous_reading, current_reading)


def double_meter_units(room_previous, room_current, kitchen_previous, kitchen_current) -> Decimal:
    """Room + kitchen meters, each floored independently before summing."""
    return meter_units(room_previous, room_current) + meter_units(kitchen_previous, kitchen_current)


def units_consumed(reading) -> Decimal:
    """
    Units for any reading-shaped object (ORM row, schema, or simple namespace).
    Dispatches on reading.meter_type ("single" or "double").
    """
    if getattr(reading, "meter_type", "single") == "double":
        return double_meter_units(
            reading.room_meter_previous,
            reading.room_meter_current,
            reading.kitchen_meter_previous,
            reading.kitchen_meter_current,
        )
    return single_meter_units(reading.previous_reading, reading.current_reading)


def electricity_cost(units, rate_per_unit) -> Decimal:
    return quantize_money(to_decimal(units) * to_decimal(rate_per_unit))


def bill_total(rent_amount, electricity_amount, previous_balance: Optional[Decimal] = None) -> Decimal:
    """
    rent + electricity + previous_balance.
    previous_balance is signed: positive carries debt forward, negative is an advance/credit.
    """
    return quantize_money(
        to_decimal(rent_amount) + to_decimal(electricity_amount) + to_decimal(previous_balance)
    )


def format_currency(amount) -> str:
    """Display form used on bills and exports, e.g. "रू 9,750.00"."""
    value = quantize_money(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}रू {abs(value):,.2f}"
