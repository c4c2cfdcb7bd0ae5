from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional

from app.api.deps import get_store
from app.core.config import settings
from app.core.nepali_date import nepali_date_string, today_nepali
from app.storage.base import RentalStore
from app.schemas.reading import ReadingCreate, ReadingDefaultsOut, ReadingOut

router = APIRouter(prefix="/readings", tags=["readings"])


def _tenant_with_room(store: RentalStore, tenant_id: int):
    tenant = store.get_tenant(tenant_id)
    if not tenant:
        raise HTTPException(status_code=404, detail="Tenant not found")
    if tenant.room_id is None or tenant.room_type is None:
        raise HTTPException(status_code=400, detail=f"{tenant.name} has no room assigned")
    return tenant


def _defaults_for(store: RentalStore, tenant) -> ReadingDefaultsOut:
    """
    Previous values come from the tenant's latest reading (current values become
    the next previous values); the rate carries over too.
    A latest reading of the other meter type (tenant changed rooms) gives zeros.
    """
    last = store.latest_reading(tenant.id)
    defaults = ReadingDefaultsOut(
        tenant_id=tenant.id,
        meter_type=tenant.room_type,
        rate_per_unit=last.rate_per_unit if last else settings.DEFAULT_RATE_PER_UNIT,
        reading_date_nepali=today_nepali(),
    )
    if last is not None and last.meter_type == tenant.room_type:
        if last.meter_type == "double":
            defaults.room_meter_previous = last.room_meter_current
            defaults.kitchen_meter_previous = last.kitchen_meter_current
        else:
            defaults.previous_reading = last.current_reading
    return defaults


@router.get("", response_model=List[ReadingOut])
def list_readings(
    store: RentalStore = Depends(get_store),
    tenant_id: Optional[int] = Query(None, description="Filter by tenant ID"),
):
    """Newest first."""
    return store.list_readings(tenant_id=tenant_id)


@router.get("/defaults", response_model=ReadingDefaultsOut)
def reading_defaults(
    tenant_id: int = Query(..., description="Tenant the next reading is for"),
    store: RentalStore = Depends(get_store),
):
    tenant = _tenant_with_room(store, tenant_id)
    return _defaults_for(store, tenant)


@router.get("/{reading_id}", response_model=ReadingOut)
def get_reading(reading_id: int, store: RentalStore = Depends(get_store)):
    reading = store.get_reading(reading_id)
    if not reading:
        raise HTTPException(status_code=404, detail="Reading not found")
    return reading


@router.post("", response_model=ReadingOut, status_code=201)
def create_reading(payload: ReadingCreate, store: RentalStore = Depends(get_store)):
    """
    Record a meter reading. Readings are never edited afterwards.
    Omitted previous values and rate fall back to the same defaults as GET /readings/defaults.
    """
    tenant = _tenant_with_room(store, payload.tenant_id)
    if payload.meter_type != tenant.room_type:
        raise HTTPException(
            status_code=400,
            detail=f"Room {tenant.room_number} has a {tenant.room_type} meter, got a {payload.meter_type} reading",
        )

    defaults = _defaults_for(store, tenant)
    data = payload.model_dump()

    if payload.meter_type == "double":
        if data["room_meter_previous"] is None:
            data["room_meter_previous"] = defaults.room_meter_previous
        if data["kitchen_meter_previous"] is None:
            data["kitchen_meter_previous"] = defaults.kitchen_meter_previous
    elif data["previous_reading"] is None:
        data["previous_reading"] = defaults.previous_reading

    if data["rate_per_unit"] is None:
        data["rate_per_unit"] = defaults.rate_per_unit
    if data["reading_date"] is None:
        data["reading_date"] = date.today()
    if data["reading_date_nepali"] is None:
        data["reading_date_nepali"] = nepali_date_string(data["reading_date"])

    return store.create_reading(data)
