from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional

from app.api.deps import get_store
from app.services.billing import quantize_money
from app.services.occupancy import room_is_taken
from app.storage.base import RentalStore
from app.schemas.tenant import TenantCreate, TenantUpdate, TenantOut

router = APIRouter(prefix="/tenants", tags=["tenants"])

# Security deposit defaults to two months of rent
DEPOSIT_MONTHS = Decimal("2")

# Columns a PATCH may change but never clear
REQUIRED_FIELDS = ("name", "monthly_rent", "security_deposit", "move_in_date", "is_active")


def apply_tenant_filters(tenants: List[TenantOut], search: Optional[str]) -> List[TenantOut]:
    # basic search: name / phone / email / room number
    if search:
        needle = search.strip().lower()
        tenants = [
            t for t in tenants
            if needle in t.name.lower()
            or needle in (t.phone or "").lower()
            or needle in (t.email or "").lower()
            or needle in (t.room_number or "").lower()
        ]
    return tenants


def _check_room_free(store: RentalStore, room_id: int, tenant_id: Optional[int] = None):
    """404 when the room is missing, 409 when another active tenant already holds it."""
    room = store.get_room(room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    if room_is_taken(store.list_tenants(active=True), room_id, exclude_tenant_id=tenant_id):
        raise HTTPException(status_code=409, detail=f"Room {room.room_number} is already occupied")
    return room


@router.get("", response_model=List[TenantOut])
def list_tenants(
    store: RentalStore = Depends(get_store),
    active: Optional[bool] = Query(None, description="true = current tenants, false = moved out"),
    room_id: Optional[int] = Query(None),
    search: Optional[str] = Query(None, description="search by name/phone/email/room"),
):
    tenants = store.list_tenants(active=active)
    if room_id is not None:
        tenants = [t for t in tenants if t.room_id == room_id]
    return apply_tenant_filters(tenants, search)


@router.get("/{tenant_id}", response_model=TenantOut)
def get_tenant(tenant_id: int, store: RentalStore = Depends(get_store)):
    tenant = store.get_tenant(tenant_id)
    if not tenant:
        raise HTTPException(status_code=404, detail="Tenant not found")
    return tenant


@router.post("", response_model=TenantOut, status_code=201)
def create_tenant(payload: TenantCreate, store: RentalStore = Depends(get_store)):
    """
    Move a tenant into a vacant room.
    Rent defaults to the room's rent, the deposit to two months of it,
    and move-in to today.
    """
    room = _check_room_free(store, payload.room_id)

    data = payload.model_dump()
    if data["monthly_rent"] is None:
        data["monthly_rent"] = room.monthly_rent
    if data["security_deposit"] is None:
        data["security_deposit"] = quantize_money(data["monthly_rent"] * DEPOSIT_MONTHS)
    if data["move_in_date"] is None:
        data["move_in_date"] = date.today()

    return store.create_tenant(data)


@router.patch("/{tenant_id}", response_model=TenantOut)
def update_tenant(tenant_id: int, payload: TenantUpdate, store: RentalStore = Depends(get_store)):
    """
    Edit a tenant, including moving rooms and moving out (is_active=false).
    Moving out stamps move_out_date with today unless one is given.
    """
    tenant = store.get_tenant(tenant_id)
    if not tenant:
        raise HTTPException(status_code=404, detail="Tenant not found")

    data = payload.model_dump(exclude_unset=True)
    for field in REQUIRED_FIELDS:
        if field in data and data[field] is None:
            raise HTTPException(status_code=400, detail=f"{field} cannot be null")

    will_be_active = data.get("is_active", tenant.is_active)
    room_id = data.get("room_id", tenant.room_id)
    room_changed = "room_id" in data and data["room_id"] != tenant.room_id
    reactivated = will_be_active and not tenant.is_active

    room = None
    if will_be_active and room_id is not None and (room_changed or reactivated):
        room = _check_room_free(store, room_id, tenant_id=tenant_id)
    elif room_changed and room_id is not None:
        room = store.get_room(room_id)
        if not room:
            raise HTTPException(status_code=404, detail="Room not found")

    # Rent follows the new room unless the edit sets it
    if room_changed and room is not None and "monthly_rent" not in data:
        data["monthly_rent"] = room.monthly_rent

    if tenant.is_active and not will_be_active and "move_out_date" not in data:
        data["move_out_date"] = date.today()
    if reactivated and "move_out_date" not in data:
        data["move_out_date"] = None

    return store.update_tenant(tenant_id, data)


@router.delete("/{tenant_id}", status_code=204)
def delete_tenant(tenant_id: int, store: RentalStore = Depends(get_store)):
    """Removes the tenant with their readings and payments; bills keep their snapshot."""
    if not store.delete_tenant(tenant_id):
        raise HTTPException(status_code=404, detail="Tenant not found")
    return None
