from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional

from app.api.deps import get_store
from app.core.nepali_date import nepali_date_string, nepali_month_of
from app.services.billing import bill_total, quantize_money
from app.storage.base import RentalStore
from app.schemas.bill import BillCreate, BillUpdate, BillOut, BillPreviewOut

router = APIRouter(prefix="/bills", tags=["bills"])


def apply_bill_filters(
    bills: List[BillOut], nepali_month: Optional[str], search: Optional[str]
) -> List[BillOut]:
    if nepali_month:
        bills = [b for b in bills if nepali_month_of(b.bill_date_nepali) == nepali_month]

    # basic search: tenant name / room number
    if search:
        needle = search.strip().lower()
        bills = [
            b for b in bills
            if needle in b.tenant_name.lower() or needle in (b.room_number or "").lower()
        ]
    return bills


def _compute_bill(store: RentalStore, payload: BillCreate) -> BillPreviewOut:
    """
    total = rent + electricity + previous_balance.
    Electricity is the reading's own cost at the rate stored on the reading.
    """
    tenant = store.get_tenant(payload.tenant_id)
    if not tenant:
        raise HTTPException(status_code=404, detail="Tenant not found")

    reading = store.get_reading(payload.reading_id)
    if not reading:
        raise HTTPException(status_code=404, detail="Reading not found")
    if reading.tenant_id != tenant.id:
        raise HTTPException(status_code=400, detail="Reading does not belong to this tenant")

    rent = payload.rent_amount
    if rent is None:
        room = store.get_room(tenant.room_id) if tenant.room_id is not None else None
        rent = room.monthly_rent if room else tenant.monthly_rent

    rent = quantize_money(rent)
    previous_balance = quantize_money(payload.previous_balance)
    return BillPreviewOut(
        tenant_id=tenant.id,
        reading_id=reading.id,
        tenant_name=tenant.name,
        room_number=tenant.room_number,
        units_consumed=reading.units_consumed,
        rate_per_unit=reading.rate_per_unit,
        rent_amount=rent,
        electricity_amount=reading.electricity_cost,
        previous_balance=previous_balance,
        total_amount=bill_total(rent, reading.electricity_cost, previous_balance),
    )


@router.get("", response_model=List[BillOut])
def list_bills(
    store: RentalStore = Depends(get_store),
    tenant_id: Optional[int] = Query(None, description="Filter by tenant ID"),
    is_paid: Optional[bool] = Query(None),
    nepali_month: Optional[str] = Query(None, pattern="^(0[1-9]|1[0-2])$", description="BS month 01-12"),
    search: Optional[str] = Query(None, description="search by tenant name/room number"),
):
    bills = store.list_bills(tenant_id=tenant_id, is_paid=is_paid)
    return apply_bill_filters(bills, nepali_month, search)


@router.post("/preview", response_model=BillPreviewOut)
def preview_bill(payload: BillCreate, store: RentalStore = Depends(get_store)):
    """Compute the bill without saving it."""
    return _compute_bill(store, payload)


@router.post("", response_model=BillOut, status_code=201)
def create_bill(payload: BillCreate, store: RentalStore = Depends(get_store)):
    """
    Create a bill from a reading. Tenant name and room number are copied onto
    the bill so it still reads right after the tenant moves.
    """
    preview = _compute_bill(store, payload)
    bill_date = payload.bill_date or date.today()

    data = {
        "tenant_id": preview.tenant_id,
        "reading_id": preview.reading_id,
        "tenant_name": preview.tenant_name,
        "room_number": preview.room_number,
        "bill_date": bill_date,
        "bill_date_nepali": payload.bill_date_nepali or nepali_date_string(bill_date),
        "rent_amount": preview.rent_amount,
        "electricity_amount": preview.electricity_amount,
        "previous_balance": preview.previous_balance,
        "total_amount": preview.total_amount,
        "notes": payload.notes,
    }
    return store.create_bill(data)


@router.get("/{bill_id}", response_model=BillOut)
def get_bill(bill_id: int, store: RentalStore = Depends(get_store)):
    bill = store.get_bill(bill_id)
    if not bill:
        raise HTTPException(status_code=404, detail="Bill not found")
    return bill


@router.patch("/{bill_id}", response_model=BillOut)
def update_bill(bill_id: int, payload: BillUpdate, store: RentalStore = Depends(get_store)):
    """Mark a bill paid or unpaid. Paying stamps paid_date with today."""
    bill = store.set_bill_paid(bill_id, payload.is_paid)
    if not bill:
        raise HTTPException(status_code=404, detail="Bill not found")
    return bill


@router.delete("/{bill_id}", status_code=204)
def delete_bill(
    bill_id: int,
    confirm: bool = Query(False, description="must be true to actually delete"),
    store: RentalStore = Depends(get_store),
):
    bill = store.get_bill(bill_id)
    if not bill:
        raise HTTPException(status_code=404, detail="Bill not found")

    if not confirm:
        raise HTTPException(
            status_code=409,
            detail=f"Delete bill for {bill.tenant_name} - Room {bill.room_number or '-'}?",
        )

    store.delete_bill(bill_id)
    return None
