from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional

from app.api.deps import get_store
from app.services.billing import ZERO, quantize_money
from app.storage.base import RentalStore
from app.schemas.payment import PaymentCreate, PaymentListOut, PaymentMethod, PaymentOut

router = APIRouter(prefix="/payments", tags=["payments"])


def apply_payment_filters(payments: List[PaymentOut], search: Optional[str]) -> List[PaymentOut]:
    # basic search: tenant name / room number / description
    if search:
        needle = search.strip().lower()
        payments = [
            p for p in payments
            if needle in (p.tenant_name or "").lower()
            or needle in (p.room_number or "").lower()
            or needle in (p.description or "").lower()
        ]
    return payments


@router.get("", response_model=PaymentListOut)
def list_payments(
    store: RentalStore = Depends(get_store),
    tenant_id: Optional[int] = Query(None, description="Filter by tenant ID"),
    method: Optional[PaymentMethod] = Query(None, description="cash|bank_transfer|esewa|khalti|check"),
    search: Optional[str] = Query(None, description="search by tenant/room/description"),
):
    """Payments newest first, with the total of the filtered list."""
    items = apply_payment_filters(store.list_payments(tenant_id=tenant_id, method=method), search)
    total = quantize_money(sum((p.amount for p in items), ZERO))
    return PaymentListOut(items=items, total_amount=total)


@router.post("", response_model=PaymentOut, status_code=201)
def create_payment(payload: PaymentCreate, store: RentalStore = Depends(get_store)):
    """
    Record money received. A linked bill is not marked paid automatically;
    that stays a manual PATCH /bills/{id}.
    """
    tenant = store.get_tenant(payload.tenant_id)
    if not tenant:
        raise HTTPException(status_code=404, detail="Tenant not found")

    if payload.bill_id is not None:
        bill = store.get_bill(payload.bill_id)
        if not bill:
            raise HTTPException(status_code=404, detail="Bill not found")
        if bill.tenant_id != tenant.id:
            raise HTTPException(status_code=400, detail="Bill does not belong to this tenant")

    data = payload.model_dump()
    data["amount"] = quantize_money(data["amount"])
    if data["payment_date"] is None:
        data["payment_date"] = date.today()
    return store.create_payment(data)
