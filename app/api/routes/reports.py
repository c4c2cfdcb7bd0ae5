"""
Dashboard summary and CSV downloads.
"""
from datetime import date

import csv
import io

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from app.api.deps import get_store
from app.services.billing import ZERO, quantize_money
from app.services.exports import EXPORTS, export_table
from app.storage.base import RentalStore
from app.schemas.report import SummaryOut

router = APIRouter(tags=["reports"])


@router.get("/summary", response_model=SummaryOut)
def get_summary(store: RentalStore = Depends(get_store)):
    """Counts for the dashboard cards plus money still owed on unpaid bills."""
    rooms = store.list_rooms()
    tenants = store.list_tenants()
    readings = store.list_readings()
    bills = store.list_bills()
    payments = store.list_payments()

    occupied = sum(1 for r in rooms if r.is_occupied)
    unpaid = [b for b in bills if not b.is_paid]

    return SummaryOut(
        total_rooms=len(rooms),
        occupied_rooms=occupied,
        vacant_rooms=len(rooms) - occupied,
        active_tenants=sum(1 for t in tenants if t.is_active),
        total_tenants=len(tenants),
        total_readings=len(readings),
        total_bills=len(bills),
        unpaid_bills=len(unpaid),
        unpaid_amount=quantize_money(sum((b.total_amount for b in unpaid), ZERO)),
        total_payments=quantize_money(sum((p.amount for p in payments), ZERO)),
        # readings come newest first
        last_reading_date_nepali=readings[0].reading_date_nepali if readings else None,
    )


# ---------------------------------------------------------------------------
# CSV download
# ---------------------------------------------------------------------------

@router.get("/exports/{entity}.csv")
def download_csv(entity: str, store: RentalStore = Depends(get_store)):
    """Download one collection (rooms, tenants, readings, bills, payments) as CSV."""
    if entity not in EXPORTS:
        raise HTTPException(status_code=404, detail=f"Unknown export: {entity}")

    headers, rows = export_table(store, entity)
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(headers)
    writer.writerows(rows)

    buf.seek(0)
    filename = f"{entity}_{date.today().isoformat()}.csv"
    return StreamingResponse(
        buf,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
