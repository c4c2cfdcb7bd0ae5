from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_store
from app.core.config import settings
from app.core.google_sheets import backup_to_sheets
from app.storage.base import RentalStore
from app.schemas.report import BackupResultOut

router = APIRouter(prefix="/backup", tags=["backup"])


@router.post("/sheets", response_model=BackupResultOut)
def backup_sheets(store: RentalStore = Depends(get_store)):
    """
    Push tenants, readings, bills and payments to the configured Google Sheet.
    Sheet failures come back in the response body; they never fail the request.
    """
    if not settings.ENABLE_SHEETS_BACKUP:
        raise HTTPException(status_code=400, detail="Google Sheets backup is disabled (ENABLE_SHEETS_BACKUP)")
    return backup_to_sheets(store)
