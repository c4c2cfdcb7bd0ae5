import logging
from pathlib import Path

import gspread
from google.oauth2.service_account import Credentials

from app.core.config import settings
from app.schemas.report import BackupResultOut
from app.services.exports import export_table
from app.storage.base import RentalStore

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]

# Worksheet title -> exported collection
BACKUP_SHEETS = {
    "Tenants": "tenants",
    "Readings": "readings",
    "Bills": "bills",
    "Payments": "payments",
}


def _get_client() -> gspread.Client:
    """Build and return an authorised gspread client using the service-account JSON."""
    creds_path = Path(settings.GOOGLE_SHEETS_CREDENTIALS_FILE)
    if not creds_path.exists():
        raise FileNotFoundError(
            f"Google credentials file not found at {creds_path.resolve()}"
        )
    creds = Credentials.from_service_account_file(str(creds_path), scopes=SCOPES)
    return gspread.authorize(creds)


def _get_spreadsheet(client: gspread.Client) -> gspread.Spreadsheet:
    if not settings.GOOGLE_SHEETS_SPREADSHEET_ID:
        raise ValueError("GOOGLE_SHEETS_SPREADSHEET_ID is not set")
    return client.open_by_key(settings.GOOGLE_SHEETS_SPREADSHEET_ID)


def _get_or_create_worksheet(spreadsheet: gspread.Spreadsheet, title: str, cols: int) -> gspread.Worksheet:
    try:
        return spreadsheet.worksheet(title)
    except gspread.WorksheetNotFound:
        logger.info("Worksheet %s missing, creating it", title)
        return spreadsheet.add_worksheet(title=title, rows=100, cols=cols)


def write_sheet(spreadsheet: gspread.Spreadsheet, title: str, headers: list, rows: list) -> None:
    """Overwrite a whole worksheet: header row first, then every data row."""
    worksheet = _get_or_create_worksheet(spreadsheet, title, len(headers))
    worksheet.clear()
    worksheet.update(range_name="A1", values=[headers] + rows, value_input_option="USER_ENTERED")


def backup_to_sheets(store: RentalStore, spreadsheet=None) -> BackupResultOut:
    """
    Copy tenants, readings, bills and payments into their worksheets.
    A failing sheet is logged and reported; the others still run.
    """
    result = BackupResultOut(ok=True)
    try:
        if spreadsheet is None:
            spreadsheet = _get_spreadsheet(_get_client())
    except Exception as e:
        logger.exception("Failed to open Google Sheet for backup")
        result.ok = False
        result.errors["spreadsheet"] = str(e)
        return result

    for title, entity in BACKUP_SHEETS.items():
        try:
            headers, rows = export_table(store, entity)
            write_sheet(spreadsheet, title, headers, rows)
            result.backed_up[title] = len(rows)
            logger.info("Backed up %s %s rows to Google Sheet", len(rows), entity)
        except Exception as e:
            logger.exception("Failed to back up %s to Google Sheet", entity)
            result.ok = False
            result.errors[title] = str(e)
    return result
