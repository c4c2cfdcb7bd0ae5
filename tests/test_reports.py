import csv
import io
from datetime import date
from decimal import Decimal

import gspread

from app.core import google_sheets
from app.services.exports import BILL_HEADERS, TENANT_HEADERS


def _csv(response):
    return list(csv.reader(io.StringIO(response.text)))


def test_health_and_status(client):
    assert client.get("/health").json() == {"ok": True, "service": "backend"}
    status = client.get("/status").json()
    assert status["storage"] == "database"
    assert status["connected"] is True
    assert status["mode"] in ("demo", "production")


def test_summary_counts(client, make_room, make_tenant, make_reading):
    a = make_room("101")
    make_room("102")
    tenant = make_tenant(a["id"])
    reading = make_reading(tenant["id"], current="150", rate="15")
    bill = client.post("/bills", json={"tenant_id": tenant["id"], "reading_id": reading["id"]}).json()
    client.post("/payments", json={"tenant_id": tenant["id"], "amount": "1000"})

    data = client.get("/summary").json()
    assert (data["total_rooms"], data["occupied_rooms"], data["vacant_rooms"]) == (2, 1, 1)
    assert (data["active_tenants"], data["total_tenants"]) == (1, 1)
    assert (data["total_readings"], data["total_bills"], data["unpaid_bills"]) == (1, 1, 1)
    assert Decimal(data["unpaid_amount"]) == Decimal(bill["total_amount"]) == Decimal("10250")
    assert Decimal(data["total_payments"]) == Decimal("1000")
    assert data["last_reading_date_nepali"] == reading["reading_date_nepali"]


def test_csv_export_of_tenants(client, make_room, make_tenant):
    make_tenant(make_room("101")["id"], name="Hari", phone="9861234567")

    r = client.get("/exports/tenants.csv")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert f"tenants_{date.today().isoformat()}.csv" in r.headers["content-disposition"]

    rows = _csv(r)
    assert rows[0] == TENANT_HEADERS
    assert rows[1][1:5] == ["Hari", "9861234567", "", "101"]
    assert rows[1][8] == "Active"


def test_csv_export_of_bills_and_unknown_entity(client, make_room, make_tenant, make_reading):
    tenant = make_tenant(make_room("101")["id"], name="Sita")
    reading = make_reading(tenant["id"], current="120")
    client.post(
        "/bills",
        json={"tenant_id": tenant["id"], "reading_id": reading["id"], "bill_date_nepali": "2081-04-10"},
    )

    rows = _csv(client.get("/exports/bills.csv"))
    assert rows[0] == BILL_HEADERS
    assert rows[1][1:4] == ["Sita", "101", "2081-04-10"]
    assert rows[1][9] == "Unpaid"

    assert client.get("/exports/invoices.csv").status_code == 404


def test_backup_disabled_by_default(client):
    assert client.post("/backup/sheets").status_code == 400


class FakeWorksheet:
    def __init__(self):
        self.values = [["stale"]]

    def clear(self):
        self.values = []

    def update(self, range_name=None, values=None, value_input_option=None):
        self.values = values


class FakeSpreadsheet:
    def __init__(self, broken=()):
        self.sheets = {}
        self.broken = set(broken)

    def worksheet(self, title):
        if title in self.broken:
            raise RuntimeError("quota exceeded")
        if title not in self.sheets:
            raise gspread.WorksheetNotFound(title)
        return self.sheets[title]

    def add_worksheet(self, title, rows, cols):
        self.sheets[title] = FakeWorksheet()
        return self.sheets[title]


def test_backup_overwrites_each_sheet(local_store):
    spreadsheet = FakeSpreadsheet()
    result = google_sheets.backup_to_sheets(local_store, spreadsheet=spreadsheet)

    assert result.ok is True
    assert result.backed_up == {"Tenants": 3, "Readings": 3, "Bills": 0, "Payments": 0}
    tenants_sheet = spreadsheet.sheets["Tenants"].values
    assert tenants_sheet[0] == TENANT_HEADERS
    assert len(tenants_sheet) == 4

    # a second run replaces rather than appends
    google_sheets.backup_to_sheets(local_store, spreadsheet=spreadsheet)
    assert len(spreadsheet.sheets["Tenants"].values) == 4


def test_backup_failure_is_reported_not_raised(local_store):
    result = google_sheets.backup_to_sheets(local_store, spreadsheet=FakeSpreadsheet(broken={"Bills"}))
    assert result.ok is False
    assert "quota exceeded" in result.errors["Bills"]
    assert result.backed_up["Payments"] == 0
