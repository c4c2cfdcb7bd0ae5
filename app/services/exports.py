"""
Flat rows for CSV export and the Google Sheets backup.

Each collection has a fixed header list; row builders turn the store's
output models into plain lists in the same column order.
"""
from typing import Callable, Dict, List, Tuple

from app.storage.base import RentalStore

ROOM_HEADERS = [
    "ID",
    "Room Number",
    "Floor",
    "Room Type",
    "Monthly Rent",
    "Occupied",
    "Description",
    "Created At",
]

TENANT_HEADERS = [
    "ID",
    "Name",
    "Phone",
    "Email",
    "Room Number",
    "Monthly Rent",
    "Security Deposit",
    "Move In Date",
    "Status",
    "Created At",
]

READING_HEADERS = [
    "ID",
    "Tenant Name",
    "Room Number",
    "Date",
    "Meter Type",
    "Previous Reading",
    "Current Reading",
    "Units Consumed",
    "Rate per Unit",
    "Electricity Cost",
    "Created At",
]

BILL_HEADERS = [
    "ID",
    "Tenant Name",
    "Room Number",
    "Bill Date",
    "Rent Amount",
    "Electricity Amount",
    "Previous Balance",
    "Total Amount",
    "Notes",
    "Paid Status",
    "Created At",
]

PAYMENT_HEADERS = [
    "ID",
    "Tenant Name",
    "Room Number",
    "Amount",
    "Payment Date",
    "Payment Method",
    "Description",
    "Created At",
]


def _iso(value) -> str:
    return value.isoformat() if value else ""


def room_rows(store: RentalStore) -> List[list]:
    return [
        [
            r.id,
            r.room_number,
            r.floor_number,
            r.room_type,
            str(r.monthly_rent),
            "Occupied" if r.is_occupied else "Vacant",
            r.description or "",
            _iso(r.created_at),
        ]
        for r in store.list_rooms()
    ]


def tenant_rows(store: RentalStore) -> List[list]:
    return [
        [
            t.id,
            t.name,
            t.phone or "",
            t.email or "",
            t.room_number or "",
            str(t.monthly_rent),
            str(t.security_deposit),
            _iso(t.move_in_date),
            "Active" if t.is_active else "Inactive",
            _iso(t.created_at),
        ]
        for t in store.list_tenants()
    ]


def reading_rows(store: RentalStore) -> List[list]:
    tenants = {t.id: t for t in store.list_tenants()}
    rows = []
    for r in store.list_readings():
        tenant = tenants.get(r.tenant_id)
        if r.meter_type == "double":
            # room meter + kitchen meter
            previous = f"{r.room_meter_previous} + {r.kitchen_meter_previous}"
            current = f"{r.room_meter_current} + {r.kitchen_meter_current}"
        else:
            previous, current = str(r.previous_reading), str(r.current_reading)
        rows.append(
            [
                r.id,
                tenant.name if tenant else "",
                (tenant.room_number or "") if tenant else "",
                r.reading_date_nepali,
                r.meter_type,
                previous,
                current,
                str(r.units_consumed),
                str(r.rate_per_unit),
                str(r.electricity_cost),
                _iso(r.created_at),
            ]
        )
    return rows


def bill_rows(store: RentalStore) -> List[list]:
    return [
        [
            b.id,
            b.tenant_name,
            b.room_number or "",
            b.bill_date_nepali,
            str(b.rent_amount),
            str(b.electricity_amount),
            str(b.previous_balance),
            str(b.total_amount),
            b.notes or "",
            "Paid" if b.is_paid else "Unpaid",
            _iso(b.created_at),
        ]
        for b in store.list_bills()
    ]


def payment_rows(store: RentalStore) -> List[list]:
    return [
        [
            p.id,
            p.tenant_name or "",
            p.room_number or "",
            str(p.amount),
            _iso(p.payment_date),
            p.payment_method,
            p.description or "",
            _iso(p.created_at),
        ]
        for p in store.list_payments()
    ]


EXPORTS: Dict[str, Tuple[List[str], Callable[[RentalStore], List[list]]]] = {
    "rooms": (ROOM_HEADERS, room_rows),
    "tenants": (TENANT_HEADERS, tenant_rows),
    "readings": (READING_HEADERS, reading_rows),
    "bills": (BILL_HEADERS, bill_rows),
    "payments": (PAYMENT_HEADERS, payment_rows),
}


def export_table(store: RentalStore, entity: str) -> Tuple[List[str], List[list]]:
    """Header row and data rows for one collection. KeyError for unknown names."""
    headers, build_rows = EXPORTS[entity]
    return headers, build_rows(store)
