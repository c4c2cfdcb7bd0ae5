"""
Example rows written the first time the demo store touches a collection.

Shapes match what LocalRentalStore persists (the *Out models dumped in JSON
mode, without the fields joined in at read time).
"""

SEED_TIMESTAMP = "2024-05-01T00:00:00+00:00"

DEMO_ROOMS = [
    {
        "id": 1,
        "room_number": "101",
        "floor_number": 1,
        "monthly_rent": "8000.00",
        "room_type": "single",
        "is_occupied": True,
        "description": "Ground floor, street side",
    },
    {
        "id": 2,
        "room_number": "102",
        "floor_number": 1,
        "monthly_rent": "8500.00",
        "room_type": "single",
        "is_occupied": True,
        "description": None,
    },
    {
        "id": 3,
        "room_number": "201",
        "floor_number": 2,
        "monthly_rent": "9000.00",
        "room_type": "double",
        "is_occupied": True,
        "description": "Room with separate kitchen meter",
    },
    {
        "id": 4,
        "room_number": "202",
        "floor_number": 2,
        "monthly_rent": "9500.00",
        "room_type": "double",
        "is_occupied": False,
        "description": None,
    },
]

DEMO_TENANTS = [
    {
        "id": 1,
        "name": "राम बहादुर",
        "phone": "9841234567",
        "email": None,
        "room_id": 1,
        "monthly_rent": "8000.00",
        "security_deposit": "16000.00",
        "move_in_date": "2024-01-15",
        "move_out_date": None,
        "is_active": True,
    },
    {
        "id": 2,
        "name": "सीता कुमारी",
        "phone": "9851234567",
        "email": None,
        "room_id": 2,
        "monthly_rent": "8500.00",
        "security_deposit": "17000.00",
        "move_in_date": "2024-02-01",
        "move_out_date": None,
        "is_active": True,
    },
    {
        "id": 3,
        "name": "हरि प्रसाद",
        "phone": "9861234567",
        "email": None,
        "room_id": 3,
        "monthly_rent": "9000.00",
        "security_deposit": "18000.00",
        "move_in_date": "2024-03-10",
        "move_out_date": None,
        "is_active": True,
    },
]

# 150, 120 and 180 units at रू 15
DEMO_READINGS = [
    {
        "id": 1,
        "tenant_id": 1,
        "reading_date": "2024-05-15",
        "reading_date_nepali": "2081-01-15",
        "meter_type": "single",
        "rate_per_unit": "15.00",
        "previous_reading": "1200.00",
        "current_reading": "1350.00",
    },
    {
        "id": 2,
        "tenant_id": 2,
        "reading_date": "2024-05-16",
        "reading_date_nepali": "2081-01-16",
        "meter_type": "single",
        "rate_per_unit": "15.00",
        "previous_reading": "800.00",
        "current_reading": "920.00",
    },
    {
        "id": 3,
        "tenant_id": 3,
        "reading_date": "2024-05-17",
        "reading_date_nepali": "2081-01-17",
        "meter_type": "double",
        "rate_per_unit": "15.00",
        "room_meter_previous": "1000.00",
        "room_meter_current": "1100.00",
        "kitchen_meter_previous": "500.00",
        "kitchen_meter_current": "580.00",
    },
]


def _stamp(rows, *fields):
    return [dict(row, **{f: SEED_TIMESTAMP for f in fields}) for row in rows]


def seed_collections() -> dict:
    """Fresh copies, keyed by collection name."""
    return {
        "rooms": _stamp(DEMO_ROOMS, "created_at", "updated_at"),
        "tenants": _stamp(DEMO_TENANTS, "created_at", "updated_at"),
        "readings": _stamp(DEMO_READINGS, "created_at"),
        "bills": [],
        "payments": [],
    }
