"""canonicalise legacy columns

Revision ID: 1f6a0b3c9d27
Revises:
Create Date: 2026-03-02 09:31:05.774120

Two older shapes are brought forward here.

The first drafts linked tenants by room_number, kept readings in
meter_readings with electricity_* / water_* columns, and billed by
month_year / due_date with room_rent, water_amount and other_charges.
Later drafts stored BS date strings in bill_date / reading_date.

Each step only runs when its old shape is present, so this is a no-op on a
fresh database. Dropped legacy columns (water meter, other charges) are not
restored on downgrade.
"""
from calendar import monthrange
from datetime import date, datetime
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from app.core.nepali_date import format_nepali_date, nepali_date_string, parse_nepali_date, to_english_date


# revision identifiers, used by Alembic.
revision: str = "1f6a0b3c9d27"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Stored dates with a year from here on are BS strings, earlier ones are AD
BS_YEAR_FLOOR = 2060

LEGACY_READING_RENAMES = {
    "electricity_previous": "previous_reading",
    "electricity_reading": "current_reading",
    "electricity_rate": "rate_per_unit",
}
LEGACY_READING_DROPS = [
    "water_reading",
    "water_previous",
    "water_units",
    "water_rate",
    "electricity_units",
    "updated_at",
]
DOUBLE_METER_COLUMNS = [
    "room_meter_previous",
    "room_meter_current",
    "kitchen_meter_previous",
    "kitchen_meter_current",
]

LEGACY_BILL_RENAMES = {
    "room_rent": "rent_amount",
    "due_date": "bill_date",
}
LEGACY_BILL_DROPS = ["month_year", "water_amount", "other_charges"]


def _columns(table: str) -> dict:
    inspector = sa.inspect(op.get_bind())
    if not inspector.has_table(table):
        return {}
    return {c["name"]: c for c in inspector.get_columns(table)}


def _ad_date(value) -> date:
    """Stored legacy value -> AD date. Unreadable values fall back to today."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = parse_nepali_date(str(value)[:10]) if value else None
    if parsed is None:
        return date.today()
    if parsed.year < BS_YEAR_FLOOR:
        _, last_day = monthrange(parsed.year, parsed.month)
        return date(parsed.year, parsed.month, min(parsed.day, last_day))
    # BS months run to 32 days; clamp to the AD month end
    first = to_english_date(parsed.year, parsed.month, 1)
    _, last_day = monthrange(first.year, first.month)
    return first.replace(day=min(parsed.day, last_day))


def _bs_string(value, ad: date) -> str:
    parsed = parse_nepali_date(value) if isinstance(value, str) else None
    if parsed is not None and parsed.year >= BS_YEAR_FLOOR:
        return format_nepali_date(parsed)
    return nepali_date_string(ad)


def _split_dates(table: str, column: str) -> None:
    """One stored date column -> an AD <column> Date plus a <column>_nepali BS string."""
    cols = _columns(table)
    nepali_column = f"{column}_nepali"
    if column not in cols or nepali_column in cols:
        return

    legacy_column = f"{column}_legacy"
    with op.batch_alter_table(table) as batch:
        batch.alter_column(column, new_column_name=legacy_column)
    with op.batch_alter_table(table) as batch:
        batch.add_column(sa.Column(column, sa.Date(), nullable=True))
        batch.add_column(sa.Column(nepali_column, sa.String(length=10), nullable=True))

    bind = op.get_bind()
    t = sa.table(
        table,
        sa.column("id"),
        sa.column(legacy_column),
        sa.column(column, sa.Date),
        sa.column(nepali_column, sa.String),
    )
    rows = bind.execute(sa.select(t.c.id, t.c[legacy_column])).all()
    for row_id, value in rows:
        ad = _ad_date(value)
        bind.execute(
            t.update().where(t.c.id == row_id).values({column: ad, nepali_column: _bs_string(value, ad)})
        )

    with op.batch_alter_table(table) as batch:
        batch.drop_column(legacy_column)
        batch.alter_column(column, existing_type=sa.Date(), nullable=False)
        batch.alter_column(nepali_column, existing_type=sa.String(length=10), nullable=False)


def _join_dates(table: str, column: str) -> None:
    cols = _columns(table)
    if f"{column}_nepali" not in cols:
        return
    with op.batch_alter_table(table) as batch:
        batch.drop_column(column)
    with op.batch_alter_table(table) as batch:
        batch.alter_column(f"{column}_nepali", new_column_name=column)


def _link_tenants_to_rooms() -> None:
    tenant_cols = _columns("tenants")
    if "room_number" not in tenant_cols or "room_id" in tenant_cols:
        return
    with op.batch_alter_table("tenants") as batch:
        batch.add_column(sa.Column("room_id", sa.Integer(), nullable=True))
    op.execute(
        "UPDATE tenants SET room_id = "
        "(SELECT rooms.id FROM rooms WHERE rooms.room_number = tenants.room_number)"
    )
    with op.batch_alter_table("tenants") as batch:
        batch.create_foreign_key("fk_tenants_room_id", "rooms", ["room_id"], ["id"], ondelete="SET NULL")
        batch.create_index("ix_tenants_room_id", ["room_id"], unique=False)
        batch.drop_column("room_number")


def _map_legacy_readings() -> None:
    """electricity_* columns -> single meter readings; the water meter is dropped."""
    cols = _columns("readings")
    if "electricity_reading" not in cols:
        return
    with op.batch_alter_table("readings") as batch:
        for old, new in LEGACY_READING_RENAMES.items():
            if old in cols:
                batch.alter_column(old, new_column_name=new)
        for name in LEGACY_READING_DROPS:
            if name in cols:
                batch.drop_column(name)
    with op.batch_alter_table("readings") as batch:
        batch.add_column(sa.Column("meter_type", sa.String(length=10), nullable=False, server_default="single"))
        for name in DOUBLE_METER_COLUMNS:
            batch.add_column(sa.Column(name, sa.Numeric(12, 2), nullable=True))


def _map_legacy_bills() -> None:
    """
    month_year / due_date bills -> dated bills with a tenant snapshot.

    Water and other charges fold into previous_balance so the stored total
    still equals rent + electricity + previous balance.
    """
    cols = _columns("bills")
    if "room_rent" not in cols:
        return
    with op.batch_alter_table("bills") as batch:
        for old, new in LEGACY_BILL_RENAMES.items():
            if old in cols:
                batch.alter_column(old, new_column_name=new)
        batch.alter_column("tenant_id", existing_type=sa.Integer(), nullable=True)
    with op.batch_alter_table("bills") as batch:
        batch.add_column(sa.Column("reading_id", sa.Integer(), nullable=True))
        batch.add_column(sa.Column("tenant_name", sa.String(), nullable=True))
        batch.add_column(sa.Column("room_number", sa.String(), nullable=True))
        batch.add_column(sa.Column("previous_balance", sa.Numeric(10, 2), nullable=False, server_default="0"))
        batch.add_column(sa.Column("notes", sa.String(), nullable=True))

    extra = " + ".join(f"COALESCE({name}, 0)" for name in ("water_amount", "other_charges") if name in cols)
    if extra:
        op.execute(f"UPDATE bills SET previous_balance = {extra}")
    if "month_year" in cols:
        op.execute("UPDATE bills SET notes = 'Billing month ' || month_year WHERE month_year IS NOT NULL")
    op.execute(
        "UPDATE bills SET "
        "tenant_name = COALESCE((SELECT tenants.name FROM tenants WHERE tenants.id = bills.tenant_id), 'Unknown'), "
        "room_number = (SELECT rooms.room_number FROM rooms JOIN tenants ON tenants.room_id = rooms.id "
        "WHERE tenants.id = bills.tenant_id)"
    )

    with op.batch_alter_table("bills") as batch:
        for name in LEGACY_BILL_DROPS:
            if name in cols:
                batch.drop_column(name)
        batch.alter_column("tenant_name", existing_type=sa.String(), nullable=False)


def upgrade() -> None:
    """Bring draft-era tables to the current shape."""
    inspector = sa.inspect(op.get_bind())
    if inspector.has_table("meter_readings") and not inspector.has_table("readings"):
        op.rename_table("meter_readings", "readings")

    # Bill snapshots read room numbers through tenants.room_id
    _link_tenants_to_rooms()
    _map_legacy_readings()
    _map_legacy_bills()

    _split_dates("readings", "reading_date")
    _split_dates("bills", "bill_date")


def downgrade() -> None:
    """Restore the draft-era shape."""
    tenant_cols = _columns("tenants")
    if "room_id" in tenant_cols and "room_number" not in tenant_cols:
        with op.batch_alter_table("tenants") as batch:
            batch.add_column(sa.Column("room_number", sa.String(), nullable=True))
        op.execute(
            "UPDATE tenants SET room_number = "
            "(SELECT rooms.room_number FROM rooms WHERE rooms.id = tenants.room_id)"
        )
        with op.batch_alter_table("tenants") as batch:
            batch.drop_index("ix_tenants_room_id")
            batch.drop_constraint("fk_tenants_room_id", type_="foreignkey")
            batch.drop_column("room_id")

    _join_dates("bills", "bill_date")
    _join_dates("readings", "reading_date")

    inspector = sa.inspect(op.get_bind())
    if inspector.has_table("readings") and not inspector.has_table("meter_readings"):
        op.rename_table("readings", "meter_readings")
