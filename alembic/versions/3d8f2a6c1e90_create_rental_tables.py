"""create rental tables

Revision ID: 3d8f2a6c1e90
Revises: 1f6a0b3c9d27
Create Date: 2026-03-02 09:40:17.513902

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3d8f2a6c1e90"
down_revision: Union[str, Sequence[str], None] = "1f6a0b3c9d27"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _has_table(name: str) -> bool:
    return sa.inspect(op.get_bind()).has_table(name)


def upgrade() -> None:
    """Create rooms, tenants, readings, bills and payments when missing."""
    if not _has_table("rooms"):
        op.create_table(
            "rooms",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("room_number", sa.String(), nullable=False),
            sa.Column("floor_number", sa.Integer(), nullable=False, server_default="1"),
            sa.Column("monthly_rent", sa.Numeric(10, 2), nullable=False, server_default="0"),
            sa.Column("room_type", sa.String(), nullable=False, server_default="single"),
            sa.Column("is_occupied", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("description", sa.String(), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_rooms_id", "rooms", ["id"], unique=False)
        op.create_index("ix_rooms_room_number", "rooms", ["room_number"], unique=True)
        op.create_index("ix_rooms_is_occupied", "rooms", ["is_occupied"], unique=False)

    if not _has_table("tenants"):
        op.create_table(
            "tenants",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(), nullable=False),
            sa.Column("phone", sa.String(), nullable=True),
            sa.Column("email", sa.String(), nullable=True),
            sa.Column("room_id", sa.Integer(), nullable=True),
            sa.Column("monthly_rent", sa.Numeric(10, 2), nullable=False, server_default="0"),
            sa.Column("security_deposit", sa.Numeric(10, 2), nullable=False, server_default="0"),
            sa.Column("move_in_date", sa.Date(), nullable=False),
            sa.Column("move_out_date", sa.Date(), nullable=True),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.ForeignKeyConstraint(["room_id"], ["rooms.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_tenants_id", "tenants", ["id"], unique=False)
        op.create_index("ix_tenants_name", "tenants", ["name"], unique=False)
        op.create_index("ix_tenants_room_id", "tenants", ["room_id"], unique=False)
        op.create_index("ix_tenants_is_active", "tenants", ["is_active"], unique=False)

    if not _has_table("readings"):
        op.create_table(
            "readings",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("tenant_id", sa.Integer(), nullable=False),
            sa.Column("reading_date", sa.Date(), nullable=False),
            sa.Column("reading_date_nepali", sa.String(length=10), nullable=False),
            sa.Column("meter_type", sa.String(length=10), nullable=False, server_default="single"),
            sa.Column("rate_per_unit", sa.Numeric(10, 2), nullable=False),
            sa.Column("previous_reading", sa.Numeric(12, 2), nullable=True),
            sa.Column("current_reading", sa.Numeric(12, 2), nullable=True),
            sa.Column("room_meter_previous", sa.Numeric(12, 2), nullable=True),
            sa.Column("room_meter_current", sa.Numeric(12, 2), nullable=True),
            sa.Column("kitchen_meter_previous", sa.Numeric(12, 2), nullable=True),
            sa.Column("kitchen_meter_current", sa.Numeric(12, 2), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_readings_id", "readings", ["id"], unique=False)
        op.create_index("ix_readings_tenant_id", "readings", ["tenant_id"], unique=False)
        op.create_index("ix_readings_reading_date", "readings", ["reading_date"], unique=False)
        op.create_index("ix_readings_reading_date_nepali", "readings", ["reading_date_nepali"], unique=False)

    if not _has_table("bills"):
        op.create_table(
            "bills",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("tenant_id", sa.Integer(), nullable=True),
            sa.Column("reading_id", sa.Integer(), nullable=True),
            sa.Column("tenant_name", sa.String(), nullable=False),
            sa.Column("room_number", sa.String(), nullable=True),
            sa.Column("bill_date", sa.Date(), nullable=False),
            sa.Column("bill_date_nepali", sa.String(length=10), nullable=False),
            sa.Column("rent_amount", sa.Numeric(10, 2), nullable=False),
            sa.Column("electricity_amount", sa.Numeric(10, 2), nullable=False),
            sa.Column("previous_balance", sa.Numeric(10, 2), nullable=False, server_default="0"),
            sa.Column("total_amount", sa.Numeric(10, 2), nullable=False),
            sa.Column("is_paid", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("paid_date", sa.Date(), nullable=True),
            sa.Column("notes", sa.String(), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="SET NULL"),
            sa.ForeignKeyConstraint(["reading_id"], ["readings.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_bills_id", "bills", ["id"], unique=False)
        op.create_index("ix_bills_tenant_id", "bills", ["tenant_id"], unique=False)
        op.create_index("ix_bills_reading_id", "bills", ["reading_id"], unique=False)
        op.create_index("ix_bills_bill_date_nepali", "bills", ["bill_date_nepali"], unique=False)
        op.create_index("ix_bills_is_paid", "bills", ["is_paid"], unique=False)

    if not _has_table("payments"):
        op.create_table(
            "payments",
            sa.Column("id", sa.BigInteger().with_variant(sa.Integer(), "sqlite"), nullable=False),
            sa.Column("tenant_id", sa.Integer(), nullable=False),
            sa.Column("bill_id", sa.Integer(), nullable=True),
            sa.Column("amount", sa.Numeric(10, 2), nullable=False),
            sa.Column("payment_date", sa.Date(), nullable=False),
            sa.Column("payment_method", sa.String(), nullable=False, server_default="cash"),
            sa.Column("description", sa.String(), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["bill_id"], ["bills.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_payments_id", "payments", ["id"], unique=False)
        op.create_index("ix_payments_tenant_id", "payments", ["tenant_id"], unique=False)
        op.create_index("ix_payments_bill_id", "payments", ["bill_id"], unique=False)
        op.create_index("ix_payments_payment_date", "payments", ["payment_date"], unique=False)


def downgrade() -> None:
    """Drop every rental table."""
    op.drop_table("payments")
    op.drop_table("bills")
    op.drop_table("readings")
    op.drop_table("tenants")
    op.drop_table("rooms")
