from sqlalchemy import Column, String, Integer, DateTime, Date, Boolean, Numeric, ForeignKey
from sqlalchemy.sql import func
from app.core.database import Base


class Bill(Base):
    __tablename__ = "bills"

    id = Column(Integer, primary_key=True, index=True)

    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="SET NULL"), nullable=True, index=True)
    reading_id = Column(Integer, ForeignKey("readings.id", ondelete="SET NULL"), nullable=True, index=True)

    # Snapshot at creation so the bill still reads right after a move-out or room change
    tenant_name = Column(String, nullable=False)
    room_number = Column(String, nullable=True)

    bill_date = Column(Date, nullable=False)
    bill_date_nepali = Column(String(10), nullable=False, index=True)

    rent_amount = Column(Numeric(10, 2), nullable=False)
    electricity_amount = Column(Numeric(10, 2), nullable=False)
    previous_balance = Column(Numeric(10, 2), nullable=False, default=0)  # + owed, - advance
    total_amount = Column(Numeric(10, 2), nullable=False)

    is_paid = Column(Boolean, nullable=False, default=False, index=True)
    paid_date = Column(Date, nullable=True)
    notes = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now(), nullable=False)
