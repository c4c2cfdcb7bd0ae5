from sqlalchemy import Column, String, Integer, DateTime, Date, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Reading(Base):
    """
    One meter reading per tenant per billing cycle. Append-only.

    meter_type selects which column group is populated:
      single -> previous_reading / current_reading
      double -> room_meter_* and kitchen_meter_*
    """
    __tablename__ = "readings"

    id = Column(Integer, primary_key=True, index=True)

    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    tenant = relationship("Tenant")

    reading_date = Column(Date, nullable=False, index=True)
    reading_date_nepali = Column(String(10), nullable=False, index=True)  # BS "2081-01-15"

    meter_type = Column(String(10), nullable=False, default="single")
    rate_per_unit = Column(Numeric(10, 2), nullable=False)  # snapshotted at entry time

    previous_reading = Column(Numeric(12, 2), nullable=True)
    current_reading = Column(Numeric(12, 2), nullable=True)

    room_meter_previous = Column(Numeric(12, 2), nullable=True)
    room_meter_current = Column(Numeric(12, 2), nullable=True)
    kitchen_meter_previous = Column(Numeric(12, 2), nullable=True)
    kitchen_meter_current = Column(Numeric(12, 2), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
