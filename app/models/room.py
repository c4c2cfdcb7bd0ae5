from sqlalchemy import Column, String, Integer, DateTime, Boolean, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Room(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)

    room_number = Column(String, nullable=False, unique=True, index=True)  # "101", "G-2"
    floor_number = Column(Integer, nullable=False, default=1)
    monthly_rent = Column(Numeric(10, 2), nullable=False, default=0)
    room_type = Column(String, nullable=False, default="single")  # single | double (meter topology)

    # Derived from active tenants; only the occupancy reconciler writes it
    is_occupied = Column(Boolean, nullable=False, default=False, index=True)
    description = Column(String, nullable=True)

    tenants = relationship("Tenant", back_populates="room")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now(), nullable=False)
