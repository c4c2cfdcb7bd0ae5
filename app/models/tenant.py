from sqlalchemy import Column, String, Integer, DateTime, Date, Boolean, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)

    room_id = Column(Integer, ForeignKey("rooms.id", ondelete="SET NULL"), nullable=True, index=True)
    room = relationship("Room", back_populates="tenants")

    # Copied from the room when assigned; may drift from the room's current rent
    monthly_rent = Column(Numeric(10, 2), nullable=False, default=0)
    security_deposit = Column(Numeric(10, 2), nullable=False, default=0)

    move_in_date = Column(Date, nullable=False)
    move_out_date = Column(Date, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now(), nullable=False)

    @property
    def room_number(self):
        return self.room.room_number if self.room is not None else None

    @property
    def room_type(self):
        return self.room.room_type if self.room is not None else None
