from sqlalchemy import Column, BigInteger, Integer, ForeignKey, Date, Numeric, String, DateTime, func
from sqlalchemy.orm import relationship

from app.core.database import Base


class Payment(Base):
    __tablename__ = "payments"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True)

    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    # Loose link only: recording a payment never flips Bill.is_paid
    bill_id = Column(Integer, ForeignKey("bills.id", ondelete="SET NULL"), nullable=True, index=True)

    amount = Column(Numeric(10, 2), nullable=False)
    payment_date = Column(Date, nullable=False, index=True)
    payment_method = Column(String, nullable=False, default="cash")  # cash / bank_transfer / esewa / khalti / check
    description = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    tenant = relationship("Tenant")

    @property
    def tenant_name(self):
        return self.tenant.name if self.tenant is not None else None

    @property
    def room_number(self):
        return self.tenant.room_number if self.tenant is not None else None
