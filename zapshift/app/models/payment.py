"""
Payment record database model.

Append-only history; one row per confirmed parcel payment.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime
from zapshift.app.core.timeutils import utcnow
from zapshift.app.db.session import Base


class PaymentRecord(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    parcel_id = Column(Integer, nullable=False, index=True)
    email = Column(String(255), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    payment_method = Column(String(100), nullable=True)
    transaction_id = Column(String(255), nullable=True)
    paid_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<PaymentRecord(id={self.id}, parcel_id={self.parcel_id}, amount={self.amount})>"
