"""
Cashout request database model.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime
from zapshift.app.core.timeutils import utcnow
from zapshift.app.db.session import Base
from zapshift.app.models.enums import CashoutStatus, db_enum


class CashoutRequest(Base):
    """
    A rider's request to withdraw earnings.

    Resolved by an admin exactly once; ``processed_at`` stays null while pending.
    """
    __tablename__ = "cashouts"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    rider_id = Column(Integer, nullable=False, index=True)
    rider_email = Column(String(255), nullable=False)
    amount = Column(Float, nullable=False)
    status = Column(db_enum(CashoutStatus, "cashout_status"), default=CashoutStatus.PENDING, nullable=False, index=True)
    requested_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    processed_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<CashoutRequest(id={self.id}, rider_id={self.rider_id}, status='{self.status.value}')>"
