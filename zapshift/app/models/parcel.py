"""
Parcel database model.

A parcel is a booking created by a user and delivered by a rider.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime
from zapshift.app.core.timeutils import utcnow
from zapshift.app.db.session import Base
from zapshift.app.models.enums import ParcelStatus, PaymentState, db_enum


class Parcel(Base):
    """
    Parcel model for the delivery marketplace.

    ``status`` and ``payment`` are only changed through the lifecycle
    service, which guards every transition with a conditional update.
    """
    __tablename__ = "parcels"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    tracking_id = Column(String(64), unique=True, nullable=False, index=True)

    # Ownership
    created_by = Column(String(255), nullable=False, index=True)

    # Booking details
    title = Column(String(255), nullable=True)
    parcel_type = Column(String(50), nullable=True)
    weight = Column(Float, nullable=True)
    cost = Column(Float, nullable=False)

    sender_name = Column(String(255), nullable=True)
    sender_contact = Column(String(50), nullable=True)
    sender_region = Column(String(100), nullable=True)
    sender_district = Column(String(100), nullable=True)
    sender_address = Column(String(500), nullable=True)

    receiver_name = Column(String(255), nullable=True)
    receiver_contact = Column(String(50), nullable=True)
    receiver_region = Column(String(100), nullable=True)
    receiver_district = Column(String(100), nullable=True)
    receiver_address = Column(String(500), nullable=True)

    # Lifecycle
    payment = Column(db_enum(PaymentState, "payment_state"), default=PaymentState.UNPAID, nullable=False, index=True)
    status = Column(db_enum(ParcelStatus, "parcel_status"), default=ParcelStatus.PENDING, nullable=False, index=True)
    rider_id = Column(Integer, nullable=True, index=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    picked_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Parcel(id={self.id}, tracking_id='{self.tracking_id}', status='{self.status.value}')>"
