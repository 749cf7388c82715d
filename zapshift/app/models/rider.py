"""
Rider database model.

Riders register themselves as ``pending`` and are approved or rejected by an admin.
"""

from sqlalchemy import Column, Integer, String, DateTime
from zapshift.app.core.timeutils import utcnow
from zapshift.app.db.session import Base
from zapshift.app.models.enums import RiderStatus, WorkStatus, db_enum


class Rider(Base):
    __tablename__ = "riders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    email = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    age = Column(Integer, nullable=True)
    nid = Column(String(100), nullable=True)

    region = Column(String(100), nullable=True)
    district = Column(String(100), nullable=False, index=True)
    preferred_district = Column(String(100), nullable=True, index=True)

    bike_brand = Column(String(100), nullable=True)
    bike_registration = Column(String(100), nullable=True)

    status = Column(db_enum(RiderStatus, "rider_status"), default=RiderStatus.PENDING, nullable=False, index=True)
    work_status = Column(db_enum(WorkStatus, "work_status"), default=WorkStatus.IDLE, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    status_updated_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Rider(id={self.id}, email='{self.email}', status='{self.status.value}')>"
