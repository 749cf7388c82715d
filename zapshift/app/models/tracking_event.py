"""
Tracking event database model.

Append-only audit trail keyed by a parcel's tracking id.
"""

from sqlalchemy import Column, Integer, String, DateTime
from zapshift.app.core.timeutils import utcnow
from zapshift.app.db.session import Base


class TrackingEvent(Base):
    __tablename__ = "trackings"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    tracking_id = Column(String(64), nullable=False, index=True)
    status = Column(String(100), nullable=False)
    updated_by = Column(String(255), nullable=False)
    details = Column(String(1000), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<TrackingEvent(id={self.id}, tracking_id='{self.tracking_id}', status='{self.status}')>"
