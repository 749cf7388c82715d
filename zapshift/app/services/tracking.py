"""
Tracking event log.

Append-only; events are read back oldest first.
"""

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zapshift.app.core.timeutils import utcnow
from zapshift.app.models.tracking_event import TrackingEvent
from zapshift.app.schemas.tracking import TrackingEventCreate


async def append_event(db: AsyncSession, data: TrackingEventCreate) -> TrackingEvent:
    event = TrackingEvent(**data.model_dump(), updated_at=utcnow())
    db.add(event)
    await db.commit()
    await db.refresh(event)
    return event


async def read_events(db: AsyncSession, tracking_id: str) -> List[TrackingEvent]:
    result = await db.execute(
        select(TrackingEvent)
        .where(TrackingEvent.tracking_id == tracking_id)
        .order_by(TrackingEvent.updated_at.asc(), TrackingEvent.id.asc())
    )
    return list(result.scalars().all())
