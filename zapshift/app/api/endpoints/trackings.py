"""
Tracking API Endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from zapshift.app.db.session import get_db
from zapshift.app.schemas.common import InsertResult
from zapshift.app.schemas.tracking import TrackingEventCreate, TrackingEventResponse
from zapshift.app.services.tracking import append_event, read_events

router = APIRouter(prefix="/trackings", tags=["Tracking"])


@router.post("", response_model=InsertResult, status_code=status.HTTP_201_CREATED)
async def add_tracking_event(
    payload: TrackingEventCreate,
    db: AsyncSession = Depends(get_db)
):
    """Append an event to a parcel's tracking trail."""
    event = await append_event(db, payload)
    return InsertResult(inserted_id=event.id)


@router.get("/{tracking_id}", response_model=List[TrackingEventResponse])
async def get_tracking_events(
    tracking_id: str = Path(..., description="Parcel tracking ID"),
    db: AsyncSession = Depends(get_db)
):
    """All events for a tracking id, oldest first."""
    return await read_events(db, tracking_id)
