"""
Parcel API Endpoints.

Booking, listing and the delivery-status transitions.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from zapshift.app.core.dependencies import get_current_principal
from zapshift.app.core.exceptions import NotFoundError
from zapshift.app.core.guards import ensure_self
from zapshift.app.core.identity import Principal
from zapshift.app.db.session import get_db
from zapshift.app.models.enums import ParcelStatus, PaymentState
from zapshift.app.models.parcel import Parcel
from zapshift.app.schemas.common import DeleteResult, InsertResult, UpdateResult
from zapshift.app.schemas.parcel import (
    ParcelCreate, ParcelResponse, ParcelStatusUpdate, StatusCount
)
from zapshift.app.services import parcel_lifecycle

router = APIRouter(tags=["Parcels"])


@router.get("/parcels/parcel-count", response_model=List[StatusCount])
async def count_parcels_by_status(db: AsyncSession = Depends(get_db)):
    """Number of parcels in each status (statuses with no parcels are omitted)."""
    result = await db.execute(
        select(Parcel.status, func.count(Parcel.id))
        .group_by(Parcel.status)
        .order_by(Parcel.status)
    )
    return [StatusCount(status=row[0], count=row[1]) for row in result.all()]


@router.get("/parcels", response_model=List[ParcelResponse])
async def list_parcels(
    payment: Optional[PaymentState] = Query(None, description="Filter by payment state"),
    status: Optional[ParcelStatus] = Query(None, description="Filter by delivery status"),
    db: AsyncSession = Depends(get_db)
):
    """List parcels, oldest first, optionally filtered by payment and status."""
    query = select(Parcel)
    if payment:
        query = query.where(Parcel.payment == payment)
    if status:
        query = query.where(Parcel.status == status)

    result = await db.execute(query.order_by(Parcel.created_at.asc(), Parcel.id.asc()))
    return result.scalars().all()


@router.get("/my-parcel", response_model=List[ParcelResponse])
async def list_my_parcels(
    email: Optional[str] = Query(None),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """The caller's own bookings, newest first."""
    ensure_self(principal, email)

    result = await db.execute(
        select(Parcel)
        .where(Parcel.created_by == email)
        .order_by(Parcel.created_at.desc(), Parcel.id.desc())
    )
    return result.scalars().all()


@router.patch("/parcels/update-status", response_model=UpdateResult)
async def update_parcel_status(
    payload: ParcelStatusUpdate,
    db: AsyncSession = Depends(get_db)
):
    """
    Advance a parcel's delivery status.

    Allowed moves: rider-assigned → in-transit → delivered | service-center-delivered.
    """
    matched, modified = await parcel_lifecycle.update_status(db, payload.parcel_id, payload.status)
    return UpdateResult(matched_count=matched, modified_count=modified)


@router.get("/parcels/{parcel_id}", response_model=ParcelResponse)
async def get_parcel(
    parcel_id: int = Path(..., description="Parcel ID"),
    db: AsyncSession = Depends(get_db)
):
    parcel = await db.get(Parcel, parcel_id)
    if parcel is None:
        raise NotFoundError("Parcel not found")
    return parcel


@router.post("/parcels", response_model=InsertResult, status_code=status.HTTP_201_CREATED)
async def create_parcel(
    payload: ParcelCreate,
    db: AsyncSession = Depends(get_db)
):
    """Book a parcel. It starts ``pending`` and ``unpaid``."""
    parcel = await parcel_lifecycle.create_parcel(db, payload)
    return InsertResult(inserted_id=parcel.id)


@router.delete("/parcels/{parcel_id}", response_model=DeleteResult)
async def delete_parcel(
    parcel_id: int = Path(..., description="Parcel ID"),
    db: AsyncSession = Depends(get_db)
):
    """Delete a parcel; ``deletedCount`` is 0 when it did not exist."""
    result = await db.execute(delete(Parcel).where(Parcel.id == parcel_id))
    deleted = result.rowcount
    await db.commit()
    return DeleteResult(deleted_count=deleted)
