"""
Rider API Endpoints.

Rider registration and lookup, parcel assignment, delivery views for
riders, and the admin moderation queue.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zapshift.app.core.exceptions import ForbiddenError, InvalidArgumentError, NotFoundError
from zapshift.app.core.guards import require_admin, require_rider
from zapshift.app.db.session import get_db
from zapshift.app.models.account import Account
from zapshift.app.models.enums import (
    ACTIVE_DELIVERY_STATUSES, COMPLETED_DELIVERY_STATUSES, RiderStatus
)
from zapshift.app.models.parcel import Parcel
from zapshift.app.models.rider import Rider
from zapshift.app.schemas.common import InsertResult
from zapshift.app.schemas.parcel import ParcelResponse, RiderAssignment, RiderAssignmentResult
from zapshift.app.schemas.rider import (
    RiderCreate, RiderResponse, RiderStatusResult, RiderStatusUpdate
)
from zapshift.app.services import parcel_lifecycle, rider_lifecycle

router = APIRouter(tags=["Riders"])


@router.post("/riders", response_model=InsertResult, status_code=status.HTTP_201_CREATED)
async def register_rider(
    payload: RiderCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Submit a rider application.

    Rejected applicants may apply again; a pending or active rider may not.
    """
    existing = await db.scalar(
        select(Rider).where(
            Rider.email == payload.email,
            Rider.status.in_([RiderStatus.PENDING, RiderStatus.ACTIVE]),
        )
    )
    if existing is not None:
        raise InvalidArgumentError(f"A rider application for {payload.email} already exists")

    rider = await rider_lifecycle.register_rider(db, payload)
    return InsertResult(inserted_id=rider.id)


@router.get("/rider", response_model=RiderResponse)
async def get_rider_by_email(
    email: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    if not email:
        raise InvalidArgumentError("Email is required")

    rider = await db.scalar(
        select(Rider).where(Rider.email == email).order_by(Rider.id.desc()).limit(1)
    )
    if rider is None:
        raise NotFoundError("Rider not found")
    return rider


@router.get("/riders", response_model=List[RiderResponse])
async def list_riders(
    district: Optional[str] = Query(None),
    preferred_district: Optional[str] = Query(None, alias="preferredDistrict"),
    db: AsyncSession = Depends(get_db)
):
    """Riders by preferred district, else by district, else all."""
    query = select(Rider)
    if preferred_district:
        query = query.where(Rider.preferred_district == preferred_district)
    elif district:
        query = query.where(Rider.district == district)

    result = await db.execute(query.order_by(Rider.id))
    return result.scalars().all()


@router.patch("/assign-rider", response_model=RiderAssignmentResult)
async def assign_rider(
    payload: RiderAssignment,
    db: AsyncSession = Depends(get_db)
):
    """
    Assign a rider to a pending parcel.

    Both write counts are reported; a 0 means that side did not change.
    """
    parcel_modified, rider_modified = await parcel_lifecycle.assign_rider(
        db, payload.parcel_id, payload.rider_id
    )
    return RiderAssignmentResult(
        success=bool(parcel_modified and rider_modified),
        parcel_modified=parcel_modified,
        rider_modified=rider_modified,
    )


@router.get("/rider/pending-delivery/{rider_id}", response_model=List[ParcelResponse])
async def pending_deliveries(
    rider_id: int = Path(..., description="Rider ID"),
    db: AsyncSession = Depends(get_db)
):
    """Parcels the rider still has to pick up or drop off, oldest first."""
    result = await db.execute(
        select(Parcel)
        .where(Parcel.rider_id == rider_id, Parcel.status.in_(ACTIVE_DELIVERY_STATUSES))
        .order_by(Parcel.created_at.asc(), Parcel.id.asc())
    )
    return result.scalars().all()


@router.get("/rider/completed-deliveries/{rider_id}", response_model=List[ParcelResponse])
async def completed_deliveries(
    rider_id: int = Path(..., description="Rider ID"),
    account: Account = Depends(require_rider),
    db: AsyncSession = Depends(get_db)
):
    """A rider's delivered parcels, newest first (riders only, own history only)."""
    rider = await db.get(Rider, rider_id)
    if rider is None or rider.email != account.email:
        raise ForbiddenError("Forbidden: not your delivery history")

    result = await db.execute(
        select(Parcel)
        .where(Parcel.rider_id == rider_id, Parcel.status.in_(COMPLETED_DELIVERY_STATUSES))
        .order_by(Parcel.created_at.desc(), Parcel.id.desc())
    )
    return result.scalars().all()


@router.get("/pending-riders", response_model=List[RiderResponse])
async def pending_riders(
    admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Rider applications awaiting review (admin-only)."""
    result = await db.execute(
        select(Rider).where(Rider.status == RiderStatus.PENDING).order_by(Rider.created_at.asc())
    )
    return result.scalars().all()


@router.get("/active-riders", response_model=List[RiderResponse])
async def active_riders(
    admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Approved riders, most recently registered first (admin-only)."""
    result = await db.execute(
        select(Rider).where(Rider.status == RiderStatus.ACTIVE).order_by(Rider.created_at.desc())
    )
    return result.scalars().all()


@router.patch("/riders/update-status", response_model=RiderStatusResult)
async def update_rider_status(
    payload: RiderStatusUpdate,
    admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Approve or reject a pending rider application (admin-only).

    Approval also turns the applicant's account into a rider account.
    The response has the same shape for both outcomes.
    """
    rider_modified, role_modified = await rider_lifecycle.resolve_application(
        db, payload.id, payload.status, resolved_by=admin.email
    )
    return RiderStatusResult(
        message=f"Application {payload.status.value}",
        updated=True,
        rider_modified=rider_modified,
        role_modified=role_modified,
    )
