"""
Parcel lifecycle service.

Owns every write to a parcel's ``status`` and ``payment`` fields:

    pending → rider-assigned → in-transit → delivered | service-center-delivered

Each transition is a conditional update whose WHERE clause carries the
precondition, so two concurrent requests cannot both apply it. Paired writes
(parcel + rider, parcel + payment record) commit in one transaction.
"""

import logging
import secrets
from typing import Dict, FrozenSet, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from zapshift.app.core.exceptions import InvalidArgumentError, NotFoundError
from zapshift.app.core.timeutils import utcnow
from zapshift.app.models.enums import (
    ACTIVE_DELIVERY_STATUSES,
    COMPLETED_DELIVERY_STATUSES,
    ParcelStatus,
    PaymentState,
    WorkStatus,
)
from zapshift.app.models.parcel import Parcel
from zapshift.app.models.payment import PaymentRecord
from zapshift.app.models.rider import Rider
from zapshift.app.schemas.parcel import ParcelCreate
from zapshift.app.schemas.payment import PaymentConfirm

logger = logging.getLogger(__name__)

# Target status -> statuses it may be reached from via update-status.
# rider-assigned is only reachable through assign_rider.
STATUS_TRANSITIONS: Dict[ParcelStatus, FrozenSet[ParcelStatus]] = {
    ParcelStatus.IN_TRANSIT: frozenset({ParcelStatus.RIDER_ASSIGNED}),
    ParcelStatus.DELIVERED: frozenset({ParcelStatus.IN_TRANSIT}),
    ParcelStatus.SERVICE_CENTER_DELIVERED: frozenset({ParcelStatus.IN_TRANSIT}),
}


def generate_tracking_id() -> str:
    """Tracking ids look like ``ZS-20261019-7F3A9C``."""
    return f"ZS-{utcnow():%Y%m%d}-{secrets.token_hex(3).upper()}"


async def create_parcel(db: AsyncSession, data: ParcelCreate) -> Parcel:
    """Book a parcel; it always starts ``pending`` and ``unpaid``."""
    fields = data.model_dump(exclude_unset=True)
    fields["tracking_id"] = fields.get("tracking_id") or generate_tracking_id()

    parcel = Parcel(
        **fields,
        status=ParcelStatus.PENDING,
        payment=PaymentState.UNPAID,
        created_at=utcnow(),
    )
    db.add(parcel)
    try:
        await db.commit()
    except IntegrityError:
        # Only a client-supplied tracking id can collide
        await db.rollback()
        raise InvalidArgumentError("Tracking id already in use", details={"tracking_id": fields["tracking_id"]})
    await db.refresh(parcel)

    logger.info("Parcel %s booked by %s (tracking %s)", parcel.id, parcel.created_by, parcel.tracking_id)
    return parcel


async def assign_rider(db: AsyncSession, parcel_id: int, rider_id: int) -> Tuple[int, int]:
    """
    Assign a rider to a pending parcel and mark the rider ``on-work``.

    Both writes commit together; each count is reported as-is. The rider is
    only touched when the parcel actually moved, so a rider is never
    ``on-work`` without an active assignment.

    Returns:
        (parcel_modified, rider_modified)
    """
    parcel_result = await db.execute(
        update(Parcel)
        .where(Parcel.id == parcel_id, Parcel.status == ParcelStatus.PENDING)
        .values(status=ParcelStatus.RIDER_ASSIGNED, rider_id=rider_id)
    )
    parcel_modified = parcel_result.rowcount
    rider_modified = 0
    if parcel_modified:
        rider_result = await db.execute(
            update(Rider)
            .where(Rider.id == rider_id)
            .values(work_status=WorkStatus.ON_WORK)
        )
        rider_modified = rider_result.rowcount
    await db.commit()

    if parcel_modified and rider_modified:
        logger.info("Rider %s assigned to parcel %s", rider_id, parcel_id)
    else:
        logger.warning(
            "Partial rider assignment: parcel %s modified=%d, rider %s modified=%d",
            parcel_id, parcel_modified, rider_id, rider_modified,
        )
    return parcel_modified, rider_modified


async def _release_rider_if_idle(db: AsyncSession, rider_id: int) -> None:
    remaining = await db.scalar(
        select(func.count(Parcel.id)).where(
            Parcel.rider_id == rider_id,
            Parcel.status.in_(ACTIVE_DELIVERY_STATUSES),
        )
    )
    if not remaining:
        await db.execute(
            update(Rider).where(Rider.id == rider_id).values(work_status=WorkStatus.IDLE)
        )


async def update_status(db: AsyncSession, parcel_id: int, status: ParcelStatus) -> Tuple[int, int]:
    """
    Move a parcel along its delivery path.

    ``in-transit`` stamps ``picked_at``; ``delivered`` stamps ``delivered_at``.
    Finishing a delivery frees the rider when no other assignment is active.

    Returns:
        (matched, modified)

    Raises:
        NotFoundError: parcel does not exist
        InvalidArgumentError: the move is not allowed from the parcel's current status
    """
    parcel = await db.get(Parcel, parcel_id)
    if parcel is None:
        raise NotFoundError("Parcel not found")

    allowed_from = STATUS_TRANSITIONS.get(status)
    if not allowed_from:
        raise InvalidArgumentError(f"Parcel status cannot be set to '{status.value}' directly")

    values = {"status": status}
    if status == ParcelStatus.IN_TRANSIT:
        values["picked_at"] = utcnow()
    elif status == ParcelStatus.DELIVERED:
        values["delivered_at"] = utcnow()

    result = await db.execute(
        update(Parcel)
        .where(Parcel.id == parcel_id, Parcel.status.in_(sorted(allowed_from)))
        .values(**values)
    )
    modified = result.rowcount
    if modified == 0:
        await db.rollback()
        parcel = await db.get(Parcel, parcel_id, populate_existing=True)
        if parcel is None:
            # Deleted between the lookup and the update
            raise NotFoundError("Parcel not found")
        raise InvalidArgumentError(
            f"Cannot move parcel from '{parcel.status.value}' to '{status.value}'",
            details={"current": parcel.status.value, "requested": status.value},
        )

    if status in COMPLETED_DELIVERY_STATUSES and parcel.rider_id is not None:
        await _release_rider_if_idle(db, parcel.rider_id)

    await db.commit()
    logger.info("Parcel %s moved to %s", parcel_id, status.value)
    return modified, modified


async def confirm_payment(db: AsyncSession, data: PaymentConfirm) -> PaymentRecord:
    """
    Flip a parcel to ``paid`` and append its payment record, atomically.

    Raises:
        NotFoundError: parcel missing or already paid; no record is written
    """
    result = await db.execute(
        update(Parcel)
        .where(Parcel.id == data.parcel_id, Parcel.payment == PaymentState.UNPAID)
        .values(payment=PaymentState.PAID)
    )
    if result.rowcount == 0:
        await db.rollback()
        raise NotFoundError("Parcel not found or already paid.")

    record = PaymentRecord(
        parcel_id=data.parcel_id,
        email=data.email,
        amount=data.amount,
        payment_method=data.payment_method,
        transaction_id=data.transaction_id,
        paid_at=utcnow(),
    )
    db.add(record)
    await db.commit()
    await db.refresh(record)

    logger.info("Payment %s recorded for parcel %s (%s)", record.id, data.parcel_id, data.transaction_id)
    return record


async def get_unpaid_parcel(db: AsyncSession, parcel_id: int) -> Parcel:
    """Fetch a parcel that can still be charged."""
    parcel: Optional[Parcel] = await db.get(Parcel, parcel_id)
    if parcel is None:
        raise NotFoundError("Parcel not found")
    if parcel.payment == PaymentState.PAID:
        raise InvalidArgumentError("Parcel is already paid")
    return parcel
