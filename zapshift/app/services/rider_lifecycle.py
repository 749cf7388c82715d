"""
Rider lifecycle service.

Registration, admin moderation (pending → active | rejected) and the
account-role mirror applied on approval.
"""

import logging
from typing import Tuple

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from zapshift.app.core.exceptions import InvalidArgumentError, NotFoundError
from zapshift.app.core.timeutils import utcnow
from zapshift.app.models.account import Account
from zapshift.app.models.enums import AccountRole, RiderStatus, WorkStatus
from zapshift.app.models.rider import Rider
from zapshift.app.schemas.rider import RiderCreate

logger = logging.getLogger(__name__)

RESOLVED_RIDER_STATUSES = (RiderStatus.ACTIVE, RiderStatus.REJECTED)


async def register_rider(db: AsyncSession, data: RiderCreate) -> Rider:
    """Store a rider application as ``pending`` / ``idle``."""
    rider = Rider(
        **data.model_dump(),
        status=RiderStatus.PENDING,
        work_status=WorkStatus.IDLE,
        created_at=utcnow(),
    )
    db.add(rider)
    await db.commit()
    await db.refresh(rider)

    logger.info("Rider application %s submitted by %s", rider.id, rider.email)
    return rider


async def resolve_application(
    db: AsyncSession, rider_id: int, status: RiderStatus, resolved_by: str
) -> Tuple[int, int]:
    """
    Approve or reject a pending rider application.

    Approval also promotes the account with the rider's email from ``user``
    to ``rider``. Both writes commit together.

    Returns:
        (rider_modified, role_modified)

    Raises:
        InvalidArgumentError: ``status`` is not a resolution
        NotFoundError: rider missing or already resolved
    """
    if status not in RESOLVED_RIDER_STATUSES:
        raise InvalidArgumentError(f"Invalid rider status '{status.value}'")

    rider = await db.get(Rider, rider_id)
    if rider is None:
        raise NotFoundError("Rider not found or already updated")
    email = rider.email

    result = await db.execute(
        update(Rider)
        .where(Rider.id == rider_id, Rider.status == RiderStatus.PENDING)
        .values(status=status, status_updated_at=utcnow())
    )
    rider_modified = result.rowcount
    if rider_modified == 0:
        await db.rollback()
        raise NotFoundError("Rider not found or already updated")

    role_modified = 0
    if status == RiderStatus.ACTIVE:
        role_result = await db.execute(
            update(Account)
            .where(Account.email == email, Account.role == AccountRole.USER)
            .values(role=AccountRole.RIDER)
        )
        role_modified = role_result.rowcount
        if role_modified == 0:
            logger.warning("Rider %s approved but no user account for %s was promoted", rider_id, email)

    await db.commit()
    logger.info("Rider application %s %s by %s", rider_id, status.value, resolved_by)
    return rider_modified, role_modified
