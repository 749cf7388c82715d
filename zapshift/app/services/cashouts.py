"""
Cashout service.

Requests start ``pending`` and are resolved by an admin exactly once.
"""

import logging

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from zapshift.app.core.exceptions import InvalidArgumentError, NotFoundError
from zapshift.app.core.timeutils import utcnow
from zapshift.app.models.cashout import CashoutRequest
from zapshift.app.models.enums import CashoutStatus
from zapshift.app.schemas.cashout import CashoutCreate

logger = logging.getLogger(__name__)


async def request_cashout(db: AsyncSession, data: CashoutCreate) -> CashoutRequest:
    cashout = CashoutRequest(
        rider_id=data.rider_id,
        rider_email=data.rider_email,
        amount=data.amount,
        status=CashoutStatus.PENDING,
        requested_at=utcnow(),
        processed_at=None,
    )
    db.add(cashout)
    await db.commit()
    await db.refresh(cashout)

    logger.info("Cashout %s of %.2f requested by rider %s", cashout.id, cashout.amount, cashout.rider_id)
    return cashout


async def resolve_cashout(db: AsyncSession, cashout_id: int, status: CashoutStatus, resolved_by: str) -> None:
    """
    Approve or reject a pending cashout.

    Raises:
        InvalidArgumentError: ``status`` is not approved/rejected
        NotFoundError: wrong id or the request was already resolved
    """
    if status not in (CashoutStatus.APPROVED, CashoutStatus.REJECTED):
        raise InvalidArgumentError("Invalid status")

    result = await db.execute(
        update(CashoutRequest)
        .where(CashoutRequest.id == cashout_id, CashoutRequest.status == CashoutStatus.PENDING)
        .values(status=status, processed_at=utcnow())
    )
    if result.rowcount == 0:
        await db.rollback()
        raise NotFoundError("Cashout not found or already processed")

    await db.commit()
    logger.info("Cashout %s %s by %s", cashout_id, status.value, resolved_by)
