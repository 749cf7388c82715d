"""
Account service.

Create-or-touch on sign-in and the admin role switches.
"""

import logging
from typing import Optional, Tuple

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from zapshift.app.core.exceptions import NotFoundError
from zapshift.app.core.timeutils import utcnow
from zapshift.app.models.account import Account
from zapshift.app.models.enums import AccountRole

logger = logging.getLogger(__name__)


async def touch_account(
    db: AsyncSession,
    email: str,
    name: Optional[str] = None,
    photo_url: Optional[str] = None,
) -> Tuple[Account, bool]:
    """
    Create the account for ``email`` or refresh its ``last_logged_in``.

    Returns:
        (account, inserted) where ``inserted`` is False for an existing account
    """
    account = await db.scalar(select(Account).where(Account.email == email))
    if account is not None:
        account.last_logged_in = utcnow()
        await db.commit()
        return account, False

    now = utcnow()
    account = Account(
        email=email,
        name=name,
        photo_url=photo_url,
        role=AccountRole.USER,
        created_at=now,
        last_logged_in=now,
    )
    db.add(account)
    try:
        await db.commit()
    except IntegrityError:
        # A concurrent sign-in created it first
        await db.rollback()
        account = await db.scalar(select(Account).where(Account.email == email))
        account.last_logged_in = utcnow()
        await db.commit()
        return account, False

    await db.refresh(account)
    logger.info("Created account %s for %s", account.id, email)
    return account, True


async def grant_admin(db: AsyncSession, account_id: int, granted_by: str) -> None:
    """Promote an account to admin; 404 if missing or already admin."""
    result = await db.execute(
        update(Account)
        .where(Account.id == account_id, Account.role != AccountRole.ADMIN)
        .values(role=AccountRole.ADMIN)
    )
    if result.rowcount == 0:
        await db.rollback()
        raise NotFoundError("User not found or already admin.")
    await db.commit()
    logger.info("Account %s made admin by %s", account_id, granted_by)


async def revoke_admin(db: AsyncSession, account_id: int, revoked_by: str) -> None:
    """Demote an admin back to user; 404 if missing or not an admin."""
    result = await db.execute(
        update(Account)
        .where(Account.id == account_id, Account.role == AccountRole.ADMIN)
        .values(role=AccountRole.USER)
    )
    if result.rowcount == 0:
        await db.rollback()
        raise NotFoundError("User not found or not an admin.")
    await db.commit()
    logger.info("Admin role removed from account %s by %s", account_id, revoked_by)
