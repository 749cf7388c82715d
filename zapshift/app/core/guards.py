"""
Security guards for role-based and ownership-based access control.

Roles are not carried in the token; they are read from the account store on
every gated request, strictly after the token itself has been verified.
"""

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zapshift.app.core.dependencies import get_current_principal
from zapshift.app.core.exceptions import ForbiddenError, UnauthenticatedError
from zapshift.app.core.identity import Principal
from zapshift.app.db.session import get_db
from zapshift.app.models.account import Account
from zapshift.app.models.enums import AccountRole


async def ensure_role(db: AsyncSession, principal: Principal, role: AccountRole) -> Account:
    """
    Resolve the caller's account and check its role.

    Raises:
        UnauthenticatedError 401 if the token carries no email
        ForbiddenError 403 if no account exists or its role differs
    """
    if not principal.email:
        raise UnauthenticatedError("Unauthorized: no email in token")

    account = await db.scalar(select(Account).where(Account.email == principal.email))

    if account is None or account.role != role:
        raise ForbiddenError(f"Forbidden: {role.value}s only")

    return account


def require_role(role: AccountRole):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.get("/pending-riders")
        async def pending_riders(admin: Account = Depends(require_role(AccountRole.ADMIN))):
            ...

    Returns:
        FastAPI dependency resolving to the caller's Account
    """
    async def role_checker(
        principal: Principal = Depends(get_current_principal),
        db: AsyncSession = Depends(get_db),
    ) -> Account:
        return await ensure_role(db, principal, role)

    return role_checker


require_admin = require_role(AccountRole.ADMIN)
require_rider = require_role(AccountRole.RIDER)


def ensure_self(principal: Principal, email: str) -> None:
    """
    Enforce that an ``email`` query parameter names the caller.

    Raises:
        ForbiddenError 403 on mismatch (or when the parameter is empty)
    """
    if not email or principal.email != email:
        raise ForbiddenError("Forbidden: email mismatch")
