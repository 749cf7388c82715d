"""
Account API Endpoints.

Sign-in bookkeeping, admin search and admin role management.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zapshift.app.core.dependencies import get_current_principal
from zapshift.app.core.exceptions import InvalidArgumentError, NotFoundError
from zapshift.app.core.guards import ensure_self, require_admin
from zapshift.app.core.identity import Principal
from zapshift.app.db.session import get_db
from zapshift.app.models.account import Account
from zapshift.app.schemas.account import (
    AccountSearchItem, AccountTouch, AccountTouchResponse, RoleResponse
)
from zapshift.app.schemas.common import ActionResponse
from zapshift.app.services.accounts import grant_admin, revoke_admin, touch_account

router = APIRouter(prefix="/users", tags=["Users"])

SEARCH_LIMIT = 10


def _like_pattern(fragment: str) -> str:
    escaped = fragment.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


@router.post("", response_model=AccountTouchResponse)
async def create_or_touch_user(
    payload: AccountTouch,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    Create an account on first sign-in, or refresh ``last_logged_in``.

    Returns 201 when a new account is created, 200 otherwise.
    """
    account, inserted = await touch_account(db, payload.email, payload.name, payload.photo_url)

    if inserted:
        response.status_code = status.HTTP_201_CREATED
        message = "User created."
    else:
        message = "User already existed. last_logged_in updated!"

    return AccountTouchResponse(message=message, inserted=inserted, updated=not inserted, id=account.id)


@router.get("/search", response_model=List[AccountSearchItem])
async def search_users(
    email: Optional[str] = Query(None, description="Case-insensitive email fragment"),
    db: AsyncSession = Depends(get_db)
):
    """Find up to 10 accounts whose email contains the fragment."""
    if not email:
        raise InvalidArgumentError("User email expected!")

    result = await db.execute(
        select(Account)
        .where(Account.email.ilike(_like_pattern(email), escape="\\"))
        .order_by(Account.id)
        .limit(SEARCH_LIMIT)
    )
    return result.scalars().all()


@router.get("/role", response_model=RoleResponse)
async def get_own_role(
    email: Optional[str] = Query(None),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Return the caller's role; the ``email`` parameter must be the caller's own."""
    ensure_self(principal, email)

    account = await db.scalar(select(Account).where(Account.email == email))
    if account is None:
        raise NotFoundError("User not found!")

    return RoleResponse(role=account.role)


@router.patch("/admin/{user_id}", response_model=ActionResponse)
async def make_admin(
    user_id: int = Path(..., description="Account ID"),
    admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Grant the admin role (admin-only)."""
    await grant_admin(db, user_id, granted_by=admin.email)
    return ActionResponse(success=True, message="Admin added.")


@router.patch("/remove-admin/{user_id}", response_model=ActionResponse)
async def remove_admin(
    user_id: int = Path(..., description="Account ID"),
    admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Revoke the admin role (admin-only)."""
    await revoke_admin(db, user_id, revoked_by=admin.email)
    return ActionResponse(success=True, message="Admin role removed.")
