"""
Cashout API Endpoints.

Riders request withdrawals; admins review and resolve them.
"""

from typing import List

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zapshift.app.core.guards import require_admin
from zapshift.app.db.session import get_db
from zapshift.app.models.account import Account
from zapshift.app.models.cashout import CashoutRequest
from zapshift.app.schemas.cashout import (
    CashoutCreate, CashoutCreated, CashoutResolve, CashoutResponse
)
from zapshift.app.services.cashouts import request_cashout, resolve_cashout

router = APIRouter(prefix="/cashouts", tags=["Cashouts"])


@router.post("", response_model=CashoutCreated, status_code=status.HTTP_201_CREATED)
async def create_cashout(
    payload: CashoutCreate,
    db: AsyncSession = Depends(get_db)
):
    cashout = await request_cashout(db, payload)
    return CashoutCreated(success=True, id=cashout.id)


@router.get("", response_model=List[CashoutResponse])
async def list_cashouts(
    admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """All cashout requests, newest first (admin-only)."""
    result = await db.execute(
        select(CashoutRequest).order_by(CashoutRequest.requested_at.desc(), CashoutRequest.id.desc())
    )
    return result.scalars().all()


@router.patch("/{cashout_id}")
async def resolve(
    payload: CashoutResolve,
    cashout_id: int = Path(..., description="Cashout ID"),
    admin: Account = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Approve or reject a pending cashout (admin-only).

    A request can be resolved once; later calls are a 404.
    """
    await resolve_cashout(db, cashout_id, payload.status, resolved_by=admin.email)
    return {"success": True}
