"""
Payment API Endpoints.

Payment-intent issuing, payment confirmation and payment history.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zapshift.app.core.dependencies import get_current_principal
from zapshift.app.core.guards import ensure_role, ensure_self
from zapshift.app.core.identity import Principal
from zapshift.app.db.session import get_db
from zapshift.app.models.enums import AccountRole
from zapshift.app.models.payment import PaymentRecord
from zapshift.app.schemas.common import InsertResult
from zapshift.app.schemas.payment import (
    PaymentConfirm, PaymentConfirmResponse, PaymentIntentRequest,
    PaymentIntentResponse, PaymentResponse
)
from zapshift.app.services import parcel_lifecycle
from zapshift.app.services.payment_gateway import PaymentGateway, get_payment_gateway, to_minor_units

router = APIRouter(tags=["Payments"])


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    payload: PaymentIntentRequest,
    db: AsyncSession = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway)
):
    """Ask the payment processor for an intent covering the parcel's cost (in cents)."""
    parcel = await parcel_lifecycle.get_unpaid_parcel(db, payload.parcel_id)

    intent = await gateway.create_payment_intent(
        to_minor_units(parcel.cost),
        metadata={"parcelId": str(parcel.id), "trackingId": parcel.tracking_id},
    )
    return PaymentIntentResponse(client_secret=intent.client_secret)


@router.post("/payments", response_model=PaymentConfirmResponse, status_code=status.HTTP_201_CREATED)
async def confirm_payment(
    payload: PaymentConfirm,
    db: AsyncSession = Depends(get_db)
):
    """
    Record a completed payment and mark the parcel paid.

    A parcel can only be paid once; a repeat call is a 404 and writes nothing.
    """
    record = await parcel_lifecycle.confirm_payment(db, payload)
    return PaymentConfirmResponse(
        message="Payment history stored in db",
        payment_result=InsertResult(inserted_id=record.id),
    )


@router.get("/payments", response_model=List[PaymentResponse])
async def list_payments(
    email: Optional[str] = Query(None, description="Payer email; omit for all payments (admin)"),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """
    Payment history, newest first.

    With ``email`` the caller sees their own payments; without it the full
    history is returned to admins only.
    """
    query = select(PaymentRecord)
    if email:
        ensure_self(principal, email)
        query = query.where(PaymentRecord.email == email)
    else:
        await ensure_role(db, principal, AccountRole.ADMIN)

    result = await db.execute(query.order_by(PaymentRecord.paid_at.desc(), PaymentRecord.id.desc()))
    return result.scalars().all()
