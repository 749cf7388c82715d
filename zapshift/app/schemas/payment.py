"""
Payment Pydantic schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from zapshift.app.schemas.common import InsertResult


class PaymentIntentRequest(BaseModel):
    parcel_id: int = Field(..., alias="parcelId")

    model_config = ConfigDict(populate_by_name=True)


class PaymentIntentResponse(BaseModel):
    client_secret: str = Field(..., alias="clientSecret")

    model_config = ConfigDict(populate_by_name=True)


class PaymentConfirm(BaseModel):
    """
    Body of POST /payments, sent after the processor confirmed the charge.

    ``email``, ``parcelId`` and ``amount`` are required.
    """
    parcel_id: int = Field(..., alias="parcelId")
    email: str = Field(..., min_length=3, max_length=255)
    amount: float = Field(..., gt=0)
    payment_method: Optional[str] = Field(None, max_length=100, alias="paymentMethod")
    transaction_id: Optional[str] = Field(None, max_length=255, alias="transactionId")

    model_config = ConfigDict(populate_by_name=True)


class PaymentConfirmResponse(BaseModel):
    message: str
    payment_result: InsertResult = Field(..., alias="paymentResult")

    model_config = ConfigDict(populate_by_name=True)


class PaymentResponse(BaseModel):
    id: int
    parcel_id: int = Field(..., alias="parcelId")
    email: str
    amount: float
    payment_method: Optional[str] = Field(None, alias="paymentMethod")
    transaction_id: Optional[str] = Field(None, alias="transactionId")
    paid_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
