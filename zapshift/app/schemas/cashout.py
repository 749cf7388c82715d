"""
Cashout Pydantic schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from zapshift.app.models.enums import CashoutStatus


class CashoutCreate(BaseModel):
    rider_id: int = Field(..., alias="riderId")
    rider_email: str = Field(..., min_length=3, max_length=255, alias="riderEmail")
    amount: float = Field(..., gt=0)

    model_config = ConfigDict(populate_by_name=True)


class CashoutCreated(BaseModel):
    success: bool
    id: int


class CashoutResolve(BaseModel):
    status: CashoutStatus


class CashoutResponse(BaseModel):
    id: int
    rider_id: int = Field(..., alias="riderId")
    rider_email: str = Field(..., alias="riderEmail")
    amount: float
    status: CashoutStatus
    requested_at: datetime
    processed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
