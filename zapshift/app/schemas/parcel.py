"""
Parcel Pydantic schemas.

Defines request and response models for parcel bookings and their lifecycle.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from zapshift.app.models.enums import ParcelStatus, PaymentState


class ParcelCreate(BaseModel):
    """
    Schema for booking a new parcel.

    Lifecycle fields (status, payment, rider) are never taken from the caller.
    """
    created_by: str = Field(..., min_length=3, max_length=255, description="Email of the booking user")
    cost: float = Field(..., ge=0, description="Delivery cost in currency units")
    tracking_id: Optional[str] = Field(None, min_length=1, max_length=64)

    title: Optional[str] = Field(None, max_length=255)
    parcel_type: Optional[str] = Field(None, max_length=50, alias="type")
    weight: Optional[float] = Field(None, ge=0, description="Weight in kilograms")

    sender_name: Optional[str] = Field(None, max_length=255)
    sender_contact: Optional[str] = Field(None, max_length=50)
    sender_region: Optional[str] = Field(None, max_length=100)
    sender_district: Optional[str] = Field(None, max_length=100)
    sender_address: Optional[str] = Field(None, max_length=500)

    receiver_name: Optional[str] = Field(None, max_length=255)
    receiver_contact: Optional[str] = Field(None, max_length=50)
    receiver_region: Optional[str] = Field(None, max_length=100)
    receiver_district: Optional[str] = Field(None, max_length=100)
    receiver_address: Optional[str] = Field(None, max_length=500)

    model_config = ConfigDict(populate_by_name=True)


class ParcelResponse(BaseModel):
    """Schema for parcel response."""
    id: int
    tracking_id: str
    created_by: str
    cost: float
    title: Optional[str] = None
    parcel_type: Optional[str] = Field(None, alias="type")
    weight: Optional[float] = None

    sender_name: Optional[str] = None
    sender_contact: Optional[str] = None
    sender_region: Optional[str] = None
    sender_district: Optional[str] = None
    sender_address: Optional[str] = None

    receiver_name: Optional[str] = None
    receiver_contact: Optional[str] = None
    receiver_region: Optional[str] = None
    receiver_district: Optional[str] = None
    receiver_address: Optional[str] = None

    payment: PaymentState
    status: ParcelStatus
    rider_id: Optional[int] = Field(None, alias="riderId")

    created_at: datetime
    picked_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ParcelStatusUpdate(BaseModel):
    """Body of PATCH /parcels/update-status."""
    parcel_id: int = Field(..., alias="parcelId")
    status: ParcelStatus

    model_config = ConfigDict(populate_by_name=True)


class RiderAssignment(BaseModel):
    """Body of PATCH /assign-rider."""
    rider_id: int = Field(..., alias="riderId")
    parcel_id: int = Field(..., alias="parcelId")

    model_config = ConfigDict(populate_by_name=True)


class RiderAssignmentResult(BaseModel):
    """Per-write outcome of a rider assignment."""
    success: bool
    parcel_modified: int = Field(..., alias="parcelModified")
    rider_modified: int = Field(..., alias="riderModified")

    model_config = ConfigDict(populate_by_name=True)


class StatusCount(BaseModel):
    status: ParcelStatus
    count: int
