"""
Rider Pydantic schemas.

Defines request and response models for rider registration and moderation.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from zapshift.app.models.enums import RiderStatus, WorkStatus


class RiderCreate(BaseModel):
    """Schema for a rider's self-registration; always stored as ``pending``."""
    email: str = Field(..., min_length=3, max_length=255)
    name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    age: Optional[int] = Field(None, ge=16, le=100)
    nid: Optional[str] = Field(None, max_length=100)
    region: Optional[str] = Field(None, max_length=100)
    district: str = Field(..., min_length=1, max_length=100)
    preferred_district: Optional[str] = Field(None, max_length=100, alias="preferredDistrict")
    bike_brand: Optional[str] = Field(None, max_length=100)
    bike_registration: Optional[str] = Field(None, max_length=100)

    model_config = ConfigDict(populate_by_name=True)


class RiderResponse(BaseModel):
    """Schema for rider response."""
    id: int
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    age: Optional[int] = None
    nid: Optional[str] = None
    region: Optional[str] = None
    district: str
    preferred_district: Optional[str] = Field(None, alias="preferredDistrict")
    bike_brand: Optional[str] = None
    bike_registration: Optional[str] = None
    status: RiderStatus
    work_status: WorkStatus = Field(..., alias="workStatus")
    created_at: datetime
    status_updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class RiderStatusUpdate(BaseModel):
    """Body of PATCH /riders/update-status."""
    id: int
    status: RiderStatus
    email: Optional[str] = Field(None, description="Ignored; the rider's stored email is used")


class RiderStatusResult(BaseModel):
    """Same shape for approvals and rejections."""
    message: str
    updated: bool
    rider_modified: int = Field(..., alias="riderModified")
    role_modified: int = Field(..., alias="roleModified")

    model_config = ConfigDict(populate_by_name=True)
