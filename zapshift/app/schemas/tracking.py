"""
Tracking event Pydantic schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TrackingEventCreate(BaseModel):
    """All four fields are required and must be non-empty."""
    tracking_id: str = Field(..., min_length=1, max_length=64)
    status: str = Field(..., min_length=1, max_length=100)
    updated_by: str = Field(..., min_length=1, max_length=255)
    details: str = Field(..., min_length=1, max_length=1000)


class TrackingEventResponse(BaseModel):
    id: int
    tracking_id: str
    status: str
    updated_by: str
    details: str
    updated_at: datetime = Field(..., alias="updatedAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
