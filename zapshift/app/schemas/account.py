"""
Account Pydantic schemas.

Defines request and response models for account management.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from zapshift.app.models.enums import AccountRole


class AccountTouch(BaseModel):
    """
    Schema for the create-or-touch call made after every sign-in.

    Any role sent by the client is ignored; new accounts always start as ``user``.
    """
    email: str = Field(..., min_length=3, max_length=255, description="Email from the identity provider")
    name: Optional[str] = Field(None, max_length=255)
    photo_url: Optional[str] = Field(None, max_length=1024, alias="photoURL")

    model_config = ConfigDict(populate_by_name=True)


class AccountTouchResponse(BaseModel):
    """Outcome of a create-or-touch call."""
    message: str
    inserted: bool
    updated: bool
    id: int


class AccountSearchItem(BaseModel):
    """Projection returned by the admin search box."""
    id: int
    email: str
    role: AccountRole
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RoleResponse(BaseModel):
    role: AccountRole
