"""
Shared response schemas.

Write results keep the shape existing clients expect:
``insertedId``, ``matchedCount``/``modifiedCount`` and ``deletedCount``.
"""

from pydantic import BaseModel, ConfigDict, Field


class InsertResult(BaseModel):
    """Result of a single-row insert."""
    model_config = ConfigDict(populate_by_name=True)

    acknowledged: bool = True
    inserted_id: int = Field(..., alias="insertedId")


class UpdateResult(BaseModel):
    """Result of a conditional update."""
    model_config = ConfigDict(populate_by_name=True)

    acknowledged: bool = True
    matched_count: int = Field(..., alias="matchedCount")
    modified_count: int = Field(..., alias="modifiedCount")


class DeleteResult(BaseModel):
    """Result of a delete."""
    model_config = ConfigDict(populate_by_name=True)

    acknowledged: bool = True
    deleted_count: int = Field(..., alias="deletedCount")


class ActionResponse(BaseModel):
    """Generic success/message response for moderation actions."""
    success: bool
    message: str
