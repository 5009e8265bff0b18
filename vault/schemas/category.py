"""Pydantic schemas for category write requests."""

from pydantic import BaseModel, Field


class CategoryData(BaseModel):
    """Payload for creating or updating a category."""

    id: int | None = Field(None, description="Category id (required for updates)")
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
