"""Pydantic schemas for Photos API (response)."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class PhotoSizeSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    width: int
    height: int


class PhotoSchema(BaseModel):
    """One feed photo, projected for display."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    size: PhotoSizeSchema
    created_at: datetime | None
    welcome_description: str | None
    thumb_image_url: str
    large_image_url: str
    is_liked: bool


class PhotoPageSchema(BaseModel):
    """Photos appended by one page load."""

    items: list[PhotoSchema]
    page: int
    total_loaded: int


class LoadedPhotosSchema(BaseModel):
    items: list[PhotoSchema]
    last_loaded_page: int | None
