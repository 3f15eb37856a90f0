"""Pydantic schemas for Profile API (response)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ProfileSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    username: str
    name: str
    login_name: str
    bio: str | None


class ProfileResponseSchema(BaseModel):
    profile: ProfileSchema
    avatar_url: str | None
