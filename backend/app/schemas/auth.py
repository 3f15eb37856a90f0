from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AuthLoginCommandSchema(BaseModel):
    """OAuth authorization code returned to the client after the consent page."""

    model_config = ConfigDict(extra="forbid")

    code: str = Field(min_length=1)

    @field_validator("code")
    @classmethod
    def _validate_not_empty(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Value cannot be empty")
        return trimmed


class AuthSessionSchema(BaseModel):
    id: str


class AuthLoginResponseSchema(BaseModel):
    session: AuthSessionSchema
