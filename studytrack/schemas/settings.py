"""Pydantic schemas for the settings endpoints."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class UpdateSettingsRequest(BaseModel):
    """Request body for PUT /{id}/settings.  Omitted fields keep their value."""

    model_config = ConfigDict(extra="forbid")

    theme: Optional[Literal["light", "dark"]] = None
    notifications: Optional[bool] = None
    language: Optional[str] = Field(None, min_length=2, max_length=10, pattern=r"^[A-Za-z-]+$")


class SettingsResponse(BaseModel):
    id: str
    user_id: str
    theme: str
    notifications: bool
    language: str
    updated_at: Optional[str] = None
