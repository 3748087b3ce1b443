"""Pydantic schemas for the progress endpoints."""

from typing import Optional

from pydantic import BaseModel


class ProgressResponse(BaseModel):
    id: str
    user_id: str
    completed: int


class StatisticsResponse(BaseModel):
    """Returned by GET /{id}/progress/statistics."""

    user_id: str
    completed: int
    active_directories: int
    inactive_directories: int
    last_updated_at: Optional[str] = None
