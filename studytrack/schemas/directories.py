"""Pydantic schemas for the directory endpoints."""

from typing import Optional

from pydantic import BaseModel, Field


# ── Request models ────────────────────────────────────────────────────────────

class CreateDirectoryRequest(BaseModel):
    """Request body for POST /{id}/directory."""

    name: str = Field(..., examples=["Linear algebra"])


class RenameDirectoryRequest(BaseModel):
    """Request body for PATCH /directory/{id}/rename."""

    new_directory_name: str = Field(..., examples=["Calculus II"])


# ── Response models ───────────────────────────────────────────────────────────

class DirectoryResponse(BaseModel):
    id: str
    name: str
    status: str


class RenamedDirectoryResponse(BaseModel):
    id: str
    name: str


class DirectoryStatusResponse(BaseModel):
    id: str
    status: str


class DirectoryAccessResponse(BaseModel):
    id: str
    last_accessed_at: str


class RecentDirectory(BaseModel):
    id: str
    name: str
    status: str
    last_accessed_at: Optional[str] = None


class RecentDirectoriesResponse(BaseModel):
    """Returned by GET /{id}/directory/recents."""

    directories: list[RecentDirectory]
