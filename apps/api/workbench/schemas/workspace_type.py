"""Workspace type API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

_ID_PATTERN = r"^[A-Za-z0-9_-]+$"


class CreateWorkspaceTypeRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    id: str = Field(min_length=1, max_length=100, pattern=_ID_PATTERN)
    name: str | None = Field(default=None, min_length=1, max_length=300)
    desc: str | None = Field(default=None, max_length=3000)


class UpdateWorkspaceTypeRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    rev: int = Field(ge=0)
    name: str | None = Field(default=None, min_length=1, max_length=300)
    desc: str | None = Field(default=None, max_length=3000)


class WorkspaceType(BaseModel):
    id: str
    name: str | None = None
    desc: str | None = None
    rev: int
    created_by: str
    created_at: datetime
    updated_by: str | None = None
    updated_at: datetime | None = None
