"""User administration schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from workbench.schemas.auth import Role


class CreateUserRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    uid: str = Field(min_length=1, max_length=100)
    # Enum members cannot be built from plain strings in strict mode.
    role: Role = Field(strict=False)
    active: bool = True


class UpdateUserStatusRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    active: bool


class User(BaseModel):
    uid: str
    role: Role
    active: bool
    created_at: datetime
    updated_at: datetime | None = None
