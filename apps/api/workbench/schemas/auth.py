"""Authentication schemas."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    ADMIN = "admin"
    STANDARD_USER = "standard"


class TokenClaims(BaseModel):
    """Identity asserted by a verified bearer token."""

    user_id: str = Field(min_length=1)


class AuthenticatedPrincipal(BaseModel):
    """Snapshot of an authenticated caller taken when the request starts."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["authenticated"] = "authenticated"
    user_id: str = Field(min_length=1)
    role: Role
    active: bool


class AnonymousPrincipal(BaseModel):
    """Caller that presented no credentials."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["anonymous"] = "anonymous"


Principal = AuthenticatedPrincipal | AnonymousPrincipal
