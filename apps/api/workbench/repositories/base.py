"""Storage interfaces consumed by the request pipeline and services."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from workbench.schemas.auth import Role
from workbench.schemas.operation import ResourceKind


@dataclass(slots=True)
class AccountRecord:
    uid: str
    role: Role
    active: bool
    created_at: datetime
    updated_at: datetime | None = None


@dataclass(slots=True)
class ResourceRecord:
    kind: ResourceKind
    id: str
    attributes: dict[str, Any]
    rev: int
    created_by: str
    created_at: datetime
    updated_by: str | None = None
    updated_at: datetime | None = None


class ResourceAlreadyExistsError(Exception):
    """Raised by a conditional insert when the identifier is already taken."""

    def __init__(self, kind: ResourceKind, resource_id: str) -> None:
        self.kind = kind
        self.resource_id = resource_id
        super().__init__(f"{kind.value} '{resource_id}' already exists")


class ResourceRevisionMismatchError(Exception):
    """Raised by a conditional update when the stored revision moved on."""

    def __init__(self, expected_rev: int, current_rev: int) -> None:
        self.expected_rev = expected_rev
        self.current_rev = current_rev
        super().__init__(f"expected rev {expected_rev}, found {current_rev}")


class AccountStore(ABC):
    """Read-only view of accounts used while resolving sessions."""

    @abstractmethod
    def get_account(self, uid: str) -> AccountRecord | None:
        """Return the account snapshot for ``uid`` or ``None``."""

    def is_active(self, uid: str) -> bool:
        account = self.get_account(uid)
        return account is not None and account.active


class AccountAdminStore(AccountStore):
    """Administrative account writes, used only by user management."""

    @abstractmethod
    def create_account(self, *, uid: str, role: Role, active: bool = True) -> AccountRecord:
        """Insert an account or raise ``ResourceAlreadyExistsError``."""

    @abstractmethod
    def set_account_active(self, uid: str, active: bool) -> AccountRecord | None:
        """Flip the active flag; ``None`` when the account does not exist."""


class ResourceStore(ABC):
    """Keyed resource storage with atomic conditional writes."""

    @abstractmethod
    def create_if_absent(
        self,
        *,
        kind: ResourceKind,
        resource_id: str,
        attributes: dict[str, Any],
        created_by: str,
    ) -> ResourceRecord:
        """Insert a new record or raise ``ResourceAlreadyExistsError`` atomically."""

    @abstractmethod
    def get_resource(self, kind: ResourceKind, resource_id: str) -> ResourceRecord | None:
        """Return a copy of the stored record."""

    @abstractmethod
    def list_resources(self, kind: ResourceKind) -> list[ResourceRecord]:
        """Return copies of every record of ``kind`` ordered by creation."""

    @abstractmethod
    def update_if_rev(
        self,
        *,
        kind: ResourceKind,
        resource_id: str,
        expected_rev: int,
        attributes: dict[str, Any],
        updated_by: str,
    ) -> ResourceRecord | None:
        """Apply ``attributes`` when the stored rev matches; ``None`` when missing."""

    @abstractmethod
    def delete_resource(self, kind: ResourceKind, resource_id: str) -> bool:
        """Remove a record; return whether it existed."""


__all__ = [
    "AccountAdminStore",
    "AccountRecord",
    "AccountStore",
    "ResourceAlreadyExistsError",
    "ResourceRecord",
    "ResourceRevisionMismatchError",
    "ResourceStore",
]
