"""In-memory repositories used by the API scaffold and tests."""

from __future__ import annotations

import copy
import threading
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any

from workbench.repositories.base import (
    AccountAdminStore,
    AccountRecord,
    ResourceAlreadyExistsError,
    ResourceRecord,
    ResourceRevisionMismatchError,
    ResourceStore,
)
from workbench.schemas.auth import Role
from workbench.schemas.operation import ResourceKind


def _copy_record(record: ResourceRecord) -> ResourceRecord:
    return replace(record, attributes=copy.deepcopy(record.attributes))


@dataclass(slots=True)
class InMemoryStore(AccountAdminStore, ResourceStore):
    """Process-wide account and resource store.

    Every resource write happens under ``_lock`` so the existence check and
    the insert form one step. Readers get copies and never alias stored state.
    """

    accounts: dict[str, AccountRecord] = field(default_factory=dict)
    resources: dict[tuple[ResourceKind, str], ResourceRecord] = field(default_factory=dict)
    resource_write_count: int = 0
    account_write_count: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def get_account(self, uid: str) -> AccountRecord | None:
        account = self.accounts.get(uid)
        return replace(account) if account is not None else None

    def create_account(self, *, uid: str, role: Role, active: bool = True) -> AccountRecord:
        with self._lock:
            if uid in self.accounts:
                raise ResourceAlreadyExistsError(ResourceKind.USER, uid)
            account = AccountRecord(uid=uid, role=role, active=active, created_at=datetime.now(UTC))
            self.accounts[uid] = account
            self.account_write_count += 1
            return replace(account)

    def set_account_active(self, uid: str, active: bool) -> AccountRecord | None:
        """Administrative write; the request pipeline never calls this."""
        with self._lock:
            account = self.accounts.get(uid)
            if account is None:
                return None
            account.active = active
            account.updated_at = datetime.now(UTC)
            self.account_write_count += 1
            return replace(account)

    def create_if_absent(
        self,
        *,
        kind: ResourceKind,
        resource_id: str,
        attributes: dict[str, Any],
        created_by: str,
    ) -> ResourceRecord:
        key = (kind, resource_id)
        with self._lock:
            if key in self.resources:
                raise ResourceAlreadyExistsError(kind, resource_id)
            record = ResourceRecord(
                kind=kind,
                id=resource_id,
                attributes=copy.deepcopy(attributes),
                rev=0,
                created_by=created_by,
                created_at=datetime.now(UTC),
            )
            self.resources[key] = record
            self.resource_write_count += 1
            return _copy_record(record)

    def get_resource(self, kind: ResourceKind, resource_id: str) -> ResourceRecord | None:
        record = self.resources.get((kind, resource_id))
        return _copy_record(record) if record is not None else None

    def list_resources(self, kind: ResourceKind) -> list[ResourceRecord]:
        records = [_copy_record(record) for (stored_kind, _), record in self.resources.items() if stored_kind == kind]
        records.sort(key=lambda record: record.created_at)
        return records

    def update_if_rev(
        self,
        *,
        kind: ResourceKind,
        resource_id: str,
        expected_rev: int,
        attributes: dict[str, Any],
        updated_by: str,
    ) -> ResourceRecord | None:
        with self._lock:
            record = self.resources.get((kind, resource_id))
            if record is None:
                return None
            if record.rev != expected_rev:
                raise ResourceRevisionMismatchError(expected_rev=expected_rev, current_rev=record.rev)
            record.attributes.update(copy.deepcopy(attributes))
            record.rev += 1
            record.updated_by = updated_by
            record.updated_at = datetime.now(UTC)
            self.resource_write_count += 1
            return _copy_record(record)

    def delete_resource(self, kind: ResourceKind, resource_id: str) -> bool:
        with self._lock:
            removed = self.resources.pop((kind, resource_id), None)
            if removed is None:
                return False
            self.resource_write_count += 1
            return True
