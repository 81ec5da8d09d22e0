"""User administration service layer."""

from __future__ import annotations

import logging

from workbench.core.logging import safe_log_identifier
from workbench.errors import ErrorKind, PipelineFailure
from workbench.repositories.base import AccountAdminStore, AccountRecord, ResourceAlreadyExistsError
from workbench.schemas.auth import AuthenticatedPrincipal
from workbench.schemas.user import CreateUserRequest, UpdateUserStatusRequest, User

logger = logging.getLogger(__name__)


def _to_user(record: AccountRecord) -> User:
    return User(
        uid=record.uid,
        role=record.role,
        active=record.active,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _not_found(uid: str) -> PipelineFailure:
    return PipelineFailure(kind=ErrorKind.NOT_FOUND, message=f"User '{uid}' does not exist")


class UserService:
    def __init__(self, store: AccountAdminStore) -> None:
        self._store = store

    def create_user(self, request: CreateUserRequest) -> User | PipelineFailure:
        try:
            record = self._store.create_account(uid=request.uid, role=request.role, active=request.active)
        except ResourceAlreadyExistsError:
            return PipelineFailure(kind=ErrorKind.CONFLICT, message=f"User '{request.uid}' already exists")
        return _to_user(record)

    def get_user(self, uid: str) -> User | PipelineFailure:
        record = self._store.get_account(uid)
        if record is None:
            return _not_found(uid)
        return _to_user(record)

    def set_user_status(
        self,
        principal: AuthenticatedPrincipal,
        uid: str,
        request: UpdateUserStatusRequest,
    ) -> User | PipelineFailure:
        record = self._store.set_account_active(uid, request.active)
        if record is None:
            return _not_found(uid)
        logger.info(
            "users.status_changed actor_id=%s principal_id=%s active=%s",
            safe_log_identifier(principal.user_id, prefix="pid"),
            safe_log_identifier(uid, prefix="pid"),
            record.active,
        )
        return _to_user(record)
