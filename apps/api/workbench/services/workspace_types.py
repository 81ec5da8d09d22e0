"""Workspace type service layer."""

from __future__ import annotations

from workbench.errors import ErrorKind, PipelineFailure
from workbench.repositories.base import (
    ResourceAlreadyExistsError,
    ResourceRecord,
    ResourceRevisionMismatchError,
    ResourceStore,
)
from workbench.schemas.auth import AuthenticatedPrincipal
from workbench.schemas.operation import ResourceKind
from workbench.schemas.workspace_type import (
    CreateWorkspaceTypeRequest,
    UpdateWorkspaceTypeRequest,
    WorkspaceType,
)

_KIND = ResourceKind.WORKSPACE_TYPE


def _to_workspace_type(record: ResourceRecord) -> WorkspaceType:
    return WorkspaceType(
        id=record.id,
        name=record.attributes.get("name"),
        desc=record.attributes.get("desc"),
        rev=record.rev,
        created_by=record.created_by,
        created_at=record.created_at,
        updated_by=record.updated_by,
        updated_at=record.updated_at,
    )


def _not_found(workspace_type_id: str) -> PipelineFailure:
    return PipelineFailure(
        kind=ErrorKind.NOT_FOUND,
        message=f"Workspace type '{workspace_type_id}' does not exist",
    )


class WorkspaceTypeService:
    def __init__(self, store: ResourceStore) -> None:
        self._store = store

    def create_workspace_type(
        self,
        principal: AuthenticatedPrincipal,
        request: CreateWorkspaceTypeRequest,
    ) -> WorkspaceType | PipelineFailure:
        attributes = request.model_dump(exclude={"id"}, exclude_none=True)
        try:
            record = self._store.create_if_absent(
                kind=_KIND,
                resource_id=request.id,
                attributes=attributes,
                created_by=principal.user_id,
            )
        except ResourceAlreadyExistsError:
            return PipelineFailure(
                kind=ErrorKind.CONFLICT,
                message=f"Workspace type '{request.id}' already exists",
            )
        return _to_workspace_type(record)

    def list_workspace_types(self) -> list[WorkspaceType]:
        return [_to_workspace_type(record) for record in self._store.list_resources(_KIND)]

    def get_workspace_type(self, workspace_type_id: str) -> WorkspaceType | PipelineFailure:
        record = self._store.get_resource(_KIND, workspace_type_id)
        if record is None:
            return _not_found(workspace_type_id)
        return _to_workspace_type(record)

    def update_workspace_type(
        self,
        principal: AuthenticatedPrincipal,
        workspace_type_id: str,
        request: UpdateWorkspaceTypeRequest,
    ) -> WorkspaceType | PipelineFailure:
        attributes = request.model_dump(exclude={"rev"}, exclude_unset=True)
        try:
            record = self._store.update_if_rev(
                kind=_KIND,
                resource_id=workspace_type_id,
                expected_rev=request.rev,
                attributes=attributes,
                updated_by=principal.user_id,
            )
        except ResourceRevisionMismatchError as exc:
            return PipelineFailure(
                kind=ErrorKind.CONFLICT,
                message=(
                    f"Workspace type '{workspace_type_id}' was modified concurrently "
                    f"(expected rev {exc.expected_rev}, current rev {exc.current_rev})"
                ),
            )
        if record is None:
            return _not_found(workspace_type_id)
        return _to_workspace_type(record)

    def delete_workspace_type(self, workspace_type_id: str) -> None | PipelineFailure:
        if not self._store.delete_resource(_KIND, workspace_type_id):
            return _not_found(workspace_type_id)
        return None
