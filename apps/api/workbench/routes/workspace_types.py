"""Workspace type routes."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Path, Response, status

from workbench.routes.dependencies import (
    get_credentials,
    get_raw_payload,
    get_request_correlation_id,
    get_request_pipeline,
    get_workspace_type_service,
    unwrap_outcome,
)
from workbench.schemas.error import ErrorResponse
from workbench.schemas.operation import Action, OperationDescriptor, ResourceKind
from workbench.schemas.workspace_type import (
    CreateWorkspaceTypeRequest,
    UpdateWorkspaceTypeRequest,
    WorkspaceType,
)
from workbench.services.pipeline import InboundRequest, PipelineStep, RequestPipeline
from workbench.services.workspace_types import WorkspaceTypeService

router = APIRouter(prefix="/workspace-types", tags=["Workspace Types"])

_CREATE = OperationDescriptor(kind=ResourceKind.WORKSPACE_TYPE, action=Action.CREATE)
_READ = OperationDescriptor(kind=ResourceKind.WORKSPACE_TYPE, action=Action.READ)
_UPDATE = OperationDescriptor(kind=ResourceKind.WORKSPACE_TYPE, action=Action.UPDATE)
_DELETE = OperationDescriptor(kind=ResourceKind.WORKSPACE_TYPE, action=Action.DELETE)

_GUARDED_RESPONSES: dict[int | str, dict[str, Any]] = {
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

WorkspaceTypeId = Annotated[str, Path(alias="workspaceTypeId")]


@router.post(
    "",
    response_model=WorkspaceType,
    status_code=status.HTTP_201_CREATED,
    responses={**_GUARDED_RESPONSES, 400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_workspace_type(
    credentials: Annotated[str | None, Depends(get_credentials)],
    payload: Annotated[Any, Depends(get_raw_payload)],
    correlation_id: Annotated[str, Depends(get_request_correlation_id)],
    pipeline: Annotated[RequestPipeline, Depends(get_request_pipeline)],
    service: Annotated[WorkspaceTypeService, Depends(get_workspace_type_service)],
) -> WorkspaceType:
    inbound = InboundRequest(
        credentials=credentials,
        operation=_CREATE,
        payload=payload,
        correlation_id=correlation_id,
    )
    step = PipelineStep(handler=service.create_workspace_type, schema=CreateWorkspaceTypeRequest)
    return unwrap_outcome(pipeline.execute(inbound, step))


@router.get(
    "",
    response_model=list[WorkspaceType],
    responses=_GUARDED_RESPONSES,
)
async def list_workspace_types(
    credentials: Annotated[str | None, Depends(get_credentials)],
    correlation_id: Annotated[str, Depends(get_request_correlation_id)],
    pipeline: Annotated[RequestPipeline, Depends(get_request_pipeline)],
    service: Annotated[WorkspaceTypeService, Depends(get_workspace_type_service)],
) -> list[WorkspaceType]:
    inbound = InboundRequest(credentials=credentials, operation=_READ, correlation_id=correlation_id)
    step = PipelineStep(handler=lambda _principal, _request: service.list_workspace_types())
    return unwrap_outcome(pipeline.execute(inbound, step))


@router.get(
    "/{workspaceTypeId}",
    response_model=WorkspaceType,
    responses={**_GUARDED_RESPONSES, 404: {"model": ErrorResponse}},
)
async def get_workspace_type(
    workspace_type_id: WorkspaceTypeId,
    credentials: Annotated[str | None, Depends(get_credentials)],
    correlation_id: Annotated[str, Depends(get_request_correlation_id)],
    pipeline: Annotated[RequestPipeline, Depends(get_request_pipeline)],
    service: Annotated[WorkspaceTypeService, Depends(get_workspace_type_service)],
) -> WorkspaceType:
    inbound = InboundRequest(credentials=credentials, operation=_READ, correlation_id=correlation_id)
    step = PipelineStep(handler=lambda _principal, _request: service.get_workspace_type(workspace_type_id))
    return unwrap_outcome(pipeline.execute(inbound, step))


@router.put(
    "/{workspaceTypeId}",
    response_model=WorkspaceType,
    responses={
        **_GUARDED_RESPONSES,
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def update_workspace_type(
    workspace_type_id: WorkspaceTypeId,
    credentials: Annotated[str | None, Depends(get_credentials)],
    payload: Annotated[Any, Depends(get_raw_payload)],
    correlation_id: Annotated[str, Depends(get_request_correlation_id)],
    pipeline: Annotated[RequestPipeline, Depends(get_request_pipeline)],
    service: Annotated[WorkspaceTypeService, Depends(get_workspace_type_service)],
) -> WorkspaceType:
    inbound = InboundRequest(
        credentials=credentials,
        operation=_UPDATE,
        payload=payload,
        correlation_id=correlation_id,
    )
    step = PipelineStep(
        handler=lambda principal, request: service.update_workspace_type(principal, workspace_type_id, request),
        schema=UpdateWorkspaceTypeRequest,
    )
    return unwrap_outcome(pipeline.execute(inbound, step))


@router.delete(
    "/{workspaceTypeId}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**_GUARDED_RESPONSES, 404: {"model": ErrorResponse}},
)
async def delete_workspace_type(
    workspace_type_id: WorkspaceTypeId,
    credentials: Annotated[str | None, Depends(get_credentials)],
    correlation_id: Annotated[str, Depends(get_request_correlation_id)],
    pipeline: Annotated[RequestPipeline, Depends(get_request_pipeline)],
    service: Annotated[WorkspaceTypeService, Depends(get_workspace_type_service)],
) -> Response:
    inbound = InboundRequest(credentials=credentials, operation=_DELETE, correlation_id=correlation_id)
    step = PipelineStep(handler=lambda _principal, _request: service.delete_workspace_type(workspace_type_id))
    unwrap_outcome(pipeline.execute(inbound, step))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
