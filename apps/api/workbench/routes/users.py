"""User administration routes."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Path, status

from workbench.routes.dependencies import (
    get_credentials,
    get_raw_payload,
    get_request_correlation_id,
    get_request_pipeline,
    get_user_service,
    unwrap_outcome,
)
from workbench.schemas.error import ErrorResponse
from workbench.schemas.operation import Action, OperationDescriptor, ResourceKind
from workbench.schemas.user import CreateUserRequest, UpdateUserStatusRequest, User
from workbench.services.pipeline import InboundRequest, PipelineStep, RequestPipeline
from workbench.services.users import UserService

router = APIRouter(prefix="/users", tags=["Users"])

_CREATE = OperationDescriptor(kind=ResourceKind.USER, action=Action.CREATE)
_READ = OperationDescriptor(kind=ResourceKind.USER, action=Action.READ)
_UPDATE = OperationDescriptor(kind=ResourceKind.USER, action=Action.UPDATE)

_GUARDED_RESPONSES: dict[int | str, dict[str, Any]] = {
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

UserId = Annotated[str, Path()]


@router.post(
    "",
    response_model=User,
    status_code=status.HTTP_201_CREATED,
    responses={**_GUARDED_RESPONSES, 400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_user(
    credentials: Annotated[str | None, Depends(get_credentials)],
    payload: Annotated[Any, Depends(get_raw_payload)],
    correlation_id: Annotated[str, Depends(get_request_correlation_id)],
    pipeline: Annotated[RequestPipeline, Depends(get_request_pipeline)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> User:
    inbound = InboundRequest(
        credentials=credentials,
        operation=_CREATE,
        payload=payload,
        correlation_id=correlation_id,
    )
    step = PipelineStep(
        handler=lambda _principal, request: service.create_user(request),
        schema=CreateUserRequest,
    )
    return unwrap_outcome(pipeline.execute(inbound, step))


@router.get(
    "/{uid}",
    response_model=User,
    responses={**_GUARDED_RESPONSES, 404: {"model": ErrorResponse}},
)
async def get_user(
    uid: UserId,
    credentials: Annotated[str | None, Depends(get_credentials)],
    correlation_id: Annotated[str, Depends(get_request_correlation_id)],
    pipeline: Annotated[RequestPipeline, Depends(get_request_pipeline)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> User:
    inbound = InboundRequest(credentials=credentials, operation=_READ, correlation_id=correlation_id)
    step = PipelineStep(handler=lambda _principal, _request: service.get_user(uid))
    return unwrap_outcome(pipeline.execute(inbound, step))


@router.put(
    "/{uid}/status",
    response_model=User,
    responses={**_GUARDED_RESPONSES, 400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_user_status(
    uid: UserId,
    credentials: Annotated[str | None, Depends(get_credentials)],
    payload: Annotated[Any, Depends(get_raw_payload)],
    correlation_id: Annotated[str, Depends(get_request_correlation_id)],
    pipeline: Annotated[RequestPipeline, Depends(get_request_pipeline)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> User:
    inbound = InboundRequest(
        credentials=credentials,
        operation=_UPDATE,
        payload=payload,
        correlation_id=correlation_id,
    )
    step = PipelineStep(
        handler=lambda principal, request: service.set_user_status(principal, uid, request),
        schema=UpdateUserStatusRequest,
    )
    return unwrap_outcome(pipeline.execute(inbound, step))
