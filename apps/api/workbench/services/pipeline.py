"""Request pipeline shared by every resource endpoint.

Stages run strictly in order and the first failure ends the request:

1. resolve the session into a principal
2. reject inactive accounts
3. authorize the operation for the principal's role
4. validate the raw payload against the resource schema
5. run the resource handler

Each stage returns either its value or a ``PipelineFailure``; nothing after a
failing stage runs.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from workbench.core.logging import payload_keys, safe_log_identifier
from workbench.domain.authorization import authorize
from workbench.domain.schema_validation import validate_payload
from workbench.errors import PipelineFailure
from workbench.schemas.auth import AuthenticatedPrincipal
from workbench.schemas.operation import OperationDescriptor
from workbench.services.session import SessionResolver, check_account_state

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
ResultT = TypeVar("ResultT")


@dataclass(frozen=True, slots=True)
class InboundRequest:
    credentials: str | None
    operation: OperationDescriptor
    payload: Any = None
    correlation_id: str = ""


@dataclass(frozen=True, slots=True)
class PipelineStep(Generic[ModelT, ResultT]):
    """Per-endpoint pairing of a payload schema and the handler to run."""

    handler: Callable[[AuthenticatedPrincipal, ModelT | None], ResultT | PipelineFailure]
    schema: type[ModelT] | None = None


class RequestPipeline:
    def __init__(self, session_resolver: SessionResolver) -> None:
        self._session_resolver = session_resolver

    def execute(self, request: InboundRequest, step: PipelineStep[ModelT, ResultT]) -> ResultT | PipelineFailure:
        principal = self._session_resolver.resolve(request.credentials)
        if isinstance(principal, PipelineFailure):
            return self._rejected(request, "resolve_session", principal)

        principal = check_account_state(principal)
        if isinstance(principal, PipelineFailure):
            return self._rejected(request, "check_account_state", principal)

        authorized = authorize(principal, request.operation)
        if isinstance(authorized, PipelineFailure):
            return self._rejected(request, "authorize", authorized)

        validated: ModelT | None = None
        if step.schema is not None:
            checked = validate_payload(request.payload, step.schema)
            if isinstance(checked, PipelineFailure):
                return self._rejected(request, "validate_payload", checked, payload=request.payload)
            validated = checked

        result = step.handler(authorized, validated)
        if isinstance(result, PipelineFailure):
            return self._rejected(request, "handle", result)

        logger.info(
            "pipeline.completed correlation_id=%s operation=%s principal_id=%s",
            safe_log_identifier(request.correlation_id, prefix="cid"),
            request.operation,
            safe_log_identifier(authorized.user_id, prefix="pid"),
        )
        return result

    @staticmethod
    def _rejected(
        request: InboundRequest,
        stage: str,
        failure: PipelineFailure,
        *,
        payload: Any = None,
    ) -> PipelineFailure:
        extra = f" payload_keys={payload_keys(payload)}" if payload is not None else ""
        logger.warning(
            "pipeline.rejected correlation_id=%s operation=%s stage=%s error_kind=%s%s",
            safe_log_identifier(request.correlation_id, prefix="cid"),
            request.operation,
            stage,
            failure.kind.value,
            extra,
        )
        return failure


__all__ = ["InboundRequest", "PipelineStep", "RequestPipeline"]
