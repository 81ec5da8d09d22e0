"""Dependency wiring for routes."""

from __future__ import annotations

from typing import Annotated, Any, TypeVar
from uuid import uuid4

from fastapi import Depends, Request, Security
from fastapi.security import APIKeyHeader

from workbench.adapters.auth import FirebaseTokenVerifier, MockTokenVerifier, TokenVerifier
from workbench.core.config import Settings, get_settings
from workbench.errors import PipelineFailure
from workbench.repositories.memory import InMemoryStore
from workbench.services.pipeline import RequestPipeline
from workbench.services.session import SessionResolver
from workbench.services.users import UserService
from workbench.services.workspace_types import WorkspaceTypeService

# Raw header so that absent credentials and a malformed scheme stay distinguishable.
authorization_header = APIKeyHeader(
    name="Authorization",
    auto_error=False,
    scheme_name="bearerAuth",
    description="Bearer token: `Bearer <token>`",
)

ResultT = TypeVar("ResultT")


def _request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id:
        request.state.correlation_id = correlation_id
        return correlation_id

    generated = f"req-{uuid4()}"
    request.state.correlation_id = generated
    return generated


def get_request_correlation_id(request: Request) -> str:
    return _request_correlation_id(request)


def get_credentials(
    credentials: Annotated[str | None, Security(authorization_header)],
) -> str | None:
    return credentials


async def get_raw_payload(request: Request) -> Any:
    """Return the decoded JSON body, or ``None`` when it is absent or unparseable.

    Decoding failures are not reported here; the payload stage rejects a
    ``None`` body only after the caller has been authorized.
    """
    body = await request.body()
    if not body:
        return None
    try:
        return await request.json()
    except ValueError:
        return None


def get_token_verifier(settings: Annotated[Settings, Depends(get_settings)]) -> TokenVerifier:
    """Resolve provider adapter from configuration."""
    if settings.auth_provider == "firebase":
        return FirebaseTokenVerifier(
            project_id=settings.firebase_project_id,
            audience=settings.firebase_audience,
        )
    return MockTokenVerifier()


def get_store(request: Request) -> InMemoryStore:
    return request.app.state.store


def get_session_resolver(
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
    store: Annotated[InMemoryStore, Depends(get_store)],
) -> SessionResolver:
    return SessionResolver(verifier=verifier, accounts=store)


def get_request_pipeline(
    session_resolver: Annotated[SessionResolver, Depends(get_session_resolver)],
) -> RequestPipeline:
    return RequestPipeline(session_resolver)


def get_workspace_type_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> WorkspaceTypeService:
    return WorkspaceTypeService(store)


def get_user_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> UserService:
    return UserService(store)


def unwrap_outcome(outcome: ResultT | PipelineFailure) -> ResultT:
    """Raise the contract error for a failed pipeline, otherwise pass the result through."""
    if isinstance(outcome, PipelineFailure):
        raise outcome.to_api_error()
    return outcome
