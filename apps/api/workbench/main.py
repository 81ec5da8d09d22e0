"""FastAPI application entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from workbench.core.config import get_settings
from workbench.core.logging import configure_logging, safe_log_identifier
from workbench.errors import ApiError, ErrorKind, PipelineFailure
from workbench.repositories.memory import InMemoryStore
from workbench.routes import users_router, workspace_types_router
from workbench.schemas.auth import Role
from workbench.schemas.user import CreateUserRequest, UpdateUserStatusRequest
from workbench.schemas.workspace_type import CreateWorkspaceTypeRequest, UpdateWorkspaceTypeRequest

logger = logging.getLogger(__name__)

_GUARDED_CODES = {"401", "403", "500"}

_OPENAPI_RESPONSE_CODES: dict[str, dict[str, set[str]]] = {
    "/api/v1/workspace-types": {
        "post": {"201", "400", "409"} | _GUARDED_CODES,
        "get": {"200"} | _GUARDED_CODES,
    },
    "/api/v1/workspace-types/{workspaceTypeId}": {
        "get": {"200", "404"} | _GUARDED_CODES,
        "put": {"200", "400", "404", "409"} | _GUARDED_CODES,
        "delete": {"204", "404"} | _GUARDED_CODES,
    },
    "/api/v1/users": {"post": {"201", "400", "409"} | _GUARDED_CODES},
    "/api/v1/users/{uid}": {"get": {"200", "404"} | _GUARDED_CODES},
    "/api/v1/users/{uid}/status": {"put": {"200", "400", "404"} | _GUARDED_CODES},
}

# Bodies are read raw so that validation runs after authorization; the
# request schemas are documented here instead of through route signatures.
_REQUEST_BODY_SCHEMAS: dict[tuple[str, str], type[BaseModel]] = {
    ("/api/v1/workspace-types", "post"): CreateWorkspaceTypeRequest,
    ("/api/v1/workspace-types/{workspaceTypeId}", "put"): UpdateWorkspaceTypeRequest,
    ("/api/v1/users", "post"): CreateUserRequest,
    ("/api/v1/users/{uid}/status", "put"): UpdateUserStatusRequest,
}


def _apply_contract_response_codes(schema: dict) -> None:
    """Limit documented response codes to the error taxonomy each route can produce."""
    for path, methods in _OPENAPI_RESPONSE_CODES.items():
        path_item = schema.get("paths", {}).get(path)
        if not path_item:
            continue

        for method, allowed_codes in methods.items():
            operation = path_item.get(method)
            if not operation:
                continue

            responses = operation.setdefault("responses", {})
            for status_code in list(responses.keys()):
                if status_code not in allowed_codes:
                    responses.pop(status_code, None)

            for status_code in sorted(allowed_codes):
                responses.setdefault(status_code, {"description": "See API contract"})


def _apply_request_body_schemas(schema: dict) -> None:
    """Attach closed request schemas to routes that consume raw JSON bodies."""
    components = schema.setdefault("components", {}).setdefault("schemas", {})
    for (path, method), model in _REQUEST_BODY_SCHEMAS.items():
        operation = schema.get("paths", {}).get(path, {}).get(method)
        if not operation:
            continue

        model_schema = model.model_json_schema(ref_template="#/components/schemas/{model}")
        for name, definition in model_schema.pop("$defs", {}).items():
            components.setdefault(name, definition)
        components[model.__name__] = model_schema

        operation["requestBody"] = {
            "required": True,
            "content": {"application/json": {"schema": {"$ref": f"#/components/schemas/{model.__name__}"}}},
        }


def _seed_root_account(store: InMemoryStore, root_user_id: str) -> None:
    if store.get_account(root_user_id) is None:
        store.create_account(uid=root_user_id, role=Role.ADMIN, active=True)
        logger.info("bootstrap.root_account_created principal_id=%s", safe_log_identifier(root_user_id, prefix="pid"))


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Workbench API", version="1.0.0")
    app.state.store = InMemoryStore()
    _seed_root_account(app.state.store, settings.root_user_id)

    @app.exception_handler(ApiError)
    async def handle_api_error(_, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.payload.model_dump(mode="json", exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Parameter errors share the payload error shape.
        logger.warning(
            "request.invalid method=%s path=%s errors=%d",
            request.method,
            request.url.path,
            len(exc.errors()),
        )
        error = PipelineFailure(kind=ErrorKind.VALIDATION, message="Invalid request parameters").to_api_error()
        return JSONResponse(
            status_code=error.status_code,
            content=error.payload.model_dump(mode="json", exclude_none=True),
        )

    api_prefix = "/api/v1"
    app.include_router(workspace_types_router, prefix=api_prefix)
    app.include_router(users_router, prefix=api_prefix)

    def custom_openapi() -> dict:
        if app.openapi_schema:
            return app.openapi_schema
        schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )
        _apply_contract_response_codes(schema)
        _apply_request_body_schemas(schema)
        app.openapi_schema = schema
        return app.openapi_schema

    app.openapi = custom_openapi

    return app


app = create_app()
