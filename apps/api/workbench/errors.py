"""Application error taxonomy and exception types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from workbench.schemas.error import ErrorResponse


class ErrorKind(str, Enum):
    AUTHENTICATION = "AuthenticationError"
    INACTIVE_ACCOUNT = "InactiveAccountError"
    ANONYMOUS_ACCESS = "AnonymousAccessError"
    AUTHORIZATION = "AuthorizationError"
    VALIDATION = "ValidationError"
    CONFLICT = "ConflictError"
    NOT_FOUND = "NotFoundError"


# Fixed for every resource kind.
_EXTERNAL_STATUS: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.AUTHENTICATION: (401, "unauthorized"),
    ErrorKind.INACTIVE_ACCOUNT: (401, "unauthorized"),
    ErrorKind.ANONYMOUS_ACCESS: (500, "badImplementation"),
    ErrorKind.AUTHORIZATION: (403, "forbidden"),
    ErrorKind.VALIDATION: (400, "badRequest"),
    ErrorKind.CONFLICT: (409, "conflict"),
    ErrorKind.NOT_FOUND: (404, "notFound"),
}


def external_status(kind: ErrorKind) -> tuple[int, str]:
    """Return the ``(http_status, external_code)`` pair for an error kind."""
    return _EXTERNAL_STATUS[kind]


class ApiError(Exception):
    """Structured API error that maps directly to contract error payloads."""

    def __init__(self, status_code: int, code: str, message: str, details: dict | None = None) -> None:
        self.status_code = status_code
        self.payload = ErrorResponse(code=code, message=message, details=details)
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class PipelineFailure:
    """Terminal outcome of a pipeline stage."""

    kind: ErrorKind
    message: str

    def to_api_error(self) -> ApiError:
        status_code, code = external_status(self.kind)
        return ApiError(
            status_code=status_code,
            code=code,
            message=self.message,
            details={"error_kind": self.kind.value},
        )


__all__ = ["ApiError", "ErrorKind", "PipelineFailure", "external_status"]
