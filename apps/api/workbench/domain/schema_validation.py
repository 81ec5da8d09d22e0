"""Closed-schema validation of raw request payloads."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from workbench.errors import ErrorKind, PipelineFailure

ModelT = TypeVar("ModelT", bound=BaseModel)

# Lower rank is reported first: presence, then type/value, then undeclared fields.
_MISSING_RANK = 0
_TYPE_RANK = 1
_EXTRA_RANK = 2


def _rank(error: dict[str, Any]) -> int:
    error_type = error.get("type")
    if error_type == "missing":
        return _MISSING_RANK
    if error_type == "extra_forbidden":
        return _EXTRA_RANK
    return _TYPE_RANK


def _describe(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ())) or "body"
    error_type = error.get("type")
    if error_type == "missing":
        return f"Missing required field '{location}'"
    if error_type == "extra_forbidden":
        return f"Unexpected field '{location}'"
    return f"Invalid value for field '{location}': {error.get('msg', 'invalid')}"


def validate_payload(raw_payload: Any, schema: type[ModelT]) -> ModelT | PipelineFailure:
    """Validate ``raw_payload`` against ``schema`` and return a detached typed copy.

    Only the first violation is reported. Violations are ordered by kind
    (missing field, wrong type or value, undeclared field) and then by field
    position so the same payload always yields the same message.
    """
    if not isinstance(raw_payload, Mapping):
        return PipelineFailure(kind=ErrorKind.VALIDATION, message="Request body must be a JSON object")

    try:
        # dict() detaches the typed result from the caller's mapping.
        return schema.model_validate(dict(raw_payload))
    except PydanticValidationError as exc:
        errors = sorted(enumerate(exc.errors()), key=lambda item: (_rank(item[1]), item[0]))
        first = errors[0][1] if errors else {}
        return PipelineFailure(kind=ErrorKind.VALIDATION, message=_describe(first))
