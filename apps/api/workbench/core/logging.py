"""Logging setup and helpers for safe structured logging fields."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Mapping
from typing import Any

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the ``workbench`` logger tree."""
    logger = logging.getLogger("workbench")
    logger.setLevel(level)
    if not any(getattr(handler, "_workbench_handler", False) for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        handler._workbench_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)


def safe_log_identifier(value: Any, *, prefix: str) -> str:
    """Return a deterministic non-reversible token for log correlation fields."""
    text = str(value or "").strip()
    if not text:
        return f"{prefix}-missing"

    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()[:12]
    return f"{prefix}-{digest}"


def payload_keys(payload: Any) -> str:
    """Describe a raw payload by its sorted keys; values are never logged."""
    if not isinstance(payload, Mapping):
        return f"<{type(payload).__name__}>"
    return ",".join(sorted(str(key) for key in payload)) or "<empty>"
