"""Shared error reporting for the API and the CLI.

Both inbound adapters turn exceptions into the same JSON shape: an ``error``
block (type, code, message) that clients may see, plus location, context,
cause and stack trace for operators.
"""

import json
import logging
import traceback
from typing import Any

from ...core.domain.exceptions import (
    IngestionError,
    KnowledgeAssistantError,
    RateLimitExceededError,
    ValidationError,
    VectorStoreError,
)

logger = logging.getLogger(__name__)

PYTHON_ERROR_CODE = "PYTHON_ERR"

# First match wins; anything unlisted is a 500
_STATUS_BY_TYPE: tuple[tuple[type[BaseException] | tuple[type[BaseException], ...], int], ...] = (
    (ValidationError, 400),
    (RateLimitExceededError, 429),
    (VectorStoreError, 503),
    (KnowledgeAssistantError, 500),
    (ValueError, 400),
    ((ConnectionError, TimeoutError), 503),
)


def _python_error_dict(exc: BaseException, include_trace: bool) -> dict[str, Any]:
    """Same shape as ``KnowledgeAssistantError.to_dict`` for a plain exception."""
    frames = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    raise_site = frames[-1] if frames else None

    result: dict[str, Any] = {
        "error": {"type": type(exc).__name__, "code": PYTHON_ERROR_CODE, "message": str(exc)},
        "location": {
            "class": "<unknown>",
            "method": raise_site.name if raise_site else "<unknown>",
            "file": raise_site.filename.replace("\\", "/").rsplit("/", 1)[-1]
            if raise_site
            else "<unknown>",
            "line": raise_site.lineno if raise_site else 0,
        },
    }
    if include_trace:
        rendered = traceback.format_exception(type(exc), exc, exc.__traceback__)
        result["stack_trace"] = [
            line for chunk in rendered for line in chunk.splitlines() if line.strip()
        ]
    return result


def format_exception_json(
    exc: BaseException,
    include_trace: bool = False,
    extra_context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Structured dictionary for any exception.

    Args:
        exc: Application or standard Python exception.
        include_trace: Add the stack trace.
        extra_context: Merged into ``context`` (request path, method, ...).
    """
    if isinstance(exc, KnowledgeAssistantError):
        result = exc.to_dict(include_trace=include_trace)
    else:
        result = _python_error_dict(exc, include_trace)

    if extra_context:
        result["context"] = {**result.get("context", {}), **extra_context}
    return result


def log_exception(
    exc: BaseException,
    log: logging.Logger | None = None,
    level: int = logging.ERROR,
    extra_context: dict[str, Any] | None = None,
) -> None:
    """Log the full structured record, stack trace included.

    Example:
        >>> except KnowledgeAssistantError as e:
        ...     log_exception(e, extra_context={"path": "/api/v1/query"})
    """
    record = format_exception_json(exc, include_trace=True, extra_context=extra_context)
    (log or logger).log(level, json.dumps(record, indent=2, default=str))


def client_error_body(exc: BaseException, debug: bool = False) -> dict[str, Any]:
    """Error payload safe to return to API clients.

    Outside debug mode only the ``error`` block leaves the process; internal
    hosts, collection names and traces stay in the logs.
    """
    if debug:
        return format_exception_json(exc, include_trace=True)
    return {"error": format_exception_json(exc)["error"]}


def get_error_code(exc: BaseException) -> str:
    """Error code of an exception ("KA_RET_001", or "PYTHON_ERR")."""
    if isinstance(exc, KnowledgeAssistantError):
        return exc.error_code
    return PYTHON_ERROR_CODE


def get_http_status_code(exc: BaseException) -> int:
    """HTTP status for an exception (400, 429, 500 or 503).

    Ingestion failures caused by the vector store are reported as 503 so
    clients can tell an outage from a bad document.
    """
    if isinstance(exc, IngestionError) and isinstance(exc.cause, VectorStoreError):
        return 503
    for types, status in _STATUS_BY_TYPE:
        if isinstance(exc, types):
            return status
    return 500
