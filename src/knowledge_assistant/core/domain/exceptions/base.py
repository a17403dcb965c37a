"""Root of the Knowledge Assistant exception hierarchy.

Every error raised by the pipeline, the backends or the inbound adapters
derives from ``KnowledgeAssistantError``. An instance knows its error code,
where it was raised, what caused it, and how to render itself as JSON for
logs and API responses.
"""

import inspect
import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from types import FrameType
from typing import Any


@dataclass(frozen=True)
class ErrorLocation:
    """The raise site of an error: class, method, file and line."""

    class_name: str
    method_name: str
    file_name: str
    line_number: int
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    @classmethod
    def from_frame(cls, frame: FrameType | None) -> "ErrorLocation":
        if frame is None:
            return cls("<unknown>", "<unknown>", "<unknown>", 0)
        owner = frame.f_locals.get("self")
        return cls(
            class_name=type(owner).__name__ if owner is not None else "<module>",
            method_name=frame.f_code.co_name,
            file_name=Path(frame.f_code.co_filename).name,
            line_number=frame.f_lineno,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "class": self.class_name,
            "method": self.method_name,
            "file": self.file_name,
            "line": self.line_number,
            "timestamp": self.timestamp,
        }


def _raise_site() -> FrameType | None:
    """First frame outside the constructors of the exception being built."""
    frame = inspect.currentframe()
    frame = frame.f_back if frame else None  # KnowledgeAssistantError.__init__
    while frame is not None and frame.f_code.co_name == "__init__" and isinstance(
        frame.f_locals.get("self"), KnowledgeAssistantError
    ):
        frame = frame.f_back
    return frame


class KnowledgeAssistantError(Exception):
    """Base exception for all Knowledge Assistant errors.

    Subclasses only set ``error_code``; the API maps the class to an HTTP
    status and the CLI prints the code.

    Example:
        try:
            vector = await self.embeddings.embed(question)
        except Exception as e:
            raise RetrievalError(
                "Failed to search knowledge base",
                cause=e,
                context={"collection": self.collection_name},
            ) from e
    """

    error_code: str = "KA_ERR_001"

    def __init__(
        self,
        message: str,
        *,
        cause: Exception | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Create the error.

        Args:
            message: Human-readable message, safe to show to API clients.
            cause: Underlying exception, usually a backend failure.
            context: Debugging details (collection, model, stage, ...).
                Only operators see these.
        """
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.extra_context = context or {}
        self.location = ErrorLocation.from_frame(_raise_site())

    @property
    def cause_trace(self) -> list[str]:
        """Traceback lines of the chained cause, empty when there is none."""
        if self.cause is None or self.cause.__traceback__ is None:
            return []
        rendered = traceback.format_exception(type(self.cause), self.cause, self.cause.__traceback__)
        return [line for chunk in rendered for line in chunk.splitlines() if line.strip()]

    def _describe_cause(self) -> dict[str, Any]:
        described: dict[str, Any] = {"type": type(self.cause).__name__, "message": str(self.cause)}
        if isinstance(self.cause, KnowledgeAssistantError):
            described["code"] = self.cause.error_code
        return described

    def to_dict(self, include_trace: bool = False) -> dict[str, Any]:
        """Render the error for structured logs and API bodies.

        The ``error`` block (type, code, message) is what clients see; the
        location, context, cause and, with ``include_trace``, the cause's stack
        trace are for operators.
        """
        result: dict[str, Any] = {
            "error": {"type": type(self).__name__, "code": self.error_code, "message": self.message},
            "location": self.location.to_dict(),
        }
        if self.extra_context:
            result["context"] = self.extra_context
        if self.cause is not None:
            result["cause"] = self._describe_cause()
            trace = self.cause_trace
            if include_trace and trace:
                result["stack_trace"] = trace
        return result
