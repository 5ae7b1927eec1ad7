"""Domain-level errors for the insight pipeline.

Every terminal failure of a run is one of the subclasses below; the stage
attribute names the pipeline step that raised it. Mapping to HTTP responses is
handled in observability/errors.py.
"""

from __future__ import annotations

from typing import Any, Optional


class PipelineError(Exception):
    """Base error for domain pipeline failures."""

    stage: str = "pipeline"
    error_code: str = "PIPELINE_ERROR"
    http_status: int = 500
    retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        cause: Optional[BaseException] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "error": self.message,
            "code": self.error_code,
            "stage": self.stage,
            "retryable": self.retryable,
        }
        if self.cause is not None:
            body["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(PipelineError):
    """Raised when the trigger payload is missing required fields."""

    stage = "validate"
    error_code = "VALIDATION_ERROR"
    http_status = 400


class RetrievalError(PipelineError):
    """Raised when the stored object cannot be fetched (missing, transport error, timeout)."""

    stage = "fetch"
    error_code = "RETRIEVAL_ERROR"
    http_status = 502
    retryable = True


class ExtractionError(PipelineError):
    """Raised when the binary is not a readable PDF or yields no text."""

    stage = "extract_text"
    error_code = "EXTRACTION_ERROR"
    http_status = 422


class CompletionServiceError(PipelineError):
    """Raised when the completion call fails or returns an unusable transport-level response."""

    stage = "complete"
    error_code = "COMPLETION_SERVICE_ERROR"
    http_status = 502
    retryable = True


class PersistenceError(PipelineError):
    """Raised when the final insight insert fails after a successful analysis."""

    stage = "persist"
    error_code = "PERSISTENCE_ERROR"
    http_status = 500
    retryable = True
