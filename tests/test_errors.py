from __future__ import annotations

import asyncio

import httpx
import pytest

from insights_service.domain.pipeline.errors import (
    CompletionServiceError,
    ExtractionError,
    PersistenceError,
    PipelineError,
    RetrievalError,
    ValidationError,
)
from insights_service.observability.errors import status_for


@pytest.mark.parametrize(
    "cls, stage, status, retryable",
    [
        (ValidationError, "validate", 400, False),
        (RetrievalError, "fetch", 502, True),
        (ExtractionError, "extract_text", 422, False),
        (CompletionServiceError, "complete", 502, True),
        (PersistenceError, "persist", 500, True),
    ],
)
def test_error_taxonomy(cls, stage, status, retryable) -> None:
    err = cls("boom")
    assert isinstance(err, PipelineError)
    assert err.stage == stage
    assert status_for(err) == status
    assert err.retryable is retryable


def test_to_dict_includes_cause_and_details() -> None:
    err = RetrievalError("missing", cause=KeyError("k"), details={"bucket": "b"})
    body = err.to_dict()
    assert body["code"] == "RETRIEVAL_ERROR"
    assert body["stage"] == "fetch"
    assert body["cause"].startswith("KeyError")
    assert body["details"] == {"bucket": "b"}


def test_to_dict_omits_empty_optionals() -> None:
    assert set(ValidationError("Payload inválido").to_dict()) == {"error", "code", "stage", "retryable"}


@pytest.mark.parametrize(
    "cause",
    [asyncio.TimeoutError(), TimeoutError(), httpx.ReadTimeout("slow")],
)
def test_timeouts_map_to_gateway_timeout(cause) -> None:
    assert status_for(CompletionServiceError("timed out", cause=cause)) == 504
    assert status_for(RetrievalError("timed out", cause=cause)) == 504
