"""Extract-and-persist use-case.

Wraps the domain pipeline with the per-run concerns that do not belong in
the domain: run id, reference clock, log context and metrics.
"""

from __future__ import annotations

import time
import uuid
from datetime import datetime, timezone
from typing import Any, Callable

from insights_service.core.logging import bind_run_id, get_logger, unbind_run_id
from insights_service.domain.pipeline.errors import PipelineError
from insights_service.domain.pipeline.models import PipelineOptions, RunResult
from insights_service.domain.pipeline.orchestrator import run_pipeline
from insights_service.domain.ports.insight_repository_port import InsightRepositoryPort
from insights_service.domain.ports.llm_port import CompletionPort
from insights_service.domain.ports.storage_port import ObjectStoragePort
from insights_service.observability.metrics import record_run_failed, record_run_succeeded

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DocumentInsightExtractor:
    """Turns one stored PDF into one persisted legal insight.

    Not idempotent: each call inserts a new row. Callers that need
    de-duplication must do it before calling.
    """

    def __init__(
        self,
        *,
        storage: ObjectStoragePort,
        llm_client: CompletionPort,
        repository: InsightRepositoryPort,
        options: PipelineOptions | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._storage = storage
        self._llm_client = llm_client
        self._repository = repository
        self._options = options or PipelineOptions()
        self._clock = clock

    async def extract_and_persist(self, event: Any, *, run_id: str | None = None) -> RunResult:
        rid = run_id or uuid.uuid4().hex
        logger = get_logger(__name__)
        token = bind_run_id(rid)
        t0 = time.perf_counter()
        try:
            result = await run_pipeline(
                run_id=rid,
                event=event,
                started_at=self._clock(),
                storage=self._storage,
                llm_client=self._llm_client,
                repository=self._repository,
                options=self._options,
            )
            elapsed = time.perf_counter() - t0
            record_run_succeeded(elapsed, result.timings, result.urgency.value)
            logger.info(
                "insight_persisted",
                extra={
                    "insight_id": result.insight_id,
                    "urgency": result.urgency.value,
                    "duration_ms": round(elapsed * 1000, 2),
                },
            )
            return result
        except PipelineError as exc:
            record_run_failed(exc.stage)
            logger.warning(
                "insight_run_failed",
                extra={"stage": exc.stage, "error_code": exc.error_code, "error": exc.message},
            )
            raise
        finally:
            unbind_run_id(token)
