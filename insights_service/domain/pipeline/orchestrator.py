"""Domain pipeline orchestrator.

One linear pass per uploaded document: validate, fetch, extract_text, window,
complete, parse, deadline, persist. Any stage failure aborts the run before
persist, so a failed run leaves no insight row behind.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Any

from insights_service.domain.pipeline.errors import PipelineError
from insights_service.domain.pipeline.models import PipelineOptions, RunContext, RunResult
from insights_service.domain.pipeline.stages.complete import run_complete
from insights_service.domain.pipeline.stages.deadline import run_deadline
from insights_service.domain.pipeline.stages.extract_text import run_extract_text
from insights_service.domain.pipeline.stages.fetch import run_fetch
from insights_service.domain.pipeline.stages.parse import run_parse
from insights_service.domain.pipeline.stages.persist import run_persist
from insights_service.domain.pipeline.stages.validate import run_validate
from insights_service.domain.pipeline.stages.window import run_window
from insights_service.domain.ports.insight_repository_port import InsightRepositoryPort
from insights_service.domain.ports.llm_port import CompletionPort
from insights_service.domain.ports.storage_port import ObjectStoragePort

logger = logging.getLogger(__name__)


class _StageTimer:
    def __init__(self, context: RunContext, stage: str) -> None:
        self._context = context
        self._stage = stage
        self._t0 = 0.0

    def __enter__(self) -> "_StageTimer":
        self._t0 = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        elapsed = time.perf_counter() - self._t0
        self._context.timings[self._stage] = elapsed
        if exc_type is None:
            logger.debug("stage_completed", extra={"stage": self._stage, "duration_ms": round(elapsed * 1000, 2)})


async def run_pipeline(
    *,
    run_id: str,
    event: Any,
    started_at: datetime,
    storage: ObjectStoragePort,
    llm_client: CompletionPort,
    repository: InsightRepositoryPort,
    options: PipelineOptions,
) -> RunResult:
    """Run the insight pipeline for a single trigger event.

    started_at is the reference instant for the relative deadline.
    """
    ctx = RunContext(run_id=run_id, started_at=started_at, raw_event=event)

    with _StageTimer(ctx, "validate"):
        ctx = run_validate(ctx)
    payload = ctx.payload
    if payload is None:
        raise PipelineError("validate stage produced no payload")
    logger.info("pipeline_started", extra={"storage_key": payload.storage_key, "user_id": payload.user_id})

    with _StageTimer(ctx, "fetch"):
        ctx = await run_fetch(ctx, storage=storage, bucket=options.bucket, timeout=options.fetch_timeout)
    with _StageTimer(ctx, "extract_text"):
        ctx = await run_extract_text(ctx)
    with _StageTimer(ctx, "window"):
        ctx = run_window(ctx, head_chars=options.head_chars, tail_chars=options.tail_chars)
    with _StageTimer(ctx, "complete"):
        ctx = await run_complete(
            ctx,
            llm_client=llm_client,
            temperature=options.temperature,
            timeout=options.completion_timeout,
        )
    with _StageTimer(ctx, "parse"):
        ctx = run_parse(ctx)
    with _StageTimer(ctx, "deadline"):
        ctx = run_deadline(ctx)
    with _StageTimer(ctx, "persist"):
        ctx = await run_persist(ctx, repository=repository)

    if ctx.insight is None or ctx.insight_id is None:
        raise PipelineError("pipeline finished without an insight")
    return RunResult(
        run_id=ctx.run_id,
        insight_id=ctx.insight_id,
        user_id=payload.user_id,
        case_id=payload.case_id,
        urgency=ctx.insight.urgency,
        detected_deadline=ctx.detected_deadline,
        insight=ctx.insight,
        timings=dict(ctx.timings),
    )
