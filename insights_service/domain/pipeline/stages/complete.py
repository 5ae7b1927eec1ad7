from __future__ import annotations

import asyncio

from insights_service.domain.pipeline.errors import CompletionServiceError
from insights_service.domain.pipeline.models import RunContext
from insights_service.domain.pipeline.prompts import build_insight_request
from insights_service.domain.ports.llm_port import CompletionPort


async def run_complete(
    context: RunContext,
    *,
    llm_client: CompletionPort,
    temperature: float,
    timeout: float,
) -> RunContext:
    """Send the windowed text to the completion service and keep the raw answer.

    No retries here; retry policy belongs to whoever fires the trigger.
    """
    if context.window is None:
        raise CompletionServiceError("window is not set in RunContext for complete stage")
    request = build_insight_request(context.window, temperature=temperature)
    context.request = request
    try:
        content = await asyncio.wait_for(
            llm_client.complete(
                request.system_prompt,
                request.user_prompt,
                temperature=request.temperature,
                response_format=request.response_format,
            ),
            timeout=timeout,
        )
    except asyncio.TimeoutError as exc:
        raise CompletionServiceError(f"Completion timed out after {timeout}s", cause=exc) from exc
    except Exception as exc:
        raise CompletionServiceError(f"Completion request failed: {exc}", cause=exc) from exc

    if content is not None and not isinstance(content, str):
        raise CompletionServiceError(f"Completion returned {type(content).__name__}, expected text")
    context.completion_text = content or ""
    return context
