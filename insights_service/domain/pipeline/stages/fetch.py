from __future__ import annotations

import asyncio

from insights_service.domain.pipeline.errors import RetrievalError, ValidationError
from insights_service.domain.pipeline.models import RunContext
from insights_service.domain.ports.storage_port import ObjectNotFound, ObjectStoragePort


async def run_fetch(
    context: RunContext,
    *,
    storage: ObjectStoragePort,
    bucket: str,
    timeout: float,
) -> RunContext:
    """Download the document bytes via ObjectStoragePort.

    Raises RetrievalError when the object is missing, the fetch fails or the
    timeout elapses.
    """
    if context.payload is None:
        raise ValidationError("payload is not set in RunContext for fetch stage")
    key = context.payload.storage_key
    details = {"bucket": bucket, "storage_key": key}
    try:
        data = await asyncio.wait_for(storage.fetch(bucket, key), timeout=timeout)
    except ObjectNotFound as exc:
        raise RetrievalError(f"Document not found in storage: {key}", cause=exc, details=details) from exc
    except asyncio.TimeoutError as exc:
        raise RetrievalError(f"Storage fetch timed out after {timeout}s", cause=exc, details=details) from exc
    except Exception as exc:
        raise RetrievalError(f"Storage fetch failed: {exc}", cause=exc, details=details) from exc

    context.document_bytes = data
    return context
