from __future__ import annotations

import json

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from insights_service.application.usecases.extract_insight import DocumentInsightExtractor
from insights_service.core.dependencies import get_extractor
from insights_service.core.logging import get_logger
from insights_service.domain.pipeline.errors import ValidationError
from insights_service.models.schemas import AnalyzeResponse, ErrorResponse
from insights_service.observability.errors import CORS_HEADERS

router = APIRouter(prefix="/v1", tags=["analyze"])


@router.options("/analyze-document")
async def analyze_document_preflight():
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@router.post(
    "/analyze-document",
    response_model=AnalyzeResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}, 504: {"model": ErrorResponse}},
)
async def analyze_document(
    request: Request,
    extractor: DocumentInsightExtractor = Depends(get_extractor),
):
    """Entry point for the document-row insert webhook.

    Accepts {"record": {...}} from the database webhook or a direct
    {storageKey, userId, caseId?, documentName?} payload.
    """
    logger = get_logger(__name__)
    raw = await request.body()
    try:
        event = json.loads(raw) if raw else None
    except ValueError as exc:
        raise ValidationError("Payload inválido", cause=exc, details={"reason": "body is not JSON"}) from exc

    record = event.get("record") if isinstance(event, dict) else None
    document_name = record.get("nome") if isinstance(record, dict) else None
    logger.info("analyze_request_received", extra={"document_name": document_name})

    result = await extractor.extract_and_persist(event)
    body = AnalyzeResponse.from_result(result)
    return JSONResponse(content=body.model_dump(mode="json"), headers=CORS_HEADERS)
