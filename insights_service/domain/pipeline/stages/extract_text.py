from __future__ import annotations

import asyncio
import io

from pypdf import PdfReader

from insights_service.domain.pipeline.errors import ExtractionError
from insights_service.domain.pipeline.models import ExtractedText, RunContext


def extract_pdf_text(data: bytes) -> ExtractedText:
    """Read every page of a PDF and join the page texts.

    Raises ExtractionError for non-PDF input, unreadable PDFs and PDFs with no text layer.
    """
    if not data:
        raise ExtractionError("Document is empty")
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
    except Exception as exc:
        raise ExtractionError(f"Document is not a readable PDF: {exc}", cause=exc) from exc

    text = "\n".join(pages)
    if not text.strip():
        raise ExtractionError("PDF yielded no text", details={"page_count": len(pages)})
    return ExtractedText(text=text, page_count=len(pages))


async def run_extract_text(context: RunContext) -> RunContext:
    if context.document_bytes is None:
        raise ExtractionError("document bytes are not set in RunContext for extract_text stage")
    # pypdf is CPU-bound; keep the event loop free for concurrent runs
    context.extracted = await asyncio.to_thread(extract_pdf_text, context.document_bytes)
    # raw bytes are no longer needed
    context.document_bytes = None
    return context
