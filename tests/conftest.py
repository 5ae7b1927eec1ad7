from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone
from typing import Any, Callable

import pytest

from insights_service.domain.pipeline.models import PersistedInsight
from insights_service.domain.ports.insight_repository_port import InsightRepositoryPort
from insights_service.domain.ports.llm_port import CompletionPort
from insights_service.domain.ports.storage_port import ObjectNotFound, ObjectStoragePort


def _escape_pdf_text(line: str) -> str:
    return line.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(lines: list[str]) -> bytes:
    """Build a one-page PDF 1.4 with one Helvetica text line per entry."""
    ops = ["BT", "/F1 12 Tf", "14 TL", "72 760 Td"]
    for line in lines:
        ops.append(f"({_escape_pdf_text(line)}) Tj T*")
    ops.append("ET")
    stream = "\n".join(ops).encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R "
        b"/Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for off in offsets:
        out += b"%010d 00000 n \n" % off
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_at)
    return bytes(out)


class FakeStorage(ObjectStoragePort):  # pragma: no cover
    def __init__(self, objects: dict[str, bytes] | None = None, *, delay: float = 0.0) -> None:
        self.objects = dict(objects or {})
        self.delay = delay
        self.calls: list[tuple[str, str]] = []
        self.error: Exception | None = None

    async def fetch(self, bucket: str, storage_key: str) -> bytes:
        self.calls.append((bucket, storage_key))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if storage_key not in self.objects:
            raise ObjectNotFound(bucket, storage_key)
        return self.objects[storage_key]


class FakeLLM(CompletionPort):  # pragma: no cover
    def __init__(self, response: str | dict[str, Any] = "{}", *, delay: float = 0.0) -> None:
        self.response = json.dumps(response, ensure_ascii=False) if isinstance(response, dict) else response
        self.delay = delay
        self.calls: list[dict[str, Any]] = []
        self.error: Exception | None = None

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        response_format: str = "json",
    ) -> str:
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "temperature": temperature,
                "response_format": response_format,
            }
        )
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response


class FakeRepository(InsightRepositoryPort):  # pragma: no cover
    def __init__(self) -> None:
        self.rows: list[PersistedInsight] = []
        self.error: Exception | None = None

    async def insert(self, insight: PersistedInsight) -> str:
        if self.error is not None:
            raise self.error
        self.rows.append(insight)
        return f"insight-{len(self.rows)}"


FIXED_START = datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_pdf() -> Callable[[list[str]], bytes]:
    return build_pdf


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_START


@pytest.fixture
def storage(make_pdf) -> FakeStorage:
    return FakeStorage(
        {
            "user-1/peticao.pdf": make_pdf(
                [
                    "PETICAO INICIAL",
                    "Autor: Fulano de Tal  Reu: Empresa X",
                    "Prazo de 10 dias para contestacao.",
                ]
            )
        }
    )


@pytest.fixture
def repository() -> FakeRepository:
    return FakeRepository()
