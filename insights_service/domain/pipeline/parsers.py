"""Lenient decoding of the completion service's JSON answer.

Model output is untrusted. Every field is decoded on its own and falls back to
a conservative default instead of failing the run: urgency drops to Baixa,
the deadline flag drops to false and the day count is only read when the
flag is set.
"""

from __future__ import annotations

import json
import math
import unicodedata
from typing import Any, Optional

from insights_service.domain.pipeline.models import InsightResult, Urgency

_TRUE_STRINGS = {"true", "sim", "yes", "1"}


def _strip_code_fence(content: str) -> str:
    s = content.strip()
    if s.startswith("```"):
        s = s[3:]
        if s.lower().startswith("json"):
            s = s[4:]
        if s.endswith("```"):
            s = s[:-3]
    return s.strip()


def load_json_object(content: str | None) -> tuple[dict[str, Any], bool]:
    """Decode content into a dict. Returns (obj, ok); ok is False when content was unusable."""
    if not content or not content.strip():
        return {}, False
    try:
        obj = json.loads(_strip_code_fence(content))
    except ValueError:
        return {}, False
    if not isinstance(obj, dict):
        return {}, False
    return obj, True


def _fold(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).strip().lower()


_URGENCY_BY_FOLDED = {_fold(u.value): u for u in Urgency}
_URGENCY_BY_FOLDED.update({"high": Urgency.ALTA, "medium": Urgency.MEDIA, "low": Urgency.BAIXA})


def parse_urgency(value: Any) -> Optional[Urgency]:
    if not isinstance(value, str):
        return None
    return _URGENCY_BY_FOLDED.get(_fold(value))


def parse_flag(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        return _fold(value) in _TRUE_STRINGS
    return None


def parse_days(value: Any) -> Optional[int]:
    """Return a non-negative whole day count, or None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        days = int(value)
        return days if days >= 0 else None
    return None


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, list):
        # keep scalar items of a list answer, e.g. ["petição", "inicial"]
        return ", ".join(str(item).strip() for item in value if isinstance(item, (str, int, float)))
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    return None


def parse_insight(content: str | None) -> tuple[InsightResult, list[str]]:
    """Decode the raw completion into an InsightResult.

    Returns the result plus the names of the contract fields that were missing
    or invalid and therefore defaulted.
    """
    obj, _ = load_json_object(content)
    defaulted: list[str] = []

    document_type = _text(obj.get("tipo_documento"))
    if document_type is None:
        defaulted.append("tipo_documento")
    summary = _text(obj.get("resumo"))
    if summary is None:
        defaulted.append("resumo")
    recommendation = _text(obj.get("recomendacao"))
    if recommendation is None:
        defaulted.append("recomendacao")

    urgency = parse_urgency(obj.get("urgencia"))
    if urgency is None:
        defaulted.append("urgencia")
        urgency = Urgency.BAIXA

    has_deadline = parse_flag(obj.get("tem_prazo"))
    if has_deadline is None:
        defaulted.append("tem_prazo")
        has_deadline = False

    deadline_days: Optional[int] = None
    if has_deadline:
        deadline_days = parse_days(obj.get("dias_prazo"))
        if deadline_days is None:
            defaulted.append("dias_prazo")

    result = InsightResult(
        document_type=document_type or "",
        summary=summary or "",
        has_deadline=has_deadline,
        deadline_days=deadline_days,
        urgency=urgency,
        recommendation=recommendation or "",
    )
    return result, defaulted
