from __future__ import annotations

import pytest

from insights_service.domain.pipeline.models import Urgency
from insights_service.domain.pipeline.parsers import (
    load_json_object,
    parse_days,
    parse_flag,
    parse_insight,
    parse_urgency,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Alta", Urgency.ALTA),
        ("alta", Urgency.ALTA),
        ("Média", Urgency.MEDIA),
        ("media", Urgency.MEDIA),
        ("  MÉDIA ", Urgency.MEDIA),
        ("Baixa", Urgency.BAIXA),
        ("High", Urgency.ALTA),
        ("low", Urgency.BAIXA),
        ("Urgentíssima", None),
        (3, None),
        (None, None),
    ],
)
def test_parse_urgency(raw, expected) -> None:
    assert parse_urgency(raw) == expected


def test_parse_flag_accepts_booleans_and_common_strings() -> None:
    assert parse_flag(True) is True
    assert parse_flag(False) is False
    assert parse_flag("sim") is True
    assert parse_flag("TRUE") is True
    assert parse_flag("não") is False
    assert parse_flag(None) is None
    assert parse_flag(1) is True
    assert parse_flag(0) is False
    assert parse_flag(2.5) is True
    assert parse_flag(float("nan")) is False
    assert parse_flag([True]) is None


def test_parse_days() -> None:
    assert parse_days(10) == 10
    assert parse_days(0) == 0
    assert parse_days("15") == 15
    assert parse_days(7.9) == 7
    assert parse_days(-3) is None
    assert parse_days(True) is None
    assert parse_days("quinze") is None
    assert parse_days(float("nan")) is None
    assert parse_days(float("inf")) is None
    assert parse_days([5]) is None


def test_load_json_object_strips_code_fence() -> None:
    obj, ok = load_json_object('```json\n{"urgencia": "Alta"}\n```')
    assert ok
    assert obj == {"urgencia": "Alta"}


@pytest.mark.parametrize("content", [None, "", "   ", "not json", "[1, 2]", '"Alta"'])
def test_load_json_object_rejects_non_objects(content) -> None:
    assert load_json_object(content) == ({}, False)


def test_parse_insight_complete_answer() -> None:
    result, defaulted = parse_insight(
        '{"tipo_documento": "sentença", "resumo": " Procedente. ", "tem_prazo": true,'
        ' "dias_prazo": 15, "urgencia": "Média", "recomendacao": "Avaliar recurso."}'
    )
    assert defaulted == []
    assert result.document_type == "sentença"
    assert result.summary == "Procedente."
    assert result.has_deadline is True
    assert result.deadline_days == 15
    assert result.urgency is Urgency.MEDIA


def test_parse_insight_days_ignored_without_deadline_flag() -> None:
    result, defaulted = parse_insight('{"tem_prazo": false, "dias_prazo": 30}')
    assert result.has_deadline is False
    assert result.deadline_days is None
    assert "dias_prazo" not in defaulted


def test_parse_insight_invalid_days_with_flag_set() -> None:
    result, defaulted = parse_insight('{"tem_prazo": true, "dias_prazo": "em breve"}')
    assert result.has_deadline is True
    assert result.deadline_days is None
    assert "dias_prazo" in defaulted


def test_parse_insight_garbage_defaults_everything() -> None:
    result, defaulted = parse_insight("<html>502 Bad Gateway</html>")
    assert result.urgency is Urgency.BAIXA
    assert result.has_deadline is False
    assert result.deadline_days is None
    assert result.document_type == ""
    assert set(defaulted) == {"tipo_documento", "resumo", "recomendacao", "urgencia", "tem_prazo"}


def test_parse_insight_numeric_deadline_flag_keeps_deadline() -> None:
    result, defaulted = parse_insight('{"tem_prazo": 1, "dias_prazo": 10, "urgencia": "Alta"}')
    assert result.has_deadline is True
    assert result.deadline_days == 10
    assert "tem_prazo" not in defaulted


def test_parse_insight_keeps_non_string_text_fields() -> None:
    result, defaulted = parse_insight(
        '{"tipo_documento": ["petição", "inicial"], "resumo": 5, "recomendacao": {"acao": "contestar"}}'
    )
    assert result.document_type == "petição, inicial"
    assert result.summary == "5"
    assert result.recommendation == '{"acao": "contestar"}'
    assert not {"tipo_documento", "resumo", "recomendacao"} & set(defaulted)
