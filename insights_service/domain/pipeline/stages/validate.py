from __future__ import annotations

from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from insights_service.domain.pipeline.errors import ValidationError
from insights_service.domain.pipeline.models import RunContext, TriggerPayload

# Database webhook "record" column names -> trigger payload fields
_RECORD_FIELDS = {
    "file_key": "storageKey",
    "user_id": "userId",
    "processo_id": "caseId",
    "nome": "documentName",
}


def unwrap_event(event: Any) -> Mapping[str, Any]:
    """Accept either a database-webhook envelope ({"record": {...}}) or a direct payload."""
    if not isinstance(event, Mapping):
        raise ValidationError("Payload inválido", details={"reason": "event is not an object"})
    record = event.get("record")
    if record is None:
        return event
    if not isinstance(record, Mapping):
        raise ValidationError("Payload inválido", details={"reason": "record is not an object"})
    return {target: record.get(source) for source, target in _RECORD_FIELDS.items()}


def run_validate(context: RunContext) -> RunContext:
    """Validate the trigger payload before any collaborator is touched."""
    data = unwrap_event(context.raw_event)
    try:
        payload = TriggerPayload.model_validate(dict(data))
    except PydanticValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise ValidationError("Payload inválido", cause=exc, details={"fields": fields}) from exc
    context.payload = payload
    return context
