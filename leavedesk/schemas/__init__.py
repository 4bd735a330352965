from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from leavedesk.schemas.result import Failure, FieldError, Success

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_payload(model: type[ModelT], payload: ModelT | Mapping[str, Any]) -> ModelT:
    """Accept either a ready payload model or raw mapping (e.g. submitted form data)."""
    if isinstance(payload, model):
        return payload
    return model.model_validate(payload)


def parse_payload_collecting(
    model: type[ModelT], payload: ModelT | Mapping[str, Any]
) -> tuple[ModelT, list[FieldError]]:
    """Parse a payload, setting aside the fields pydantic rejects.

    Rejected fields (bad values and unknown keys) are reported as field
    errors and left out of the returned model, so the caller can still
    run its own checks on everything else.
    """
    if isinstance(payload, model) or not isinstance(payload, Mapping):
        return parse_payload(model, payload), []
    try:
        return model.model_validate(payload), []
    except ValidationError as exc:
        errors = FieldError.from_validation_error(exc)

    rejected = {e.field for e in errors}
    kept = {key: value for key, value in payload.items() if key not in rejected}
    return model.model_validate(kept), errors


def merge_field_errors(first: list[FieldError], second: list[FieldError]) -> list[FieldError]:
    """Concatenate error lists, dropping entries in ``second`` for fields ``first`` already reports."""
    reported = {e.field for e in first}
    return [*first, *(e for e in second if e.field not in reported)]


__all__ = ["Failure", "FieldError", "Success", "merge_field_errors", "parse_payload", "parse_payload_collecting"]
