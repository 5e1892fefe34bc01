"""Validation gate between raw review payloads and the record store."""
from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional

from pydantic import ValidationError

from .errors import FieldError, ValidationFailed
from .schemas import ReviewCreate, ReviewUpdate

SERVER_OWNED_FIELDS = frozenset({"id", "createdAt", "created_at"})


class Mode(str, Enum):
    CREATE = "create"
    UPDATE = "update"


def _field_errors(exc: ValidationError) -> List[FieldError]:
    errors: List[FieldError] = []
    seen: set[str] = set()
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "__root__"
        if field in seen:
            continue
        seen.add(field)
        message = error["msg"].removeprefix("Value error, ")
        errors.append(FieldError(field=field, reason=message))
    return errors


def validate(
    payload: Mapping[str, Any],
    mode: Mode,
    extra_errors: Optional[Iterable[FieldError]] = None,
) -> dict[str, Any]:
    """Check a review payload and return its validated fields.

    Server-owned keys are dropped before validation. In ``Mode.UPDATE`` only the
    fields present in the payload are returned. Every violation, including any
    ``extra_errors`` gathered by the caller, is raised together as one
    ``ValidationFailed``.
    """
    data = {key: value for key, value in payload.items() if key not in SERVER_OWNED_FIELDS}
    errors = list(extra_errors or [])
    schema = ReviewCreate if mode is Mode.CREATE else ReviewUpdate

    try:
        model = schema.model_validate(data)
    except ValidationError as exc:
        raise ValidationFailed(errors + _field_errors(exc)) from exc

    if errors:
        raise ValidationFailed(errors)
    return model.model_dump(exclude_unset=mode is Mode.UPDATE)
