"""Declarative payload validation.

Learn: Each payload is a pydantic model whose field validators carry the
human-readable rule messages ("Username must be between 3 and 30
characters"). This module turns pydantic's error dicts into a flat list
of Violations, independent of FastAPI, so the same rules serve HTTP
bodies, query parameters and the CLI.
"""

from dataclasses import dataclass
from typing import Any, Iterable, TypeVar

from pydantic import BaseModel, ValidationError

from inkwell.errors import ValidationFailedError

M = TypeVar("M", bound=BaseModel)

# FastAPI prefixes locations with where the value came from
_LOCATION_ROOTS = {"body", "query", "path", "header", "cookie"}
_VALUE_ERROR_PREFIX = "Value error, "


@dataclass(frozen=True)
class Violation:
    """One broken rule on one field."""

    field: str
    message: str
    kind: str


def _field_name(loc: Iterable[Any]) -> str:
    parts = [str(p) for p in loc]
    if parts and parts[0] in _LOCATION_ROOTS and len(parts) > 1:
        parts = parts[1:]
    return ".".join(parts) or "body"


def violations_from_errors(errors: Iterable[dict]) -> list[Violation]:
    """Convert pydantic/FastAPI error dicts into Violations."""
    violations = []
    for err in errors:
        field = _field_name(err.get("loc", ()))
        kind = err.get("type", "value_error")
        if kind == "missing":
            message = f"{field} is required"
        else:
            message = err.get("msg", "Invalid value")
            if message.startswith(_VALUE_ERROR_PREFIX):
                message = message[len(_VALUE_ERROR_PREFIX):]
        violations.append(Violation(field=field, message=message, kind=kind))
    return violations


def violation_details(violations: Iterable[Violation]) -> dict[str, dict[str, str]]:
    """Raw per-field detail, first violation per field wins."""
    details: dict[str, dict[str, str]] = {}
    for v in violations:
        details.setdefault(v.field, {"message": v.message, "kind": v.kind})
    return details


def validate_payload(model: type[M], data: Any) -> M:
    """Validate ``data`` against ``model`` or raise ValidationFailedError."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ValidationFailedError(violations_from_errors(exc.errors())) from exc
