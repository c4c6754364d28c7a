"""
Pre-dispatch schema validation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ValidationError


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    reason: str = ""


PASSED = ValidationResult(ok=True)


@runtime_checkable
class SchemaValidator(Protocol):
    """Checks a request before it is sent."""

    def validate(self, request: Any) -> ValidationResult:
        ...


def format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = ".".join(str(part) for part in error.get("loc", ()))
        msg = error.get("msg", "invalid value")
        # "Value error, x" -> "x" for messages raised by our own validators
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, ") :]
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)


class ModelSchemaValidator:
    """
    Re-runs full model validation on a request instance.

    Requests normally validate on construction; this catches instances built
    with ``model_construct`` or mutated through ``__dict__``.
    """

    def validate(self, request: Any) -> ValidationResult:
        if not isinstance(request, BaseModel):
            return ValidationResult(ok=False, reason=f"unsupported request type: {type(request).__name__}")

        model_cls = type(request)
        values = {name: getattr(request, name) for name in model_cls.model_fields if hasattr(request, name)}
        try:
            model_cls.model_validate(values)
        except ValidationError as exc:
            return ValidationResult(ok=False, reason=format_validation_error(exc))
        return PASSED
