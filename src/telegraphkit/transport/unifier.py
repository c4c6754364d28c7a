"""
Turns a raw HTTP response into a typed payload or a structured error.

Wire shapes:
    success envelope   {"ok": bool, "result": <any>, "error": str?}
    error envelope     {"error_code": int?, "description": str?}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Type, TypeVar, overload

import structlog
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from telegraphkit.errors import APIError, ResponseDecodeError

logger = structlog.get_logger(__name__)

T = TypeVar("T")

SUCCESS_STATUS = 200
OK_FALSE_DESCRIPTION = "API returned ok: false"


@dataclass(frozen=True)
class RawResponse:
    """Status and fully-read body of one HTTP exchange."""

    status: int
    body: bytes
    headers: Dict[str, str]
    attempts: int = 1


class Envelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ok: bool
    result: Any = None
    error: Optional[str] = None


class ErrorEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    error_code: Optional[int] = None
    description: Optional[str] = None
    error: Optional[str] = None


_ADAPTERS: Dict[Any, TypeAdapter[Any]] = {}


def _adapter(result_type: Any) -> TypeAdapter[Any]:
    adapter = _ADAPTERS.get(result_type)
    if adapter is None:
        adapter = TypeAdapter(result_type)
        _ADAPTERS[result_type] = adapter
    return adapter


def _error_from_body(status: int, body: bytes) -> APIError:
    text = body.decode("utf-8", errors="replace")
    try:
        decoded = ErrorEnvelope.model_validate_json(body)
    except ValidationError:
        decoded = None

    if decoded is None or (decoded.error_code is None and decoded.description is None and decoded.error is None):
        return APIError(text, code=status)

    description = decoded.description if decoded.description is not None else decoded.error
    return APIError(description or "", code=decoded.error_code or 0)


@overload
def unify(response: RawResponse, result_type: None = None) -> None: ...


@overload
def unify(response: RawResponse, result_type: Type[T]) -> Optional[T]: ...


def unify(response: RawResponse, result_type: Any = None) -> Any:
    """
    Resolve a response into its payload.

    Args:
        response: Raw status and body
        result_type: Type to decode ``result`` into; None to discard the payload

    Returns:
        The decoded payload, or None when no payload was requested or the
        envelope carried no ``result``.

    Raises:
        APIError: non-success status or ``ok: false`` envelope
        ResponseDecodeError: malformed envelope or payload/schema mismatch
    """
    if response.status != SUCCESS_STATUS:
        err = _error_from_body(response.status, response.body)
        logger.info("API returned error status", status=response.status, code=err.code)
        raise err

    try:
        envelope = Envelope.model_validate_json(response.body)
    except ValidationError as exc:
        raise ResponseDecodeError(f"malformed response envelope: {_first_error(exc)}") from exc

    if not envelope.ok:
        raise APIError(envelope.error or OK_FALSE_DESCRIPTION)

    if result_type is None or envelope.result is None:
        return None

    try:
        # Round-trip through JSON so the payload is decoded exactly as sent.
        return _adapter(result_type).validate_json(json.dumps(envelope.result))
    except ValidationError as exc:
        name = getattr(result_type, "__name__", repr(result_type))
        raise ResponseDecodeError(f"result does not match {name}: {_first_error(exc)}") from exc


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
    return f"{loc}: {first.get('msg', 'invalid')}"
