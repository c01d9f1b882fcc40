"""Typed failures raised by the HTTP map-service adapters.

Use cases never see transport exceptions directly: adapters raise the classes
below and use cases collapse them into a ``UseCaseError`` with the adapter
error chained as ``__cause__``.
"""
from __future__ import annotations

from typing import Any, Optional


class ApiError(RuntimeError):
    """Base class for map-service adapter failures."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        code: Optional[str] = None,
        hint: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.code = code
        self.hint = hint
        self.payload = payload
        self.context = context


class ApiClientError(ApiError):
    """HTTP 4xx from a map service (bad query, missing token, rate limit)."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        code: Optional[str] = None,
        hint: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            status=status,
            code=code,
            hint=hint,
            payload=payload,
            context=context,
        )


class ApiServerError(ApiError):
    """HTTP 5xx from a map service."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            status=status,
            payload=payload,
            context=context,
        )


class ApiTimeoutError(ApiError):
    """Transport level timeout or connectivity failure."""

    def __init__(
        self,
        message: str,
        *,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message, context=context)


class ApiPayloadError(ApiError):
    """2xx response whose body does not have the expected shape."""


def ensure_ok(resp: Any, ctx: str) -> None:
    """Raise the matching ``ApiError`` subclass for non-2xx responses."""
    status = int(resp.status_code)
    if 200 <= status < 300:
        return
    payload = parse_error_payload(resp)
    message = build_error_message(ctx, status, payload)
    if 400 <= status < 500:
        raise ApiClientError(
            message,
            status=status,
            code=extract_error_code(payload),
            hint=extract_error_hint(payload),
            payload=payload,
            context=ctx,
        )
    if 500 <= status < 600:
        raise ApiServerError(message, status=status, payload=payload, context=ctx)
    raise ApiError(message, status=status, payload=payload, context=ctx)


def json_body(resp: Any, ctx: str) -> Any:
    """Decode a JSON response body or raise ``ApiPayloadError``."""
    try:
        return resp.json()
    except ValueError as exc:
        snippet = (getattr(resp, "text", "") or "")[:400]
        raise ApiPayloadError(f"{ctx}: invalid JSON response: {snippet}", context=ctx) from exc


def parse_error_payload(resp: Any) -> Any:
    """Best-effort extraction of error payload without raising."""
    try:
        return resp.json()
    except Exception:
        snippet = getattr(resp, "text", "")
        if not snippet:
            return None
        return snippet[:400]


def build_error_message(ctx: str, status: int, payload: Any) -> str:
    detail = first_string(payload)
    if detail:
        return f"{ctx}: {detail} (HTTP {status})"
    return f"{ctx}: HTTP {status}"


def extract_error_code(payload: Any) -> Optional[str]:
    # OSRM answers {"code": "NoRoute"}, Mapillary {"error": {"code": 190}}.
    if isinstance(payload, dict):
        for key in ("code", "error", "error_code"):
            value = payload.get(key)
            if value is None:
                continue
            if isinstance(value, dict):
                nested = extract_error_code(value)
                if nested:
                    return nested
                continue
            return str(value)
    return None


def extract_error_hint(payload: Any) -> Optional[str]:
    if isinstance(payload, dict):
        for key in ("message", "hint", "details"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()[:200]
        error = payload.get("error")
        if isinstance(error, dict):
            return extract_error_hint(error)
    if isinstance(payload, str):
        return payload.strip()[:200] or None
    return None


def first_string(payload: Any) -> Optional[str]:
    if isinstance(payload, str):
        text = payload.strip()
        return text or None
    if isinstance(payload, dict):
        for key in ("detail", "message", "error", "title"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
            if isinstance(value, (dict, list)):
                candidate = first_string(value)
                if candidate:
                    return candidate
    if isinstance(payload, list):
        for item in payload:
            candidate = first_string(item)
            if candidate:
                return candidate
    return None


__all__ = [
    "ApiClientError",
    "ApiError",
    "ApiPayloadError",
    "ApiServerError",
    "ApiTimeoutError",
    "build_error_message",
    "ensure_ok",
    "extract_error_code",
    "extract_error_hint",
    "first_string",
    "json_body",
    "parse_error_payload",
]
