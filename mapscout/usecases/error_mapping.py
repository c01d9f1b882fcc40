"""Translate adapter errors into UseCaseError instances and render them as text."""

from __future__ import annotations

from typing import Optional

from mapscout.adapters.api_errors import (
    ApiClientError,
    ApiError,
    ApiPayloadError,
    ApiServerError,
    ApiTimeoutError,
)
from mapscout.domain.ports import FailureKind, UseCaseError


def map_api_error(
    exc: Exception,
    *,
    default_code: str,
    default_message: Optional[str] = None,
    kind: Optional[FailureKind] = None,
) -> UseCaseError:
    """Collapse an adapter exception into the caller's single failure code.

    Each map client reports one failure kind, so every transport, status or
    payload error becomes ``default_code``. The original exception is chained
    as ``__cause__`` for ``describe_cause``. ``UseCaseError`` passes through.
    """
    if isinstance(exc, UseCaseError):
        return exc
    message = default_message or str(exc) or "Unexpected error."
    err = UseCaseError(default_code, message, kind=kind)
    err.__cause__ = exc
    return err


def describe_error(exc: BaseException) -> str:
    """Return the user-presentable message for a failure.

    Only the collapsed use-case message is shown; the adapter cause is kept
    for diagnostics (see ``describe_cause``).
    """
    if isinstance(exc, UseCaseError):
        return exc.message
    return str(exc) or "Unexpected error."


def describe_cause(exc: BaseException) -> Optional[str]:
    """Describe the adapter failure chained under a ``UseCaseError``, if any."""
    cause = exc.__cause__ if isinstance(exc, UseCaseError) else exc
    if cause is None:
        return None
    if isinstance(cause, ApiTimeoutError):
        return _with_context("Request timed out", cause)
    if isinstance(cause, ApiClientError):
        status = cause.status or 0
        if status in (401, 403):
            return _with_context("Auth failed / access token invalid", cause)
        if status == 429:
            return _with_context("Rate limited by service", cause)
        label = f"Request failed (HTTP {status})" if status else "Request failed"
        return _with_context(_compose(label, cause.hint), cause)
    if isinstance(cause, ApiServerError):
        return _with_context(f"Service error (HTTP {cause.status})", cause)
    if isinstance(cause, ApiPayloadError):
        return _with_context(_compose("Unexpected response", str(cause)), cause)
    if isinstance(cause, ApiError):
        return _with_context(str(cause), cause)
    return f"{type(cause).__name__}: {cause}"


def _compose(base: str, hint: Optional[str]) -> str:
    hint_text = (hint or "").strip()
    if hint_text:
        return f"{base}: {hint_text}"
    return base


def _with_context(message: str, err: ApiError) -> str:
    if err.context:
        return f"{message} [{err.context}]"
    return message


__all__ = ["describe_cause", "describe_error", "map_api_error"]
