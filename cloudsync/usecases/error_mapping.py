"""Translate adapter errors into user-facing UseCaseError instances."""

from __future__ import annotations

from typing import Optional

from cloudsync.adapters.api_errors import (
    ApiAuthError,
    ApiClientError,
    ApiError,
    ApiServerError,
    ApiTimeoutError,
    extract_error_hint,
)
from cloudsync.domain.errors import CollaboratorError
from cloudsync.domain.ports import UseCaseError


def map_cloud_error(
    exc: Exception,
    *,
    default_code: str,
    default_message: Optional[str] = None,
) -> UseCaseError:
    """Map adapter exceptions to stable error codes.

    ``UseCaseError`` instances pass through unchanged, so validation and
    precondition errors raised inside a workflow keep their own message.
    """
    if isinstance(exc, UseCaseError):
        return exc
    if isinstance(exc, ApiTimeoutError):
        return CollaboratorError("REQUEST_TIMEOUT", "Request timed out. Check connection.")
    if isinstance(exc, ApiAuthError):
        return CollaboratorError("AUTH_FAILED", _compose_error_message(exc.hint or str(exc), None))
    if isinstance(exc, ApiClientError):
        status = exc.status or 0
        hint = exc.hint or extract_error_hint(getattr(exc, "payload", None))
        if status == 409:
            return CollaboratorError("CONFLICT", _compose_error_message(str(exc), hint))
        if status == 422:
            return CollaboratorError("INVALID_PARAMS", _compose_error_message("Invalid parameters", hint))
        label = f"Request failed (HTTP {status})" if status else "Request failed"
        return CollaboratorError("REQUEST_FAILED", _compose_error_message(label, hint))
    if isinstance(exc, ApiServerError):
        return CollaboratorError("SERVER_ERROR", "Cloud service error, try again.")
    if isinstance(exc, ApiError):
        return CollaboratorError("API_ERROR", str(exc))

    message = default_message or str(exc) or "Unexpected error."
    return CollaboratorError(default_code, message)


def _compose_error_message(base: str, hint: Optional[str]) -> str:
    base_text = (base or "").strip() or "Request failed"
    hint_text = (hint or "").strip()
    if hint_text and hint_text not in base_text:
        return f"{base_text.rstrip('.')}: {hint_text}"
    if base_text.endswith("."):
        return base_text
    return f"{base_text}."


__all__ = ["map_cloud_error"]
