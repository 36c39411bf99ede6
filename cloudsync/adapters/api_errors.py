"""Typed failures raised by the cloud sync adapters.

Both HTTP targets (cloud API and local sync core) answer errors with a JSON
body such as ``{"message": "...", "code": "...", "hint": "..."}`` or
``{"detail": "..."}``; plain text bodies also occur behind proxies.
"""

from __future__ import annotations

from typing import Any, Optional

_MESSAGE_KEYS = ("message", "detail", "error", "title")
_CODE_KEYS = ("code", "error_code", "error")
_HINT_KEYS = ("hint", "details", "errors")
_SNIPPET_LIMIT = 400


class ApiError(RuntimeError):
    """Base class for cloud sync adapter failures."""

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
    """HTTP 4xx from the cloud API or the local sync core."""


class ApiAuthError(ApiClientError):
    """HTTP 401/403: bad credentials, expired session or wrong passphrase."""


class ApiServerError(ApiError):
    """HTTP 5xx from the cloud API or the local sync core."""


class ApiTimeoutError(ApiError):
    """Transport level timeout or connectivity failure."""


def error_class_for(status: int) -> type[ApiError]:
    if status in (401, 403):
        return ApiAuthError
    if 400 <= status < 500:
        return ApiClientError
    if 500 <= status < 600:
        return ApiServerError
    return ApiError


def raise_for_status(resp: Any, ctx: str) -> None:
    """Raise the typed adapter error matching a non-2xx response."""
    status = resp.status_code
    if 200 <= status < 300:
        return
    payload = _error_payload(resp)
    detail = _first_text(payload)
    message = f"{ctx}: {detail} (HTTP {status})" if detail else f"{ctx}: HTTP {status}"
    raise error_class_for(status)(
        message,
        status=status,
        code=_error_code(payload),
        hint=detail or extract_error_hint(payload),
        payload=payload,
        context=ctx,
    )


def extract_error_hint(payload: Any) -> Optional[str]:
    """Short human-readable hint from ``hint``/``details``/``errors`` or a text body."""
    if isinstance(payload, str):
        return payload.strip() or None
    if not isinstance(payload, dict):
        return None
    for key in _HINT_KEYS:
        text = _flatten(payload.get(key))
        if text:
            return text
    return None


def _error_payload(resp: Any) -> Any:
    try:
        return resp.json()
    except ValueError:
        text = getattr(resp, "text", "") or ""
        return text[:_SNIPPET_LIMIT] or None


def _error_code(payload: Any) -> Optional[str]:
    if not isinstance(payload, dict):
        return None
    for key in _CODE_KEYS:
        if payload.get(key) is not None:
            return str(payload[key])
    return None


def _first_text(payload: Any) -> Optional[str]:
    if isinstance(payload, str):
        return payload.strip() or None
    if isinstance(payload, list):
        return next((text for text in map(_first_text, payload) if text), None)
    if isinstance(payload, dict):
        for key in _MESSAGE_KEYS:
            text = _first_text(payload.get(key))
            if text:
                return text
    return None


def _flatten(data: Any, limit: int = 200) -> Optional[str]:
    # validation payloads nest lists of dicts; keep the first few entries
    if data is None:
        return None
    if isinstance(data, list):
        text = "; ".join(filter(None, (_flatten(item, limit) for item in data[:3])))
    elif isinstance(data, dict):
        text = ", ".join(
            f"{key}={value}"
            for key, value in ((k, _flatten(v, limit)) for k, v in list(data.items())[:4])
            if value
        )
    else:
        text = str(data).strip()
    return text[:limit] or None


__all__ = [
    "ApiAuthError",
    "ApiClientError",
    "ApiError",
    "ApiServerError",
    "ApiTimeoutError",
    "error_class_for",
    "extract_error_hint",
    "raise_for_status",
]
