"""Unverified JWT payload decoding for user id extraction.

The cloud service hands back an access token of the form
``header.payload.signature``. Only the payload is read: it is base64url text
without padding, holding UTF-8 JSON. Signature verification belongs to the
service, not to this client.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Dict, Optional

from .errors import TokenDecodeError


def decode_payload(token: str) -> Dict[str, Any]:
    """Return the JSON object carried in the token payload segment."""
    parts = str(token or "").strip().split(".")
    if len(parts) != 3 or not parts[1]:
        raise TokenDecodeError("Access token is not a three-part JWT.")

    segment = parts[1]
    segment += "=" * (-len(segment) % 4)
    try:
        raw = base64.urlsafe_b64decode(segment.encode("ascii"))
        payload = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise TokenDecodeError(f"Access token payload is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise TokenDecodeError("Access token payload must be a JSON object.")
    return payload


def extract_user_id(token: str) -> int:
    """Return the user id from ``sub`` (number or digit string), else ``id``."""
    payload = decode_payload(token)
    if "sub" in payload:
        user_id = _coerce_user_id(payload["sub"], allow_text=True)
        if user_id is None:
            raise TokenDecodeError("Token 'sub' claim is not an integer user id.")
        return user_id
    if "id" in payload:
        user_id = _coerce_user_id(payload["id"], allow_text=False)
        if user_id is None:
            raise TokenDecodeError("Token 'id' claim is not an integer user id.")
        return user_id
    raise TokenDecodeError("Token carries neither a 'sub' nor an 'id' claim.")


def extract_email(token: str) -> Optional[str]:
    """Best-effort ``email`` claim; ``None`` when absent or undecodable."""
    try:
        payload = decode_payload(token)
    except TokenDecodeError:
        return None
    value = payload.get("email")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _coerce_user_id(value: Any, *, allow_text: bool) -> Optional[int]:
    # bool is an int subclass; true/false is never a user id
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if allow_text and isinstance(value, str):
        text = value.strip()
        if text.isascii() and text.isdigit():
            return int(text)
    return None


__all__ = ["decode_payload", "extract_email", "extract_user_id"]
