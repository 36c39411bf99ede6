"""Datetime parsing helpers for timestamps reported by the cloud service."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional


def parse_server_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 server timestamp into an aware UTC datetime.

    Naive values are treated as UTC. Empty or unparseable input yields ``None``
    so a missing ``last_sync_at`` renders as "Never" instead of failing.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if not text:
            return None
        normalized = text.replace(" ", "T")
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(normalized)
        except ValueError:
            parsed = _parse_with_fallback(text)
            if parsed is None:
                return None

    if parsed.tzinfo is None or parsed.tzinfo.utcoffset(parsed) is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _parse_with_fallback(text: str) -> Optional[datetime]:
    fallback_formats = (
        "%Y-%m-%dT%H:%M:%S.%f",
        "%Y-%m-%d %H:%M:%S",
        "%Y-%m-%d",
    )
    for fmt in fallback_formats:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


__all__ = ["parse_server_datetime"]
