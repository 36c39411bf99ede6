"""Display helpers for the sync dashboard.

Call context:
    ``CloudSyncSettingsVM`` and the CLI summary call these helpers to turn
    quota, timestamps and device snapshots into operator-facing labels.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from cloudsync.domain.cloud_models import CloudQuota

_KB = 1024
_MB = 1024 * 1024
_GB = 1024 * 1024 * 1024


def format_bytes(value: int) -> str:
    """Render a byte count as B/KB/MB/GB with one decimal above bytes."""
    count = max(int(value or 0), 0)
    if count < _KB:
        return f"{count} B"
    if count < _MB:
        return f"{count / _KB:.1f} KB"
    if count < _GB:
        return f"{count / _MB:.1f} MB"
    return f"{count / _GB:.1f} GB"


def quota_summary(quota: Optional[CloudQuota]) -> str:
    if quota is None:
        return ""
    return f"{format_bytes(quota.used_bytes)} / {format_bytes(quota.quota_bytes)}"


def quota_severity(quota: Optional[CloudQuota]) -> str:
    """Map usage percent to ``ok`` / ``warning`` (>80) / ``danger`` (>95)."""
    if quota is None:
        return "ok"
    if quota.usage_percent > 95:
        return "danger"
    if quota.usage_percent > 80:
        return "warning"
    return "ok"


def last_sync_label(value: Optional[datetime]) -> str:
    """Local-time label such as ``Mar 4, 9:05 PM``; ``Never`` when unset."""
    if value is None:
        return "Never"
    local = value.astimezone() if value.tzinfo is not None else value
    hour = local.hour % 12 or 12
    return f"{local.strftime('%b')} {local.day}, {hour}:{local.minute:02d} {local.strftime('%p')}"


def recovery_kit_filename(today: Optional[date] = None) -> str:
    stamp = (today or date.today()).strftime("%Y-%m-%d")
    return f"PrivStack-Recovery-Kit-{stamp}"


__all__ = [
    "format_bytes",
    "last_sync_label",
    "quota_severity",
    "quota_summary",
    "recovery_kit_filename",
]
