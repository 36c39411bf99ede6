"""Domain DTOs for cloud sync status, quota, devices and workspaces."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from .time_utils import parse_server_datetime


class SyncTier(str, Enum):
    """Per-workspace sync transport."""

    LOCAL_ONLY = "LocalOnly"
    NETWORK_RELAY = "NetworkRelay"
    PRIVSTACK_CLOUD = "PrivStackCloud"

    @classmethod
    def parse(cls, value: Any) -> "SyncTier":
        """Accept enum members, canonical names and snake_case tokens."""
        if isinstance(value, SyncTier):
            return value
        token = str(value or "").strip().replace("_", "").replace("-", "").lower()
        for member in cls:
            if member.value.lower() == token:
                return member
        if not token:
            return cls.LOCAL_ONLY
        raise ValueError(f"Unknown sync tier: {value!r}")


@dataclass(frozen=True)
class Workspace:
    """Snapshot of the active workspace as reported by the workspace service."""

    id: str
    name: str
    sync_tier: SyncTier = SyncTier.LOCAL_ONLY
    cloud_workspace_id: Optional[str] = None

    @property
    def is_cloud(self) -> bool:
        return self.sync_tier is SyncTier.PRIVSTACK_CLOUD

    @property
    def has_cloud_workspace_id(self) -> bool:
        return bool((self.cloud_workspace_id or "").strip())

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Workspace":
        workspace_id = str(payload.get("id") or "").strip()
        if not workspace_id:
            raise ValueError("Workspace payload requires an id")
        cloud_id_raw = payload.get("cloud_workspace_id")
        cloud_id = str(cloud_id_raw).strip() if cloud_id_raw is not None else None
        return cls(
            id=workspace_id,
            name=str(payload.get("name") or "").strip(),
            sync_tier=SyncTier.parse(payload.get("sync_tier")),
            cloud_workspace_id=cloud_id or None,
        )

    def to_payload(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "sync_tier": self.sync_tier.value,
            "cloud_workspace_id": self.cloud_workspace_id,
        }


@dataclass(frozen=True)
class AuthTokens:
    """Tokens returned by a successful authentication.

    ``user_id`` and ``email`` are optional: when the service omits them the
    caller derives them from the access token payload.
    """

    access_token: str
    refresh_token: str = ""
    user_id: Optional[int] = None
    email: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "AuthTokens":
        access = str(payload.get("access_token") or "").strip()
        if not access:
            raise ValueError("Missing access_token in authentication response.")
        user = payload.get("user") if isinstance(payload.get("user"), Mapping) else {}
        user_id_raw = payload.get("user_id", user.get("id"))
        email_raw = payload.get("email", user.get("email"))
        try:
            user_id = int(user_id_raw) if user_id_raw is not None else None
        except (TypeError, ValueError):
            user_id = None
        email = str(email_raw).strip() if email_raw else None
        return cls(
            access_token=access,
            refresh_token=str(payload.get("refresh_token") or ""),
            user_id=user_id,
            email=email or None,
        )


@dataclass(frozen=True)
class CloudSyncStatus:
    """Sync engine status reported by the cloud sync service."""

    is_syncing: bool = False
    is_authenticated: bool = False
    active_workspace: Optional[str] = None
    pending_upload_count: int = 0
    last_sync_at: Optional[datetime] = None
    connected_devices: int = 0

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "CloudSyncStatus":
        return cls(
            is_syncing=bool(payload.get("is_syncing")),
            is_authenticated=bool(payload.get("is_authenticated")),
            active_workspace=payload.get("active_workspace") or None,
            pending_upload_count=_as_int(payload.get("pending_upload_count")),
            last_sync_at=parse_server_datetime(payload.get("last_sync_at")),
            connected_devices=_as_int(payload.get("connected_devices")),
        )


@dataclass(frozen=True)
class CloudQuota:
    """Storage quota for one cloud workspace."""

    used_bytes: int
    quota_bytes: int
    usage_percent: float

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "CloudQuota":
        # The API reports usage_percent either as a number or as "10.00".
        try:
            percent = float(payload.get("usage_percent") or 0.0)
        except (TypeError, ValueError):
            percent = 0.0
        return cls(
            used_bytes=_as_int(payload.get("storage_used_bytes")),
            quota_bytes=_as_int(payload.get("storage_quota_bytes")),
            usage_percent=percent,
        )


@dataclass(frozen=True)
class CloudDeviceInfo:
    """One device registered against the cloud account."""

    device_id: str
    device_name: Optional[str] = None
    platform: Optional[str] = None
    last_seen_at: Optional[datetime] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "CloudDeviceInfo":
        device_id = str(payload.get("device_id") or "").strip()
        if not device_id:
            raise ValueError("Device payload requires a device_id")
        return cls(
            device_id=device_id,
            device_name=payload.get("device_name") or None,
            platform=payload.get("platform") or None,
            last_seen_at=parse_server_datetime(payload.get("last_seen_at")),
        )


def _as_int(value: Any) -> int:
    if value is None:
        return 0
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0


__all__ = [
    "AuthTokens",
    "CloudDeviceInfo",
    "CloudQuota",
    "CloudSyncStatus",
    "SyncTier",
    "Workspace",
]
