from __future__ import annotations

import base64
import json
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from cloudsync.adapters.api_errors import ApiAuthError, ApiClientError
from cloudsync.domain.cloud_models import (
    AuthTokens,
    CloudDeviceInfo,
    CloudQuota,
    CloudSyncStatus,
    SyncTier,
)
from cloudsync.domain.ports import CloudSyncPort, WorkspaceId

_WORDS = (
    "anchor", "banner", "candle", "dolphin", "ember", "falcon", "garden", "harbor",
    "island", "jungle", "kettle", "lantern", "meadow", "nectar", "orchid", "pepper",
    "quartz", "ribbon", "saddle", "timber", "umbrella", "velvet", "willow", "yonder",
)
_QUOTA_BYTES = 10 * 1024 * 1024 * 1024


def _b64url(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


@dataclass
class CloudSyncMock(CloudSyncPort):
    """Offline substitute for ``CloudSyncRestAdapter`` with deterministic responses."""

    accounts: Dict[str, str] = field(
        default_factory=lambda: {"demo@privstack.test": "correct-horse"}
    )
    seed: int = 7
    # optional registry whose tier is flipped when sync starts
    workspaces: Optional[Any] = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)
        self._user_ids = {email: idx + 1 for idx, email in enumerate(sorted(self.accounts))}
        self._session: Optional[AuthTokens] = None
        self._passphrase: Optional[str] = None
        self._mnemonic: Optional[str] = None
        self._unlocked = False
        self._syncing_workspace: Optional[WorkspaceId] = None
        self._last_sync_at: Optional[datetime] = None
        self._used_bytes: Dict[WorkspaceId, int] = {}
        self._devices: List[CloudDeviceInfo] = [
            CloudDeviceInfo(device_id="dev-local", device_name="This device", platform="linux")
        ]

    # ---------- CloudSyncPort ----------

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    @property
    def has_keypair(self) -> bool:
        return self._mnemonic is not None

    def authenticate(self, email: str, password: str) -> AuthTokens:
        expected = self.accounts.get(email)
        if expected is None or expected != password:
            raise ApiAuthError("Invalid email or password.", status=401, context="authenticate")
        user_id = self._user_ids[email]
        header = _b64url({"alg": "none", "typ": "JWT"})
        payload = _b64url({"sub": str(user_id), "email": email})
        # user id and email only travel inside the token payload
        self._session = AuthTokens(
            access_token=f"{header}.{payload}.mock",
            refresh_token=f"refresh-{user_id}",
        )
        return self._session

    def logout(self) -> None:
        self._session = None
        self._unlocked = False
        self._syncing_workspace = None

    def setup_passphrase(self, passphrase: str) -> str:
        self._require_session()
        self._passphrase = passphrase
        return self._issue_mnemonic()

    def setup_unified_recovery(self, vault_password: str) -> str:
        self._require_session()
        self._passphrase = vault_password
        return self._issue_mnemonic()

    def enter_passphrase(self, passphrase: str) -> None:
        self._require_session()
        if self._mnemonic is None:
            raise ApiClientError("No keypair to unlock.", status=409, context="enter_passphrase")
        if passphrase != self._passphrase:
            raise ApiAuthError("Passphrase does not unlock this keypair.", status=403)
        self._unlocked = True

    def recover_from_mnemonic(self, mnemonic: str) -> None:
        self._require_session()
        normalized = " ".join(mnemonic.split()).lower()
        if self._mnemonic is not None and normalized != self._mnemonic:
            raise ApiAuthError("Recovery words do not match this account.", status=403)
        if len(normalized.split()) != 12:
            raise ApiClientError("Recovery phrase must have 12 words.", status=422)
        self._mnemonic = normalized
        self._unlocked = True

    def get_status(self) -> CloudSyncStatus:
        return CloudSyncStatus(
            is_syncing=self._syncing_workspace is not None,
            is_authenticated=self.is_authenticated,
            active_workspace=self._syncing_workspace,
            pending_upload_count=0,
            last_sync_at=self._last_sync_at,
            connected_devices=len(self._devices),
        )

    def get_quota(self, workspace_id: WorkspaceId) -> CloudQuota:
        self._require_session()
        used = self._used_bytes.get(workspace_id, 0)
        return CloudQuota(
            used_bytes=used,
            quota_bytes=_QUOTA_BYTES,
            usage_percent=round(used * 100.0 / _QUOTA_BYTES, 2),
        )

    def list_devices(self) -> List[CloudDeviceInfo]:
        self._require_session()
        return list(self._devices)

    def start_sync(self, workspace_id: WorkspaceId) -> None:
        self._require_session()
        if self._mnemonic is None:
            raise ApiClientError("Keypair required before sync.", status=409, context="start_sync")
        self._syncing_workspace = workspace_id
        self._last_sync_at = datetime.now(timezone.utc)
        self._used_bytes.setdefault(workspace_id, 1024 * 1024)
        if self.workspaces is not None:
            self.workspaces.set_sync_tier(
                workspace_id, SyncTier.PRIVSTACK_CLOUD, cloud_workspace_id=f"cloud-{workspace_id}"
            )

    def stop_sync(self) -> None:
        self._syncing_workspace = None

    # ------------------------------------------------------------------
    def _issue_mnemonic(self) -> str:
        self._mnemonic = " ".join(self._rng.choice(_WORDS) for _ in range(12))
        self._unlocked = True
        return self._mnemonic

    def _require_session(self) -> None:
        if self._session is None:
            raise ApiAuthError("Not signed in.", status=401)


__all__ = ["CloudSyncMock"]
