"""REST adapter implementing the cloud sync port.

Account routes (login, quota, devices) go to the cloud API. Key management and
the sync engine run in the local sync core, which exposes them on a loopback
HTTP bridge; this adapter only forwards requests and never sees key material
beyond the mnemonic phrase the core returns for display.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from cloudsync.adapters.api_errors import raise_for_status
from cloudsync.adapters.http_client import HttpConfig, RetryingSession
from cloudsync.domain.cloud_models import (
    AuthTokens,
    CloudDeviceInfo,
    CloudQuota,
    CloudSyncStatus,
)
from cloudsync.domain.ports import CloudSyncPort, WorkspaceId


class CloudSyncRestAdapter(CloudSyncPort):
    """HTTP adapter for `/api/auth*`, `/api/cloud*` and the core `/keys*`, `/sync*` routes."""

    def __init__(
        self,
        api_base_url: str,
        core_base_url: str,
        *,
        request_timeout_s: int = 10,
        retries: int = 2,
    ) -> None:
        if not api_base_url:
            raise ValueError("CloudSyncRestAdapter requires the cloud API URL")
        if not core_base_url:
            raise ValueError("CloudSyncRestAdapter requires the sync core URL")

        self._log = logging.getLogger(__name__)
        self.base_urls = {"api": api_base_url, "core": core_base_url}
        self.cfg = HttpConfig(request_timeout_s=request_timeout_s, retries=retries)
        self.sessions: Dict[str, RetryingSession] = {
            target: RetryingSession(self.cfg) for target in self.base_urls
        }
        self._tokens: Optional[AuthTokens] = None

    # ---------- Authentication ----------

    @property
    def is_authenticated(self) -> bool:
        """In-process session, else the session the sync core kept across restarts.

        A restored session also re-arms the bearer token for the cloud API.
        """
        if self._tokens is not None:
            return True
        payload = self._core_get("/auth/status", "is_authenticated")
        access = str(payload.get("access_token") or "").strip()
        if not payload.get("is_authenticated") or not access:
            return False
        self._set_tokens(AuthTokens.from_payload(payload))
        self._log.info("Cloud session restored from sync core")
        return True

    def authenticate(self, email: str, password: str) -> AuthTokens:
        """POST `/api/auth/login`, then hand the tokens to the sync core."""
        url = self._make_url("api", "/api/auth/login")
        resp = self.sessions["api"].post(url, json_body={"email": email, "password": password})
        raise_for_status(resp, "authenticate")
        tokens = AuthTokens.from_payload(self._json_dict(resp))

        self._core_post(
            "/auth/tokens",
            {
                "access_token": tokens.access_token,
                "refresh_token": tokens.refresh_token,
                "user_id": tokens.user_id,
            },
            "authenticate",
        )
        self._set_tokens(tokens)
        self._log.info("Cloud session established")
        return tokens

    def logout(self) -> None:
        self._set_tokens(None)
        self._core_post("/auth/logout", None, "logout")

    # ---------- Key management ----------

    @property
    def has_keypair(self) -> bool:
        payload = self._core_get("/keys/status", "has_keypair")
        return bool(payload.get("has_keypair"))

    def setup_passphrase(self, passphrase: str) -> str:
        payload = self._core_post("/keys/passphrase", {"passphrase": passphrase}, "setup_passphrase")
        return self._mnemonic(payload)

    def setup_unified_recovery(self, vault_password: str) -> str:
        payload = self._core_post(
            "/keys/unified-recovery", {"vault_password": vault_password}, "setup_unified_recovery"
        )
        return self._mnemonic(payload)

    def enter_passphrase(self, passphrase: str) -> None:
        self._core_post("/keys/unlock", {"passphrase": passphrase}, "enter_passphrase")

    def recover_from_mnemonic(self, mnemonic: str) -> None:
        self._core_post("/keys/recover", {"mnemonic": mnemonic}, "recover_from_mnemonic")

    # ---------- Sync engine ----------

    def get_status(self) -> CloudSyncStatus:
        return CloudSyncStatus.from_payload(self._core_get("/sync/status", "get_status"))

    def start_sync(self, workspace_id: WorkspaceId) -> None:
        self._core_post("/sync/start", {"workspace_id": workspace_id}, f"start_sync[{workspace_id}]")

    def stop_sync(self) -> None:
        self._core_post("/sync/stop", None, "stop_sync")

    # ---------- Account ----------

    def get_quota(self, workspace_id: WorkspaceId) -> CloudQuota:
        url = self._make_url("api", "/api/cloud/quota")
        resp = self.sessions["api"].get(url, params={"workspace_id": workspace_id})
        raise_for_status(resp, f"get_quota[{workspace_id}]")
        return CloudQuota.from_payload(self._json_dict(resp))

    def list_devices(self) -> List[CloudDeviceInfo]:
        url = self._make_url("api", "/api/cloud/devices")
        resp = self.sessions["api"].get(url)
        raise_for_status(resp, "list_devices")
        devices: List[CloudDeviceInfo] = []
        for item in self._json_dict(resp).get("devices") or []:
            if isinstance(item, dict) and item.get("device_id"):
                devices.append(CloudDeviceInfo.from_payload(item))
        return devices

    # ------------------------------------------------------------------
    def _set_tokens(self, tokens: Optional[AuthTokens]) -> None:
        self._tokens = tokens
        self.sessions["api"].access_token = tokens.access_token if tokens else None

    def _core_get(self, path: str, ctx: str) -> Dict[str, Any]:
        resp = self.sessions["core"].get(self._make_url("core", path))
        raise_for_status(resp, ctx)
        return self._json_dict(resp)

    def _core_post(self, path: str, body: Optional[Dict[str, Any]], ctx: str) -> Dict[str, Any]:
        resp = self.sessions["core"].post(self._make_url("core", path), json_body=body)
        raise_for_status(resp, ctx)
        if resp.status_code == 204 or not getattr(resp, "text", ""):
            return {}
        return self._json_dict(resp)

    def _make_url(self, target: str, path: str) -> str:
        base = self.base_urls[target]
        if base.endswith("/"):
            base = base[:-1]
        return f"{base}{path}"

    @staticmethod
    def _mnemonic(payload: Dict[str, Any]) -> str:
        mnemonic = str(payload.get("mnemonic") or "").strip()
        if not mnemonic:
            raise RuntimeError("Invalid key setup payload: mnemonic missing")
        return mnemonic

    @staticmethod
    def _json_dict(resp: requests.Response) -> Dict[str, Any]:
        """Parse response JSON and require object payload."""
        try:
            payload = resp.json()
        except ValueError:
            snippet = getattr(resp, "text", "")[:400]
            raise RuntimeError(f"Invalid JSON response: {snippet}")
        if not isinstance(payload, dict):
            raise RuntimeError("Invalid JSON response shape: expected object")
        return dict(payload)


__all__ = ["CloudSyncRestAdapter"]
