from __future__ import annotations

import base64
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from cloudsync.adapters.api_errors import ApiAuthError
from cloudsync.domain.cloud_models import (
    AuthTokens,
    CloudDeviceInfo,
    CloudQuota,
    CloudSyncStatus,
    SyncTier,
    Workspace,
)
from cloudsync.usecases.auth_workflow import AuthWorkflow
from cloudsync.usecases.key_setup_variants import variant_for
from cloudsync.usecases.recovery_workflow import RecoveryWorkflow
from cloudsync.usecases.sync_dashboard import SyncDashboardWorkflow
from cloudsync.viewmodels.cloud_sync_vm import CloudSyncSettingsVM

TWELVE_WORDS = "apple brave cedar delta eagle fable giant hover ivory joker karma lemon"


def make_token(payload: Dict[str, Any]) -> str:
    def _seg(data: Dict[str, Any]) -> str:
        raw = json.dumps(data).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    return f"{_seg({'alg': 'HS256', 'typ': 'JWT'})}.{_seg(payload)}.signature"


class FakeCloudSyncPort:
    """Records every call; behaviour is driven by the constructor flags."""

    def __init__(
        self,
        *,
        authenticated: bool = False,
        has_keypair: bool = False,
        tokens: Optional[AuthTokens] = None,
        mnemonic: str = TWELVE_WORDS,
        fail_auth: bool = False,
        fail_with: Optional[Exception] = None,
        quota: Optional[CloudQuota] = None,
        devices: Optional[List[CloudDeviceInfo]] = None,
    ) -> None:
        self.authenticated = authenticated
        self.keypair = has_keypair
        self.tokens = tokens or AuthTokens(access_token=make_token({"sub": 42, "email": "ada@example.com"}))
        self.mnemonic = mnemonic
        self.fail_auth = fail_auth
        self.fail_with = fail_with
        self.syncing = False
        self.quota = quota or CloudQuota(used_bytes=512, quota_bytes=1024, usage_percent=50.0)
        self.devices = list(devices or [CloudDeviceInfo(device_id="d1", device_name="Laptop", platform="linux")])
        self.calls: List[Tuple[Any, ...]] = []

    @property
    def is_authenticated(self) -> bool:
        return self.authenticated

    @property
    def has_keypair(self) -> bool:
        return self.keypair

    def names(self) -> List[str]:
        return [call[0] for call in self.calls]

    def count(self, name: str) -> int:
        return self.names().count(name)

    def authenticate(self, email: str, password: str) -> AuthTokens:
        self.calls.append(("authenticate", email, password))
        if self.fail_auth:
            raise ApiAuthError("Invalid email or password.", status=401)
        self.authenticated = True
        return self.tokens

    def logout(self) -> None:
        self.calls.append(("logout",))
        self.authenticated = False

    def setup_passphrase(self, passphrase: str) -> str:
        self.calls.append(("setup_passphrase", passphrase))
        self._maybe_fail()
        self.keypair = True
        return self.mnemonic

    def setup_unified_recovery(self, vault_password: str) -> str:
        self.calls.append(("setup_unified_recovery", vault_password))
        self._maybe_fail()
        self.keypair = True
        return self.mnemonic

    def enter_passphrase(self, passphrase: str) -> None:
        self.calls.append(("enter_passphrase", passphrase))
        self._maybe_fail()

    def recover_from_mnemonic(self, mnemonic: str) -> None:
        self.calls.append(("recover_from_mnemonic", mnemonic))
        self._maybe_fail()
        self.keypair = True

    def get_status(self) -> CloudSyncStatus:
        self.calls.append(("get_status",))
        return CloudSyncStatus(
            is_syncing=self.syncing,
            is_authenticated=self.authenticated,
            pending_upload_count=3,
            connected_devices=len(self.devices),
        )

    def get_quota(self, workspace_id: str) -> CloudQuota:
        self.calls.append(("get_quota", workspace_id))
        return self.quota

    def list_devices(self) -> List[CloudDeviceInfo]:
        self.calls.append(("list_devices",))
        return list(self.devices)

    def start_sync(self, workspace_id: str) -> None:
        self.calls.append(("start_sync", workspace_id))
        self._maybe_fail()
        self.syncing = True

    def stop_sync(self) -> None:
        self.calls.append(("stop_sync",))
        self.syncing = False

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with


class FakeWorkspacePort:
    def __init__(self, workspace: Optional[Workspace] = None) -> None:
        self.workspace = workspace

    def get_active_workspace(self) -> Optional[Workspace]:
        return self.workspace


class FakePasswordCache:
    def __init__(self, password: str = "vault-secret") -> None:
        self.password = password

    def get(self) -> Optional[str]:
        return self.password


class FakeSaveDialog:
    def __init__(self, path: Optional[str]) -> None:
        self.path = path
        self.calls: List[Tuple[str, str, Sequence[Tuple[str, str]]]] = []

    def show_save_file_dialog(self, title, default_name, filters):
        self.calls.append((title, default_name, list(filters)))
        return self.path


class FakeKitWriter:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.calls: List[Tuple[List[str], str, str]] = []

    def write(self, words, workspace_name, path) -> Path:
        self.calls.append((list(words), workspace_name, str(path)))
        if self.error is not None:
            raise self.error
        return Path(path)


def local_workspace(cloud_id: Optional[str] = None) -> Workspace:
    return Workspace(id="ws-1", name="Notes", sync_tier=SyncTier.LOCAL_ONLY, cloud_workspace_id=cloud_id)


def cloud_workspace() -> Workspace:
    return Workspace(id="ws-1", name="Notes", sync_tier=SyncTier.PRIVSTACK_CLOUD, cloud_workspace_id="cw-9")


def build_workflows(
    cloud: FakeCloudSyncPort,
    *,
    variant: str = "unified",
    workspace: Optional[Workspace] = None,
    vault_password: str = "vault-secret",
    save_dialog: Optional[FakeSaveDialog] = None,
    kit_writer: Optional[FakeKitWriter] = None,
):
    """Return ``(vm, auth, recovery, dashboard)`` wired like the app controller."""
    strategy = variant_for(variant)
    vm = CloudSyncSettingsVM(projector=strategy.project)
    workspaces = FakeWorkspacePort(workspace if workspace is not None else local_workspace())
    dashboard = SyncDashboardWorkflow(vm, cloud, workspaces)
    auth = AuthWorkflow(vm, cloud, strategy, dashboard)
    recovery = RecoveryWorkflow(
        vm,
        cloud,
        strategy,
        dashboard,
        FakePasswordCache(vault_password),
        save_dialog=save_dialog,
        kit_writer=kit_writer,
    )
    return vm, auth, recovery, dashboard
