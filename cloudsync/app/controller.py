"""Adapter and use-case wiring for the cloud sync settings runtime.

This module owns lazy construction of the sync adapter, the settings view
model and the three workflows from the values in
:class:`cloudsync.viewmodels.settings_vm.SettingsVM`.
"""

from __future__ import annotations

import os
from typing import Optional

from ..adapters.cloud_sync_mock import CloudSyncMock
from ..adapters.cloud_sync_rest import CloudSyncRestAdapter
from ..adapters.password_cache_memory import MemoryPasswordCache
from ..adapters.recovery_kit_pdf import RecoveryKitPdf
from ..adapters.storage_local import StorageLocal
from ..domain.ports import CloudSyncPort, RecoveryKitWriterPort, SaveDialogPort
from ..usecases.auth_workflow import AuthWorkflow
from ..usecases.key_setup_variants import KeySetupVariant, variant_for
from ..usecases.recovery_workflow import RecoveryWorkflow
from ..usecases.sync_dashboard import SyncDashboardWorkflow
from ..viewmodels.cloud_sync_vm import CloudSyncSettingsVM
from ..viewmodels.settings_vm import SettingsVM


class CloudSyncAppController:
    """Create and cache runtime adapters/workflows from settings state.

    Call chain:
        ``cloudsync.app.main`` (or a GUI shell) creates one instance and calls
        ``ensure_ready`` before any workflow command.
    """

    def __init__(
        self,
        settings_vm: SettingsVM,
        *,
        use_mock: bool = False,
        password_cache: Optional[MemoryPasswordCache] = None,
        storage: Optional[StorageLocal] = None,
        save_dialog: Optional[SaveDialogPort] = None,
        kit_writer: Optional[RecoveryKitWriterPort] = None,
    ) -> None:
        self.settings_vm = settings_vm
        self.use_mock = use_mock
        self.password_cache = password_cache or MemoryPasswordCache()
        self.storage = storage
        self.save_dialog = save_dialog
        self.kit_writer = kit_writer
        self._cloud: Optional[CloudSyncPort] = None
        self.variant: Optional[KeySetupVariant] = None
        self.vm: Optional[CloudSyncSettingsVM] = None
        self.uc_auth: Optional[AuthWorkflow] = None
        self.uc_recovery: Optional[RecoveryWorkflow] = None
        self.uc_dashboard: Optional[SyncDashboardWorkflow] = None

    @property
    def cloud(self) -> Optional[CloudSyncPort]:
        return self._cloud

    def reset(self) -> None:
        """Drop cached adapters and workflows so the next ``ensure_ready`` rebuilds them."""
        self._cloud = None
        self.variant = None
        self.vm = None
        self.uc_auth = None
        self.uc_recovery = None
        self.uc_dashboard = None

    def ensure_ready(self) -> bool:
        """Build adapters/workflows. ``False`` when the sync endpoints are not configured."""
        if self._cloud and self.uc_auth and self.uc_recovery and self.uc_dashboard:
            return True

        if self.storage is None:
            self.storage = StorageLocal(root_dir=self.settings_vm.config.data_dir)

        if self._cloud is None:
            if self.use_mock:
                self._cloud = CloudSyncMock(workspaces=self.storage)
            else:
                if not self.settings_vm.api_base_url or not self.settings_vm.core_base_url:
                    return False
                self._cloud = CloudSyncRestAdapter(
                    self.settings_vm.api_base_url,
                    self.settings_vm.core_base_url,
                    request_timeout_s=self.settings_vm.request_timeout_s,
                    retries=self.settings_vm.config.retries,
                )

        if self.kit_writer is None:
            self.kit_writer = RecoveryKitPdf()

        self.variant = variant_for(self.settings_vm.key_setup_variant)
        self.vm = CloudSyncSettingsVM(projector=self.variant.project)
        self.uc_dashboard = SyncDashboardWorkflow(self.vm, self._cloud, self.storage)
        self.uc_auth = AuthWorkflow(self.vm, self._cloud, self.variant, self.uc_dashboard)
        self.uc_recovery = RecoveryWorkflow(
            self.vm,
            self._cloud,
            self.variant,
            self.uc_dashboard,
            self.password_cache,
            save_dialog=self.save_dialog,
            kit_writer=self.kit_writer,
        )
        return True

    def unlock_vault(self, password: Optional[str] = None) -> None:
        """Prime the vault password cache (``CLOUDSYNC_VAULT_PASSWORD`` when omitted)."""
        secret = password if password is not None else os.getenv("CLOUDSYNC_VAULT_PASSWORD", "")
        if secret:
            self.password_cache.set(secret)
        else:
            self.password_cache.clear()


__all__ = ["CloudSyncAppController"]
