"""Use case for the sync dashboard: status refresh and engine start/stop."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from cloudsync.domain.cloud_models import Workspace
from cloudsync.domain.errors import PreconditionError
from cloudsync.domain.ports import CloudSyncPort, WorkspacePort
from cloudsync.usecases.error_mapping import map_cloud_error
from cloudsync.viewmodels.cloud_sync_vm import CloudSyncSettingsVM, SyncDashboardState


@dataclass
class SyncDashboardWorkflow:
    """Keeps ``vm.dashboard`` in step with the sync collaborator."""

    vm: CloudSyncSettingsVM
    cloud: CloudSyncPort
    workspaces: WorkspacePort
    _log: logging.Logger = field(
        init=False, repr=False, default_factory=lambda: logging.getLogger(__name__)
    )

    def refresh_workspace(self) -> Optional[Workspace]:
        """Re-read the active workspace snapshot."""
        self.vm.workspace = self.workspaces.get_active_workspace()
        self.vm.notify()
        return self.vm.workspace

    async def refresh_status(self) -> bool:
        """Fetch status, devices and (for cloud-registered workspaces) quota.

        All dashboard fields are replaced together; on failure the previous
        snapshot stays and ``sync_error`` carries the message.
        """
        try:
            workspace = self.refresh_workspace()
            status = await asyncio.to_thread(self.cloud.get_status)
            quota = None
            if workspace is not None and workspace.has_cloud_workspace_id:
                quota = await asyncio.to_thread(self.cloud.get_quota, workspace.id)
            devices = await asyncio.to_thread(self.cloud.list_devices)
        except Exception as exc:
            err = map_cloud_error(
                exc,
                default_code="REFRESH_FAILED",
                default_message="Failed to refresh cloud sync status.",
            )
            self._log.warning("Failed to refresh cloud sync status: %s", err.message)
            self._set_sync_error(err.message)
            return False

        self.vm.dashboard = SyncDashboardState(
            is_syncing=status.is_syncing,
            pending_upload_count=status.pending_upload_count,
            connected_device_count=status.connected_devices,
            last_sync_at=status.last_sync_at,
            quota=quota,
            devices=list(devices),
        )
        self.vm.notify()
        return True

    async def start_sync(self) -> bool:
        """Start syncing the active workspace. No workspace means nothing to do."""
        try:
            await self.start_for_active_workspace()
        except PreconditionError as err:
            self._log.info("Cloud sync not started: %s", err.message)
            return False
        except Exception as exc:
            err = map_cloud_error(exc, default_code="START_FAILED")
            self._log.error("Failed to start cloud sync: %s", err.message)
            self._set_sync_error(f"Failed to start sync: {err.message}")
            return False
        return True

    async def stop_sync(self) -> bool:
        try:
            await asyncio.to_thread(self.cloud.stop_sync)
        except Exception as exc:
            err = map_cloud_error(exc, default_code="STOP_FAILED")
            self._log.error("Failed to stop cloud sync: %s", err.message)
            self._set_sync_error(f"Failed to stop sync: {err.message}")
            return False
        self.vm.dashboard = replace(self.vm.dashboard, is_syncing=False, sync_error=None)
        self.vm.notify()
        self._log.info("Cloud sync stopped")
        return True

    async def start_for_active_workspace(self) -> Workspace:
        """Start the engine and refresh. Collaborator errors propagate."""
        workspace = self.refresh_workspace()
        if workspace is None:
            raise PreconditionError("NO_WORKSPACE", "No active workspace.")
        await asyncio.to_thread(self.cloud.start_sync, workspace.id)
        self.vm.dashboard = replace(self.vm.dashboard, is_syncing=True, sync_error=None)
        self.vm.notify()
        self._log.info("Cloud sync started for workspace %s", workspace.id)
        await self.refresh_status()
        return workspace

    def _set_sync_error(self, message: str) -> None:
        self.vm.dashboard = replace(self.vm.dashboard, sync_error=message)
        self.vm.notify()


__all__ = ["SyncDashboardWorkflow"]
