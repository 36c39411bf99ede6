from __future__ import annotations
import json, os, tempfile
from typing import Any, Dict, List, Optional
from cloudsync.domain.cloud_models import SyncTier, Workspace
from cloudsync.domain.ports import WorkspacePort


class StorageLocal(WorkspacePort):
    """Local filesystem storage for user settings and the workspace registry (JSON)."""

    SETTINGS_FILE = "user_settings.json"
    WORKSPACES_FILE = "workspaces.json"

    def __init__(self, root_dir: str = ".") -> None:
        self.root = root_dir

    # ---- User settings ----
    def save_user_settings(self, payload: Dict[str, Any]) -> None:
        self._write_json(self.SETTINGS_FILE, payload)

    def load_user_settings(self) -> Dict[str, Any]:
        data = self._read_json(self.SETTINGS_FILE)
        return dict(data) if isinstance(data, dict) else {}

    # ---- Workspace registry ----
    def get_active_workspace(self) -> Optional[Workspace]:
        registry = self._load_registry()
        active_id = registry.get("active_workspace_id")
        for item in registry.get("workspaces") or []:
            if isinstance(item, dict) and item.get("id") == active_id:
                return Workspace.from_payload(item)
        return None

    def list_workspaces(self) -> List[Workspace]:
        return [
            Workspace.from_payload(item)
            for item in self._load_registry().get("workspaces") or []
            if isinstance(item, dict) and item.get("id")
        ]

    def save_workspace(self, workspace: Workspace, *, make_active: bool = False) -> None:
        registry = self._load_registry()
        entries = [
            item for item in registry.get("workspaces") or []
            if isinstance(item, dict) and item.get("id") != workspace.id
        ]
        entries.append(workspace.to_payload())
        registry["workspaces"] = entries
        if make_active or not registry.get("active_workspace_id"):
            registry["active_workspace_id"] = workspace.id
        self._write_json(self.WORKSPACES_FILE, registry)

    def set_sync_tier(
        self, workspace_id: str, tier: SyncTier, cloud_workspace_id: Optional[str] = None
    ) -> Workspace:
        for workspace in self.list_workspaces():
            if workspace.id == workspace_id:
                updated = Workspace(
                    id=workspace.id,
                    name=workspace.name,
                    sync_tier=tier,
                    cloud_workspace_id=cloud_workspace_id or workspace.cloud_workspace_id,
                )
                self.save_workspace(updated)
                return updated
        raise KeyError(f"Unknown workspace '{workspace_id}'")

    # ------------------------------------------------------------------
    def _load_registry(self) -> Dict[str, Any]:
        data = self._read_json(self.WORKSPACES_FILE)
        return dict(data) if isinstance(data, dict) else {}

    def _read_json(self, name: str) -> Any:
        path = os.path.join(self.root, name)
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _write_json(self, name: str, payload: Any) -> None:
        os.makedirs(self.root, exist_ok=True)
        path = os.path.join(self.root, name)
        stem = os.path.splitext(name)[0]
        fd, tmp_path = tempfile.mkstemp(prefix=f"{stem}_", suffix=".tmp", dir=self.root)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
