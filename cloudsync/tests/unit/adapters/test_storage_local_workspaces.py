import json

import pytest

from cloudsync.adapters.storage_local import StorageLocal
from cloudsync.domain.cloud_models import SyncTier, Workspace
from cloudsync.viewmodels.settings_vm import SettingsVM


def test_user_settings_round_trip(tmp_path):
    storage = StorageLocal(root_dir=str(tmp_path))
    vm = SettingsVM()
    vm.apply_dict({"api_base_url": "https://cloud.example", "retries": 1, "debug_logging": True})

    storage.save_user_settings(vm.to_dict())
    loaded = storage.load_user_settings()

    assert loaded == vm.to_dict()
    assert list(tmp_path.glob("*.tmp")) == []


def test_user_settings_missing_file(tmp_path):
    storage = StorageLocal(root_dir=str(tmp_path / "nested"))

    assert storage.load_user_settings() == {}


def test_no_active_workspace_on_empty_registry(tmp_path):
    assert StorageLocal(root_dir=str(tmp_path)).get_active_workspace() is None


def test_first_saved_workspace_becomes_active(tmp_path):
    storage = StorageLocal(root_dir=str(tmp_path))
    storage.save_workspace(Workspace(id="a", name="Alpha"))
    storage.save_workspace(Workspace(id="b", name="Beta"))

    assert storage.get_active_workspace().id == "a"
    assert [ws.id for ws in storage.list_workspaces()] == ["a", "b"]

    storage.save_workspace(Workspace(id="b", name="Beta"), make_active=True)
    assert storage.get_active_workspace().name == "Beta"


def test_set_sync_tier_persists(tmp_path):
    storage = StorageLocal(root_dir=str(tmp_path))
    storage.save_workspace(Workspace(id="a", name="Alpha"))

    updated = storage.set_sync_tier("a", SyncTier.PRIVSTACK_CLOUD, cloud_workspace_id="cw-1")

    assert updated.is_cloud
    with (tmp_path / "workspaces.json").open("r", encoding="utf-8") as fh:
        persisted = json.load(fh)
    assert persisted["active_workspace_id"] == "a"
    assert persisted["workspaces"][0]["sync_tier"] == "PrivStackCloud"
    assert StorageLocal(root_dir=str(tmp_path)).get_active_workspace() == updated


def test_set_sync_tier_unknown_workspace(tmp_path):
    with pytest.raises(KeyError):
        StorageLocal(root_dir=str(tmp_path)).set_sync_tier("missing", SyncTier.LOCAL_ONLY)
