from __future__ import annotations

from cloudsync.domain.cloud_models import CloudQuota, SyncTier, Workspace
from cloudsync.domain.visibility import Panel, project_passphrase_gated
from cloudsync.viewmodels.cloud_sync_vm import CloudSyncSettingsVM


def test_signed_out_vm_shows_auth_form() -> None:
    vm = CloudSyncSettingsVM()

    assert vm.active_panel is Panel.AUTH_FORM
    assert vm.show_enable_for_workspace is False
    assert vm.is_workspace_cloud_enabled is False
    assert vm.last_sync_display == "Never"
    assert vm.quota_display == ""


def test_enable_and_enabled_flags_follow_workspace_tier() -> None:
    vm = CloudSyncSettingsVM()
    vm.set_session(email="ada@example.com", user_id=7)

    vm.workspace = Workspace(id="ws", name="Notes")
    assert (vm.show_enable_for_workspace, vm.is_workspace_cloud_enabled) == (True, False)

    vm.workspace = Workspace(id="ws", name="Notes", sync_tier=SyncTier.PRIVSTACK_CLOUD)
    assert (vm.show_enable_for_workspace, vm.is_workspace_cloud_enabled) == (False, True)


def test_passphrase_entry_requires_keypair() -> None:
    vm = CloudSyncSettingsVM(projector=project_passphrase_gated)
    vm.set_session(email="ada@example.com", user_id=7)

    vm.set_keypair(has_keypair=False, needs_passphrase_entry=True)
    assert vm.keypair.needs_passphrase_entry is False
    assert vm.active_panel is Panel.PASSPHRASE_SETUP

    vm.set_keypair(has_keypair=True, needs_passphrase_entry=True)
    assert vm.active_panel is Panel.PASSPHRASE_ENTRY


def test_clear_kit_keeps_download_marker() -> None:
    vm = CloudSyncSettingsVM()
    vm.show_kit(["w"] * 12)
    vm.recovery_kit.has_downloaded_recovery_kit = True

    vm.clear_kit()

    assert vm.recovery_kit.show_recovery_kit is False
    assert vm.recovery_kit.recovery_words == []
    assert vm.recovery_kit.has_downloaded_recovery_kit is True


def test_reset_session_keeps_email_and_notifies() -> None:
    events = []
    vm = CloudSyncSettingsVM(on_changed=lambda: events.append("changed"))
    vm.email, vm.password, vm.auth_error = "ada@example.com", "pw", "boom"
    vm.set_session(email="ada@example.com", user_id=7)
    vm.dashboard.quota = CloudQuota(used_bytes=90, quota_bytes=100, usage_percent=90.0)
    assert vm.quota_severity == "warning"

    vm.reset_session()

    assert vm.email == "ada@example.com"
    assert vm.password == ""
    assert vm.auth_error is None
    assert vm.session.is_authenticated is False
    assert vm.dashboard.quota is None
    assert events == ["changed", "changed"]
