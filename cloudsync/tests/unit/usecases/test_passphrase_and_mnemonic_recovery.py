from __future__ import annotations

import pytest

from cloudsync.adapters.api_errors import ApiAuthError
from cloudsync.domain.visibility import Panel
from cloudsync.tests.unit.usecases.fakes import FakeCloudSyncPort, TWELVE_WORDS, build_workflows


async def _passphrase_session(has_keypair: bool):
    cloud = FakeCloudSyncPort(has_keypair=has_keypair)
    vm, auth, recovery, _ = build_workflows(cloud, variant="passphrase")
    await auth.authenticate("ada@example.com", "pw")
    cloud.calls.clear()
    return cloud, vm, recovery


@pytest.mark.asyncio
async def test_setup_passphrase_checks_mismatch_before_length():
    cloud, vm, recovery = await _passphrase_session(has_keypair=False)
    vm.passphrase_form.passphrase = "short"
    vm.passphrase_form.confirm_passphrase = "other"

    ok = await recovery.setup_passphrase()

    assert ok is False
    assert vm.passphrase_form.passphrase_error == "Passphrases do not match."
    assert cloud.calls == []
    assert vm.keypair.has_keypair is False


@pytest.mark.asyncio
async def test_setup_passphrase_rejects_short_passphrase():
    cloud, vm, recovery = await _passphrase_session(has_keypair=False)
    vm.passphrase_form.passphrase = "short"
    vm.passphrase_form.confirm_passphrase = "short"

    ok = await recovery.setup_passphrase()

    assert ok is False
    assert "at least 8" in vm.passphrase_form.passphrase_error
    assert cloud.calls == []


@pytest.mark.asyncio
async def test_setup_passphrase_success_shows_mnemonic():
    cloud, vm, recovery = await _passphrase_session(has_keypair=False)
    assert vm.active_panel is Panel.PASSPHRASE_SETUP
    vm.passphrase_form.passphrase = "long enough"
    vm.passphrase_form.confirm_passphrase = "long enough"

    ok = await recovery.setup_passphrase()

    assert ok is True
    assert cloud.calls == [("setup_passphrase", "long enough")]
    assert vm.keypair.has_keypair is True
    assert vm.passphrase_form.show_mnemonic is True
    assert vm.passphrase_form.mnemonic_words == TWELVE_WORDS
    assert vm.passphrase_form.passphrase == ""
    assert vm.active_panel is Panel.DASHBOARD

    recovery.dismiss_mnemonic()
    assert vm.passphrase_form.show_mnemonic is False
    assert vm.passphrase_form.mnemonic_words is None


@pytest.mark.asyncio
async def test_enter_passphrase_unlocks_and_refreshes():
    cloud, vm, recovery = await _passphrase_session(has_keypair=True)
    assert vm.active_panel is Panel.PASSPHRASE_ENTRY
    vm.passphrase_form.enter_passphrase = "long enough"

    ok = await recovery.enter_passphrase()

    assert ok is True
    assert vm.keypair.needs_passphrase_entry is False
    assert vm.active_panel is Panel.DASHBOARD
    assert cloud.names()[0] == "enter_passphrase"
    assert "get_status" in cloud.names()


@pytest.mark.asyncio
async def test_enter_passphrase_requires_input():
    cloud, vm, recovery = await _passphrase_session(has_keypair=True)

    ok = await recovery.enter_passphrase()

    assert ok is False
    assert vm.passphrase_form.enter_passphrase_error == "Please enter your passphrase."
    assert cloud.calls == []


@pytest.mark.asyncio
async def test_wrong_passphrase_keeps_entry_panel():
    cloud, vm, recovery = await _passphrase_session(has_keypair=True)
    cloud.fail_with = ApiAuthError("Passphrase does not unlock this keypair.", status=403)
    vm.passphrase_form.enter_passphrase = "nope nope"

    ok = await recovery.enter_passphrase()

    assert ok is False
    assert vm.passphrase_form.enter_passphrase_error.startswith("Invalid passphrase:")
    assert vm.active_panel is Panel.PASSPHRASE_ENTRY


@pytest.mark.asyncio
async def test_empty_mnemonic_keeps_form_open():
    cloud, vm, recovery = await _passphrase_session(has_keypair=True)
    recovery.show_recovery()

    ok = await recovery.recover_from_mnemonic()

    assert ok is False
    assert vm.recovery_form.show_recovery_form is True
    assert "recovery words" in vm.recovery_form.recovery_error
    assert cloud.calls == []


@pytest.mark.asyncio
async def test_show_and_cancel_recovery_in_passphrase_variant():
    cloud, vm, recovery = await _passphrase_session(has_keypair=True)

    recovery.show_recovery()
    assert vm.recovery_form.show_recovery_form is True
    assert vm.keypair.needs_passphrase_entry is False
    assert vm.active_panel is Panel.RECOVERY_FORM

    recovery.cancel_recovery()
    assert vm.recovery_form.show_recovery_form is False
    assert vm.keypair.needs_passphrase_entry is True
    assert vm.active_panel is Panel.PASSPHRASE_ENTRY


@pytest.mark.asyncio
async def test_cancel_recovery_without_keypair_returns_to_setup():
    cloud, vm, recovery = await _passphrase_session(has_keypair=False)

    recovery.show_recovery()
    recovery.cancel_recovery()

    assert vm.keypair.needs_passphrase_entry is False
    assert vm.active_panel is Panel.PASSPHRASE_SETUP


@pytest.mark.asyncio
async def test_recover_from_mnemonic_closes_form_and_sets_keypair():
    cloud, vm, recovery = await _passphrase_session(has_keypair=False)
    recovery.show_recovery()
    vm.recovery_form.recovery_mnemonic = f"  {TWELVE_WORDS}  "

    ok = await recovery.recover_from_mnemonic()

    assert ok is True
    assert cloud.calls[0] == ("recover_from_mnemonic", TWELVE_WORDS)
    assert vm.recovery_form.show_recovery_form is False
    assert vm.recovery_form.recovery_mnemonic == ""
    assert vm.keypair.has_keypair is True
    assert vm.active_panel is Panel.DASHBOARD


@pytest.mark.asyncio
async def test_unified_variant_recovery_form_is_a_dashboard_overlay():
    cloud = FakeCloudSyncPort(has_keypair=True)
    vm, auth, recovery, _ = build_workflows(cloud)
    await auth.authenticate("ada@example.com", "pw")

    recovery.show_recovery()
    assert vm.active_panel is Panel.DASHBOARD
    assert vm.dashboard_flags.show_recovery_form is True

    recovery.cancel_recovery()
    assert vm.dashboard_flags.show_recovery_form is False
    assert vm.keypair.needs_passphrase_entry is False
