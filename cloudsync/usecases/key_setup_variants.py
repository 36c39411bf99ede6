"""Deployment variants of the keypair setup flow.

One variant is picked at construction from ``CloudSyncConfig.key_setup_variant``
and handed to the view model (panel projection) and the recovery workflow
(enable-for-workspace plan, recovery form toggles).
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Type

from cloudsync.domain.errors import PreconditionError
from cloudsync.domain.visibility import (
    Panel,
    VisibilityFlags,
    project_passphrase_gated,
    project_unified_recovery,
)
from cloudsync.viewmodels.cloud_sync_vm import CloudSyncSettingsVM


class EnableStep(str, Enum):
    DERIVE_RECOVERY_KIT = "derive_recovery_kit"
    START_SYNC = "start_sync"


class KeySetupVariant:
    """Interface shared by both variants."""

    name: str = ""
    requires_vault_password: bool = False

    def project(self, flags: VisibilityFlags) -> Panel:
        raise NotImplementedError

    def needs_passphrase_entry(self, has_keypair: bool) -> bool:
        """Whether a fresh session must unlock an existing keypair first."""
        raise NotImplementedError

    def plan_enable(self, has_keypair: bool) -> EnableStep:
        raise NotImplementedError

    def show_recovery(self, vm: CloudSyncSettingsVM) -> None:
        form = vm.recovery_form
        form.show_recovery_form = True
        form.recovery_error = None
        form.recovery_mnemonic = ""

    def cancel_recovery(self, vm: CloudSyncSettingsVM) -> None:
        vm.recovery_form.show_recovery_form = False


class PassphraseGatedVariant(KeySetupVariant):
    """Separate sync passphrase, typed at setup and at every session start."""

    name = "passphrase"

    def project(self, flags: VisibilityFlags) -> Panel:
        return project_passphrase_gated(flags)

    def needs_passphrase_entry(self, has_keypair: bool) -> bool:
        return has_keypair

    def plan_enable(self, has_keypair: bool) -> EnableStep:
        if not has_keypair:
            raise PreconditionError("PASSPHRASE_REQUIRED", "Set up a sync passphrase first.")
        return EnableStep.START_SYNC

    def show_recovery(self, vm: CloudSyncSettingsVM) -> None:
        super().show_recovery(vm)
        vm.keypair.needs_passphrase_entry = False

    def cancel_recovery(self, vm: CloudSyncSettingsVM) -> None:
        super().cancel_recovery(vm)
        vm.keypair.needs_passphrase_entry = vm.keypair.has_keypair


class UnifiedRecoveryVariant(KeySetupVariant):
    """Key material derived from the unlocked vault password; sign-in is the only gate."""

    name = "unified"
    requires_vault_password = True

    def project(self, flags: VisibilityFlags) -> Panel:
        return project_unified_recovery(flags)

    def needs_passphrase_entry(self, has_keypair: bool) -> bool:
        return False

    def plan_enable(self, has_keypair: bool) -> EnableStep:
        if has_keypair:
            return EnableStep.START_SYNC
        return EnableStep.DERIVE_RECOVERY_KIT


_VARIANTS: Dict[str, Type[KeySetupVariant]] = {
    PassphraseGatedVariant.name: PassphraseGatedVariant,
    UnifiedRecoveryVariant.name: UnifiedRecoveryVariant,
}


def variant_for(name: str) -> KeySetupVariant:
    """Return the variant registered under ``name`` ("passphrase" or "unified")."""
    key = (name or "").strip().lower()
    try:
        return _VARIANTS[key]()
    except KeyError as exc:
        raise ValueError(f"Unknown key setup variant: {name!r}") from exc


__all__ = [
    "EnableStep",
    "KeySetupVariant",
    "PassphraseGatedVariant",
    "UnifiedRecoveryVariant",
    "variant_for",
]
