"""Use case for keypair setup, unlock, mnemonic recovery and the recovery kit.

Two setup paths exist. The passphrase-gated variant derives keys from a
freshly typed passphrase (``setup_passphrase``) and unlocks them with
``enter_passphrase`` on every session. The unified variant derives keys from
the already unlocked vault password (``enable_for_workspace``) and shows the
12 recovery words once; sync starts only after the user acknowledges them.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional

from cloudsync.adapters.api_errors import ApiError
from cloudsync.domain.errors import (
    CollaboratorError,
    PreconditionError,
    ValidationError,
    VAULT_LOCKED_MESSAGE,
)
from cloudsync.domain.ports import (
    CloudSyncPort,
    PasswordCachePort,
    RecoveryKitWriterPort,
    SaveDialogPort,
    UseCaseError,
)
from cloudsync.usecases.error_mapping import map_cloud_error
from cloudsync.usecases.key_setup_variants import EnableStep, KeySetupVariant
from cloudsync.usecases.sync_dashboard import SyncDashboardWorkflow
from cloudsync.viewmodels.cloud_sync_vm import CloudSyncSettingsVM
from cloudsync.viewmodels.sync_format import recovery_kit_filename

MIN_PASSPHRASE_LENGTH = 8
RECOVERY_WORD_COUNT = 12
PDF_FILTERS = [("PDF", "*.pdf")]


def split_recovery_words(mnemonic: str) -> List[str]:
    """Split a space separated mnemonic into exactly 12 words."""
    words = (mnemonic or "").split()
    if len(words) != RECOVERY_WORD_COUNT:
        raise CollaboratorError(
            "INVALID_MNEMONIC",
            f"Expected {RECOVERY_WORD_COUNT} recovery words, got {len(words)}.",
        )
    return words


@dataclass
class RecoveryWorkflow:
    vm: CloudSyncSettingsVM
    cloud: CloudSyncPort
    variant: KeySetupVariant
    dashboard: SyncDashboardWorkflow
    password_cache: PasswordCachePort
    save_dialog: Optional[SaveDialogPort] = None
    kit_writer: Optional[RecoveryKitWriterPort] = None
    _log: logging.Logger = field(
        init=False, repr=False, default_factory=lambda: logging.getLogger(__name__)
    )

    # ------------------------------------------------------------------
    # Passphrase-gated variant
    # ------------------------------------------------------------------
    async def setup_passphrase(self) -> bool:
        form = self.vm.passphrase_form
        form.passphrase_error = None
        try:
            if form.passphrase != form.confirm_passphrase:
                raise ValidationError("PASSPHRASE_MISMATCH", "Passphrases do not match.")
            if not form.passphrase.strip() or len(form.passphrase) < MIN_PASSPHRASE_LENGTH:
                raise ValidationError(
                    "PASSPHRASE_TOO_SHORT",
                    f"Passphrase must be at least {MIN_PASSPHRASE_LENGTH} characters.",
                )
            mnemonic = await asyncio.to_thread(self.cloud.setup_passphrase, form.passphrase)
        except ValidationError as err:
            form.passphrase_error = err.message
            self.vm.notify()
            return False
        except Exception as exc:
            form.passphrase_error = f"Setup failed: {self._describe(exc)}"
            self._log.error("Passphrase setup failed", exc_info=True)
            self.vm.notify()
            return False

        self.vm.passphrase_form = replace(
            form,
            passphrase="",
            confirm_passphrase="",
            mnemonic_words=mnemonic,
            show_mnemonic=True,
        )
        self.vm.set_keypair(has_keypair=True, needs_passphrase_entry=False)
        self._log.info("Sync passphrase set up")
        return True

    def dismiss_mnemonic(self) -> None:
        self.vm.passphrase_form.show_mnemonic = False
        self.vm.passphrase_form.mnemonic_words = None
        self.vm.notify()

    async def enter_passphrase(self) -> bool:
        form = self.vm.passphrase_form
        form.enter_passphrase_error = None
        if not form.enter_passphrase.strip():
            form.enter_passphrase_error = "Please enter your passphrase."
            self.vm.notify()
            return False
        try:
            await asyncio.to_thread(self.cloud.enter_passphrase, form.enter_passphrase)
        except Exception as exc:
            form.enter_passphrase_error = f"Invalid passphrase: {self._describe(exc)}"
            self._log.warning("Passphrase entry failed: %s", self._describe(exc))
            self.vm.notify()
            return False

        form.enter_passphrase = ""
        self.vm.set_keypair(has_keypair=True, needs_passphrase_entry=False)
        await self.dashboard.refresh_status()
        return True

    # ------------------------------------------------------------------
    # Manual mnemonic recovery
    # ------------------------------------------------------------------
    def show_recovery(self) -> None:
        self.variant.show_recovery(self.vm)
        self.vm.notify()

    def cancel_recovery(self) -> None:
        self.variant.cancel_recovery(self.vm)
        self.vm.notify()

    async def recover_from_mnemonic(self) -> bool:
        form = self.vm.recovery_form
        form.recovery_error = None
        if not form.recovery_mnemonic.strip():
            form.recovery_error = "Please enter your recovery words."
            self.vm.notify()
            return False
        try:
            await asyncio.to_thread(self.cloud.recover_from_mnemonic, form.recovery_mnemonic.strip())
        except Exception as exc:
            form.recovery_error = f"Recovery failed: {self._describe(exc)}"
            self._log.error("Mnemonic recovery failed", exc_info=True)
            self.vm.notify()
            return False

        form.show_recovery_form = False
        form.recovery_mnemonic = ""
        self.vm.set_keypair(has_keypair=True, needs_passphrase_entry=False)
        self._log.info("Keypair recovered from mnemonic")
        await self.dashboard.refresh_status()
        return True

    # ------------------------------------------------------------------
    # Unified recovery / enable for workspace
    # ------------------------------------------------------------------
    async def enable_for_workspace(self) -> bool:
        """Turn on cloud sync for the active workspace.

        Without a keypair the vault password derives one and the recovery kit
        is shown; sync waits for ``acknowledge_recovery_kit``. With a keypair
        sync starts right away.
        """
        if self.vm.is_enabling_workspace:
            self._log.debug("Enable for workspace already in flight; ignoring")
            return False
        self.vm.is_enabling_workspace = True
        self.vm.auth_error = None
        self.vm.notify()
        try:
            vault_password = ""
            if self.variant.requires_vault_password:
                vault_password = self.password_cache.get() or ""
                if not vault_password:
                    raise PreconditionError("VAULT_LOCKED", VAULT_LOCKED_MESSAGE)
            if self.dashboard.refresh_workspace() is None:
                raise PreconditionError("NO_WORKSPACE", "No active workspace.")

            has_keypair = await asyncio.to_thread(lambda: self.cloud.has_keypair)
            step = self.variant.plan_enable(has_keypair)
            if step is EnableStep.DERIVE_RECOVERY_KIT:
                mnemonic = await asyncio.to_thread(self.cloud.setup_unified_recovery, vault_password)
                # the keypair exists on the collaborator side from here on
                self.vm.set_keypair(has_keypair=True, needs_passphrase_entry=False)
                words = split_recovery_words(mnemonic)
                self.vm.show_kit(words)
                self._log.info("Unified recovery key derived; waiting for kit acknowledgement")
                return True

            await self.dashboard.start_for_active_workspace()
            return True
        except PreconditionError as err:
            self.vm.auth_error = err.message
            self._log.warning("Enable for workspace blocked: %s", err.message)
            return False
        except Exception as exc:
            self.vm.auth_error = f"Setup failed: {self._describe(exc)}"
            self._log.error("Enable for workspace failed", exc_info=True)
            return False
        finally:
            self.vm.is_enabling_workspace = False
            self.vm.notify()

    async def acknowledge_recovery_kit(self) -> bool:
        """Hide the kit, drop the words from memory and start syncing.

        Only a kit that is currently shown can be acknowledged; repeated calls
        return ``False`` without starting sync again.
        """
        if not self.vm.recovery_kit.show_recovery_kit:
            self._log.debug("No recovery kit shown; acknowledgement ignored")
            return False
        self.vm.clear_kit()
        return await self.dashboard.start_sync()

    async def save_recovery_kit_pdf(self) -> bool:
        """Ask for a destination and write the kit. Cancel leaves state untouched."""
        words = list(self.vm.recovery_kit.recovery_words)
        if not words:
            return False
        if self.save_dialog is None or self.kit_writer is None:
            self._log.warning("Recovery kit export is not configured")
            return False

        path = self.save_dialog.show_save_file_dialog(
            "Save Recovery Kit", recovery_kit_filename(), PDF_FILTERS
        )
        if not path:
            return False

        workspace = self.vm.workspace
        workspace_name = workspace.name if workspace and workspace.name else "PrivStack"
        try:
            written = await asyncio.to_thread(self.kit_writer.write, words, workspace_name, path)
        except Exception as exc:
            self.vm.recovery_kit.kit_error = f"Failed to save PDF: {exc}"
            self._log.error("Recovery kit export failed", exc_info=True)
            self.vm.notify()
            return False

        self.vm.recovery_kit = replace(
            self.vm.recovery_kit, has_downloaded_recovery_kit=True, kit_error=None
        )
        self.vm.notify()
        self._log.info("Recovery kit saved to %s", written)
        return True

    # ------------------------------------------------------------------
    @staticmethod
    def _describe(exc: Exception) -> str:
        if isinstance(exc, (ApiError, UseCaseError)):
            return map_cloud_error(exc, default_code="RECOVERY_FAILED").message
        return str(exc) or exc.__class__.__name__


__all__ = ["RecoveryWorkflow", "split_recovery_words"]
