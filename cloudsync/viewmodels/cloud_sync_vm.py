"""State container for the cloud sync settings surface.

Call context:
    The workflows in ``cloudsync.usecases`` are the only writers. Views and
    the CLI read the public fields and ``active_panel``; they never toggle
    visibility flags directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, List, Optional

from cloudsync.domain.cloud_models import CloudDeviceInfo, CloudQuota, Workspace
from cloudsync.domain.visibility import (
    DashboardFlags,
    Panel,
    VisibilityFlags,
    project_dashboard,
    project_unified_recovery,
)

from .sync_format import last_sync_label, quota_severity, quota_summary

Projector = Callable[[VisibilityFlags], Panel]


@dataclass
class SessionState:
    is_authenticated: bool = False
    authenticated_email: Optional[str] = None
    user_id: Optional[int] = None


@dataclass
class KeypairState:
    has_keypair: bool = False
    needs_passphrase_entry: bool = False


@dataclass
class RecoveryKitState:
    """One-time display of freshly derived recovery words."""

    show_recovery_kit: bool = False
    recovery_words: List[str] = field(default_factory=list)
    has_downloaded_recovery_kit: bool = False
    kit_error: Optional[str] = None


@dataclass
class RecoveryFormState:
    show_recovery_form: bool = False
    recovery_mnemonic: str = ""
    recovery_error: Optional[str] = None


@dataclass
class PassphraseFormState:
    passphrase: str = ""
    confirm_passphrase: str = ""
    enter_passphrase: str = ""
    passphrase_error: Optional[str] = None
    enter_passphrase_error: Optional[str] = None
    mnemonic_words: Optional[str] = None
    show_mnemonic: bool = False


@dataclass
class SyncDashboardState:
    is_syncing: bool = False
    pending_upload_count: int = 0
    connected_device_count: int = 0
    last_sync_at: Optional[datetime] = None
    quota: Optional[CloudQuota] = None
    devices: List[CloudDeviceInfo] = field(default_factory=list)
    sync_error: Optional[str] = None


class CloudSyncSettingsVM:
    """Owns every flag the settings panels depend on; no I/O here."""

    def __init__(
        self,
        *,
        projector: Optional[Projector] = None,
        on_changed: Optional[Callable[[], None]] = None,
    ) -> None:
        self.projector: Projector = projector or project_unified_recovery
        self.on_changed = on_changed

        # auth form inputs
        self.email: str = ""
        self.password: str = ""
        self.is_authenticating: bool = False
        self.auth_error: Optional[str] = None
        self.is_enabling_workspace: bool = False

        self.session = SessionState()
        self.keypair = KeypairState()
        self.recovery_kit = RecoveryKitState()
        self.recovery_form = RecoveryFormState()
        self.passphrase_form = PassphraseFormState()
        self.dashboard = SyncDashboardState()
        self.workspace: Optional[Workspace] = None

    # ------------------------------------------------------------------
    # Derived visibility
    # ------------------------------------------------------------------
    def flags(self) -> VisibilityFlags:
        return VisibilityFlags(
            is_authenticated=self.session.is_authenticated,
            has_keypair=self.keypair.has_keypair,
            needs_passphrase_entry=self.keypair.needs_passphrase_entry,
            show_recovery_form=self.recovery_form.show_recovery_form,
            show_recovery_kit=self.recovery_kit.show_recovery_kit,
            sync_tier=self.workspace.sync_tier if self.workspace else None,
        )

    @property
    def active_panel(self) -> Panel:
        return self.projector(self.flags())

    @property
    def dashboard_flags(self) -> DashboardFlags:
        flags = self.flags()
        return project_dashboard(self.projector(flags), flags)

    @property
    def show_enable_for_workspace(self) -> bool:
        return self.dashboard_flags.show_enable_for_workspace

    @property
    def is_workspace_cloud_enabled(self) -> bool:
        return self.dashboard_flags.is_workspace_cloud_enabled

    # ------------------------------------------------------------------
    # Dashboard labels
    # ------------------------------------------------------------------
    @property
    def last_sync_display(self) -> str:
        return last_sync_label(self.dashboard.last_sync_at)

    @property
    def quota_display(self) -> str:
        return quota_summary(self.dashboard.quota)

    @property
    def quota_severity(self) -> str:
        return quota_severity(self.dashboard.quota)

    # ------------------------------------------------------------------
    # Mutation helpers used by the workflows
    # ------------------------------------------------------------------
    def set_session(self, *, email: Optional[str], user_id: Optional[int]) -> None:
        self.session = SessionState(
            is_authenticated=True, authenticated_email=email, user_id=user_id
        )
        self.notify()

    def set_keypair(self, *, has_keypair: bool, needs_passphrase_entry: bool = False) -> None:
        self.keypair = KeypairState(
            has_keypair=has_keypair,
            needs_passphrase_entry=has_keypair and needs_passphrase_entry,
        )
        self.notify()

    def show_kit(self, words: List[str]) -> None:
        self.recovery_kit = RecoveryKitState(
            show_recovery_kit=True,
            recovery_words=list(words),
            has_downloaded_recovery_kit=False,
        )
        self.notify()

    def clear_kit(self) -> None:
        self.recovery_kit = replace(self.recovery_kit, show_recovery_kit=False, recovery_words=[])
        self.notify()

    def clear_credentials(self) -> None:
        self.email = ""
        self.password = ""

    def reset_session(self) -> None:
        """Back to the signed-out state. Form inputs other than email are dropped."""
        self.password = ""
        self.auth_error = None
        self.session = SessionState()
        self.keypair = KeypairState()
        self.recovery_kit = RecoveryKitState()
        self.recovery_form = RecoveryFormState()
        self.passphrase_form = PassphraseFormState()
        self.dashboard = SyncDashboardState()
        self.notify()

    def notify(self) -> None:
        if self.on_changed:
            self.on_changed()


__all__ = [
    "CloudSyncSettingsVM",
    "KeypairState",
    "PassphraseFormState",
    "RecoveryFormState",
    "RecoveryKitState",
    "SessionState",
    "SyncDashboardState",
]
