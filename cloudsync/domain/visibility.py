"""Pure projection from cached settings flags to the active settings panel.

Two deployments exist. The passphrase-gated variant asks for a sync
passphrase on first use and again at every session start. The unified
recovery variant derives key material from the unlocked vault password, so
only sign-in gates the dashboard.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .cloud_models import SyncTier


class Panel(str, Enum):
    AUTH_FORM = "auth_form"  # sign-in form / connect button
    PASSPHRASE_SETUP = "passphrase_setup"
    PASSPHRASE_ENTRY = "passphrase_entry"
    RECOVERY_FORM = "recovery_form"
    DASHBOARD = "dashboard"


@dataclass(frozen=True)
class VisibilityFlags:
    """Immutable snapshot of every flag the projector reads."""

    is_authenticated: bool = False
    has_keypair: bool = False
    needs_passphrase_entry: bool = False
    show_recovery_form: bool = False
    show_recovery_kit: bool = False
    sync_tier: Optional[SyncTier] = None


@dataclass(frozen=True)
class DashboardFlags:
    """Sub-panels of the dashboard. All false when the dashboard is hidden."""

    show_enable_for_workspace: bool = False
    is_workspace_cloud_enabled: bool = False
    show_recovery_kit: bool = False
    show_recovery_form: bool = False


def project_passphrase_gated(flags: VisibilityFlags) -> Panel:
    if not flags.is_authenticated:
        return Panel.AUTH_FORM
    if flags.show_recovery_form:
        return Panel.RECOVERY_FORM
    if not flags.has_keypair:
        return Panel.PASSPHRASE_SETUP
    if flags.needs_passphrase_entry:
        return Panel.PASSPHRASE_ENTRY
    return Panel.DASHBOARD


def project_unified_recovery(flags: VisibilityFlags) -> Panel:
    if not flags.is_authenticated:
        return Panel.AUTH_FORM
    return Panel.DASHBOARD


def project_dashboard(panel: Panel, flags: VisibilityFlags) -> DashboardFlags:
    """Derive the workspace enable/enabled pair and dashboard overlays."""
    if panel is not Panel.DASHBOARD:
        return DashboardFlags()
    cloud = flags.sync_tier is SyncTier.PRIVSTACK_CLOUD
    return DashboardFlags(
        show_enable_for_workspace=not cloud,
        is_workspace_cloud_enabled=cloud,
        show_recovery_kit=flags.show_recovery_kit,
        show_recovery_form=flags.show_recovery_form,
    )


__all__ = [
    "DashboardFlags",
    "Panel",
    "VisibilityFlags",
    "project_dashboard",
    "project_passphrase_gated",
    "project_unified_recovery",
]
