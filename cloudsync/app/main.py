# cloudsync/app/main.py
"""Command line entry point for the cloud sync settings workflows.

Each invocation runs one command on a fresh event loop and prints the
resulting panel and dashboard summary::

    cloudsync status
    cloudsync login --email me@example.com --password ...
    cloudsync enable --email me@example.com --password ... [--ack] [--save-kit]
    cloudsync logout
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
import sys
from typing import List, Optional, Sequence

from ..adapters.storage_local import StorageLocal
from ..domain.cloud_models import Workspace
from ..domain.visibility import Panel
from ..utils.logging import apply_preferences, configure_root, level_name
from ..viewmodels.cloud_sync_vm import CloudSyncSettingsVM
from ..viewmodels.settings_vm import SettingsVM
from .controller import CloudSyncAppController

log = logging.getLogger(__name__)

COMMANDS = ("status", "login", "enable", "logout")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cloudsync", description="Workspace cloud sync settings")
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("--email", default=None)
    parser.add_argument("--password", default=None, help="Cloud account password (prompted when omitted)")
    parser.add_argument("--data-dir", default=None, help="Directory holding user_settings.json and workspaces.json")
    parser.add_argument("--variant", choices=("passphrase", "unified"), default=None)
    parser.add_argument("--mock", action="store_true", help="Use the offline in-memory sync service")
    parser.add_argument("--ack", action="store_true", help="Acknowledge a freshly shown recovery kit and start sync")
    parser.add_argument("--save-kit", action="store_true", help="Save a freshly shown recovery kit as PDF")
    parser.add_argument("--debug", action="store_true")
    return parser


def load_settings(data_dir: Optional[str]) -> SettingsVM:
    settings = SettingsVM()
    storage = StorageLocal(root_dir=data_dir or ".")
    payload = storage.load_user_settings()
    if payload:
        settings.apply_dict(payload)
    if data_dir:
        settings.apply_dict({"data_dir": data_dir})
    settings.apply_env()
    return settings


def describe(vm: CloudSyncSettingsVM) -> List[str]:
    lines = [f"panel: {vm.active_panel.value}"]
    if vm.session.authenticated_email:
        lines.append(f"account: {vm.session.authenticated_email}")
    if vm.auth_error:
        lines.append(f"error: {vm.auth_error}")
    if vm.active_panel is not Panel.DASHBOARD:
        return lines

    flags = vm.dashboard_flags
    workspace = vm.workspace
    if workspace is not None:
        state = "cloud sync enabled" if flags.is_workspace_cloud_enabled else "not synced to cloud"
        lines.append(f"workspace: {workspace.name or workspace.id} ({state})")
    if vm.recovery_kit.show_recovery_kit:
        lines.append("recovery kit:")
        for idx, word in enumerate(vm.recovery_kit.recovery_words, start=1):
            lines.append(f"  {idx:>2}. {word}")
    dash = vm.dashboard
    lines.append(f"syncing: {'yes' if dash.is_syncing else 'no'}")
    lines.append(f"pending uploads: {dash.pending_upload_count}")
    lines.append(f"last sync: {vm.last_sync_display}")
    if dash.quota is not None:
        lines.append(f"storage: {vm.quota_display} ({vm.quota_severity})")
    lines.append(f"devices: {dash.connected_device_count}")
    for device in dash.devices:
        lines.append(f"  - {device.device_name} [{device.platform}]")
    if dash.sync_error:
        lines.append(f"sync error: {dash.sync_error}")
    return lines


async def run_command(controller: CloudSyncAppController, args: argparse.Namespace) -> int:
    auth = controller.uc_auth
    recovery = controller.uc_recovery
    vm = controller.vm
    assert auth is not None and recovery is not None and vm is not None

    await auth.load_state()

    if args.command == "logout":
        await auth.disconnect()
        print("\n".join(describe(vm)))
        return 0

    if args.email or args.command == "login":
        email = args.email or input("Email: ")
        password = args.password or getpass.getpass("Password: ")
        if not await auth.authenticate(email, password):
            print("\n".join(describe(vm)))
            return 1

    if args.command == "enable":
        if not vm.session.is_authenticated:
            print("Not signed in. Pass --email to sign in first.", file=sys.stderr)
            return 1
        ok = await recovery.enable_for_workspace()
        if ok and vm.recovery_kit.show_recovery_kit:
            if args.save_kit:
                await recovery.save_recovery_kit_pdf()
            if args.ack:
                await recovery.acknowledge_recovery_kit()
        print("\n".join(describe(vm)))
        return 0 if ok else 1

    print("\n".join(describe(vm)))
    return 0


def _seed_demo_workspace(storage: StorageLocal) -> None:
    if storage.get_active_workspace() is None:
        storage.save_workspace(Workspace(id="demo", name="Demo workspace"), make_active=True)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_root()

    try:
        settings = load_settings(args.data_dir)
        if args.variant:
            settings.key_setup_variant = args.variant
    except ValueError as exc:
        print(f"Invalid settings: {exc}", file=sys.stderr)
        return 2
    level = apply_preferences(args.debug or settings.debug_logging)
    log.debug("Log level %s", level_name(level))

    save_dialog = None
    if args.save_kit:
        from ..adapters.save_dialog_tk import TkSaveDialog

        save_dialog = TkSaveDialog(initial_dir=settings.config.data_dir)

    storage = StorageLocal(root_dir=settings.config.data_dir)
    controller = CloudSyncAppController(
        settings, use_mock=args.mock, storage=storage, save_dialog=save_dialog
    )
    if args.mock:
        _seed_demo_workspace(storage)
    controller.unlock_vault()
    if not controller.ensure_ready():
        print("Cloud sync endpoints are not configured.", file=sys.stderr)
        return 2
    return asyncio.run(run_command(controller, args))


if __name__ == "__main__":
    sys.exit(main())
