from __future__ import annotations
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Tuple

from .cloud_models import AuthTokens, CloudDeviceInfo, CloudQuota, CloudSyncStatus, Workspace

WorkspaceId = str
FileFilter = Tuple[str, str]  # (label, pattern) e.g. ("PDF", "*.pdf")


# ---- Error model ----
class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


# ---- Ports (Hexagonal boundaries) ----
class CloudSyncPort(Protocol):
    """Authentication, key management and sync engine of the cloud service.
    Key derivation and the upload/download engine live behind this port.
    """

    @property
    def is_authenticated(self) -> bool: ...
    @property
    def has_keypair(self) -> bool: ...

    def authenticate(self, email: str, password: str) -> AuthTokens: ...
    def logout(self) -> None: ...

    def setup_passphrase(self, passphrase: str) -> str: ...  # mnemonic phrase
    def setup_unified_recovery(self, vault_password: str) -> str: ...  # mnemonic phrase
    def enter_passphrase(self, passphrase: str) -> None: ...
    def recover_from_mnemonic(self, mnemonic: str) -> None: ...

    def get_status(self) -> CloudSyncStatus: ...
    def get_quota(self, workspace_id: WorkspaceId) -> CloudQuota: ...
    def list_devices(self) -> List[CloudDeviceInfo]: ...
    def start_sync(self, workspace_id: WorkspaceId) -> None: ...
    def stop_sync(self) -> None: ...


class WorkspacePort(Protocol):
    """Reports the active workspace and its sync tier."""

    def get_active_workspace(self) -> Optional[Workspace]: ...


class PasswordCachePort(Protocol):
    """In-memory vault password cache. Empty value means the vault is locked."""

    def get(self) -> Optional[str]: ...


class SaveDialogPort(Protocol):
    """Native save-file picker; ``None`` means the user cancelled."""

    def show_save_file_dialog(
        self, title: str, default_name: str, filters: Sequence[FileFilter]
    ) -> Optional[str]: ...


class RecoveryKitWriterPort(Protocol):
    """Renders the printable recovery kit to ``path``."""

    def write(self, words: Sequence[str], workspace_name: str, path: str | Path) -> Path: ...
