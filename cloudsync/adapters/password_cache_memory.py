from __future__ import annotations
from typing import Optional
from cloudsync.domain.ports import PasswordCachePort


class MemoryPasswordCache(PasswordCachePort):
    """Process-local vault password cache. Cleared when the vault locks."""

    def __init__(self, password: Optional[str] = None) -> None:
        self._password = password or None

    @property
    def has_cached_password(self) -> bool:
        return bool(self._password)

    def set(self, password: str) -> None:
        self._password = password or None

    def get(self) -> Optional[str]:
        return self._password

    def clear(self) -> None:
        self._password = None
