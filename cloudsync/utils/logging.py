"""Root logger setup for the cloudsync CLI and embedding shells.

Level resolution, highest priority first:
  - ``CLOUDSYNC_LOG_LEVEL``: level name or number
  - ``CLOUDSYNC_DEBUG_LOGGING`` / ``CLOUDSYNC_DEBUG``: truthy -> DEBUG
  - the persisted ``debug_logging`` setting (``apply_preferences``)
  - the ``configure_root`` default (INFO)

Every handler installed here carries ``SecretRedactionFilter`` so bearer
tokens and password/mnemonic fields never reach the log output.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"
LEVEL_ENV = "CLOUDSYNC_LOG_LEVEL"
DEBUG_ENVS = ("CLOUDSYNC_DEBUG_LOGGING", "CLOUDSYNC_DEBUG")
_TRUTHY = {"1", "true", "yes", "on"}

# urllib3 logs full request lines at DEBUG
_NOISY_LOGGERS = ("urllib3",)

_SECRET_PATTERNS = (
    re.compile(r"(Bearer\s+)[A-Za-z0-9._~+/=-]+"),
    re.compile(r"""((?:password|passphrase|mnemonic|access_token|refresh_token)["']?\s*[:=]\s*["']?)[^"',\s}]+""", re.I),
)


class SecretRedactionFilter(logging.Filter):
    """Mask secrets in the rendered message of every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = message
        for pattern in _SECRET_PATTERNS:
            redacted = pattern.sub(r"\1***", redacted)
        if redacted != message:
            record.msg, record.args = redacted, None
        return True


def parse_level(value: object, fallback: int = logging.INFO) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    text = str(value or "").strip()
    if text.isdigit():
        return int(text)
    candidate = logging.getLevelName(text.upper()) if text else None
    return candidate if isinstance(candidate, int) else fallback


def env_level() -> Optional[int]:
    """Level forced by the environment, ``None`` when nothing is set."""
    explicit = os.getenv(LEVEL_ENV)
    if explicit and explicit.strip():
        return parse_level(explicit)
    if any((os.getenv(name) or "").strip().lower() in _TRUTHY for name in DEBUG_ENVS):
        return logging.DEBUG
    return None


def configure_root(default_level: int | str = logging.INFO) -> int:
    """Install a stderr handler on first use and set the root level."""
    level = env_level()
    if level is None:
        level = parse_level(default_level)

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATEFMT))
        root.addHandler(handler)
    for handler in root.handlers:
        if not any(isinstance(f, SecretRedactionFilter) for f in handler.filters):
            handler.addFilter(SecretRedactionFilter())
    _set_level(level)
    return level


def apply_preferences(debug_enabled: bool) -> int:
    """Apply the persisted ``debug_logging`` flag unless the environment overrides it."""
    level = env_level()
    if level is None:
        level = logging.DEBUG if debug_enabled else logging.INFO
    _set_level(level)
    return level


def level_name(level: int) -> str:
    return logging.getLevelName(level)


def env_requests_debug() -> bool:
    """True when the environment forces DEBUG (used as the ``debug_logging`` default)."""
    level = env_level()
    return level is not None and level <= logging.DEBUG


def _set_level(level: int) -> None:
    logging.getLogger().setLevel(level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))
