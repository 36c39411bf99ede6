from __future__ import annotations

import os
from dataclasses import asdict, dataclass, replace
from typing import Any, Callable, Dict, Mapping, Optional

from ..utils.logging import env_requests_debug

KEY_SETUP_VARIANTS: tuple[str, ...] = ("passphrase", "unified")

_ENV_OVERRIDES = {
    "CLOUDSYNC_API_URL": "api_base_url",
    "CLOUDSYNC_CORE_URL": "core_base_url",
    "CLOUDSYNC_VARIANT": "key_setup_variant",
}


@dataclass
class CloudSyncConfig:
    """Typed runtime settings that persist via StorageLocal."""

    api_base_url: str = "https://api.privstack.io"
    core_base_url: str = "http://127.0.0.1:8765"
    request_timeout_s: int = 10
    retries: int = 2
    key_setup_variant: str = "unified"
    data_dir: str = "."


def _default_debug_logging() -> bool:
    return env_requests_debug()


class SettingsVM:
    """Keeps connection and deployment settings plus validation, no I/O here."""

    def __init__(
        self,
        *,
        config: Optional[CloudSyncConfig] = None,
        on_save: Optional[Callable[[dict], None]] = None,
    ) -> None:
        self.config = config or CloudSyncConfig()
        self.on_save = on_save
        self.debug_logging: bool = _default_debug_logging()

    # ------------------------------------------------------------------
    # Properties bridging to the typed config
    # ------------------------------------------------------------------
    @property
    def api_base_url(self) -> str:
        return self.config.api_base_url

    @api_base_url.setter
    def api_base_url(self, value: str) -> None:
        self.config = replace(self.config, api_base_url=self._coerce_url("api_base_url", value))

    @property
    def core_base_url(self) -> str:
        return self.config.core_base_url

    @core_base_url.setter
    def core_base_url(self, value: str) -> None:
        self.config = replace(self.config, core_base_url=self._coerce_url("core_base_url", value))

    @property
    def request_timeout_s(self) -> int:
        return self.config.request_timeout_s

    @request_timeout_s.setter
    def request_timeout_s(self, value: int) -> None:
        coerced = self._coerce_int("request_timeout_s", value, allow_negative=False)
        self.config = replace(self.config, request_timeout_s=coerced)

    @property
    def key_setup_variant(self) -> str:
        return self.config.key_setup_variant

    @key_setup_variant.setter
    def key_setup_variant(self, value: str) -> None:
        self.config = replace(self.config, key_setup_variant=self._coerce_variant(value))

    # ------------------------------------------------------------------
    def is_valid(self) -> bool:
        if not self.api_base_url or not self.core_base_url:
            return False
        if self.config.request_timeout_s <= 0 or self.config.retries < 0:
            return False
        return self.key_setup_variant in KEY_SETUP_VARIANTS

    def apply_dict(self, payload: Mapping[str, Any]) -> None:
        """Apply persisted settings to the view-model."""

        if not isinstance(payload, Mapping):
            raise ValueError("Settings payload must be a mapping of flat keys.")

        allowed_flat_keys = {*CloudSyncConfig.__annotations__.keys(), "debug_logging"}
        unknown = set(payload.keys()) - allowed_flat_keys
        if unknown:
            raise ValueError(f"Unsupported settings keys: {', '.join(sorted(str(key) for key in unknown))}")

        updates: Dict[str, Any] = {}
        for cfg_key in CloudSyncConfig.__annotations__.keys():
            if cfg_key in payload:
                updates[cfg_key] = self._coerce_config_value(cfg_key, payload[cfg_key])

        if updates:
            self.config = replace(self.config, **updates)

        if "debug_logging" in payload:
            self.debug_logging = self._coerce_bool(payload["debug_logging"])

    def apply_env(self, environ: Optional[Mapping[str, str]] = None) -> None:
        """Apply ``CLOUDSYNC_*`` overrides on top of the persisted values."""
        env = os.environ if environ is None else environ
        updates = {
            key: env[var].strip()
            for var, key in _ENV_OVERRIDES.items()
            if (env.get(var) or "").strip()
        }
        if updates:
            self.apply_dict(updates)

    def to_dict(self) -> dict:
        snapshot = asdict(self.config)
        snapshot["debug_logging"] = bool(self.debug_logging)
        return snapshot

    def set_debug_logging(self, enabled: bool) -> None:
        self.debug_logging = self._coerce_bool(enabled)

    def cmd_save(self) -> None:
        if not self.is_valid():
            raise ValueError("Settings invalid")
        if self.on_save:
            self.on_save(self.to_dict())

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _coerce_config_value(self, key: str, raw: Any) -> Any:
        if key in {"api_base_url", "core_base_url"}:
            return self._coerce_url(key, raw)
        if key in {"request_timeout_s", "retries"}:
            return self._coerce_int(key, raw, allow_negative=False)
        if key == "key_setup_variant":
            return self._coerce_variant(raw)
        if key == "data_dir":
            return self._coerce_dir(raw)
        raise ValueError(f"Unhandled config field: {key}")

    @staticmethod
    def _coerce_url(name: str, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError(f"{name} must be a string URL.")
        normalized = value.strip().rstrip("/")
        if normalized and not normalized.startswith(("http://", "https://")):
            raise ValueError(f"{name} must start with http:// or https://.")
        return normalized

    @staticmethod
    def _coerce_variant(value: Any) -> str:
        token = str(value or "").strip().lower()
        if token not in KEY_SETUP_VARIANTS:
            raise ValueError(
                f"key_setup_variant must be one of: {', '.join(KEY_SETUP_VARIANTS)}."
            )
        return token

    @staticmethod
    def _coerce_dir(value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("data_dir must be a string path.")
        return value.strip() or "."

    @staticmethod
    def _coerce_bool(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return bool(value)
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)

    @staticmethod
    def _coerce_int(name: str, value: Any, *, allow_negative: bool = True) -> int:
        if isinstance(value, bool):
            raise ValueError(f"{name} must be an integer.")
        if isinstance(value, (int, float)):
            coerced = int(value)
        elif isinstance(value, str):
            try:
                coerced = int(value.strip())
            except (TypeError, ValueError) as exc:
                raise ValueError(f"{name} must be an integer.") from exc
        else:
            raise ValueError(f"{name} must be an integer.")
        if not allow_negative and coerced < 0:
            raise ValueError(f"{name} must be non-negative.")
        return coerced


def default_settings_payload() -> dict:
    """Return a fresh snapshot containing the default settings payload."""
    return SettingsVM().to_dict()
