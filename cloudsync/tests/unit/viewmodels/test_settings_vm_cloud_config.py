from __future__ import annotations

import pytest

from cloudsync.viewmodels.settings_vm import (
    CloudSyncConfig,
    SettingsVM,
    default_settings_payload,
)


def test_apply_dict_updates_flat_keys() -> None:
    vm = SettingsVM()
    vm.apply_dict(
        {
            "api_base_url": " https://cloud.example/ ",
            "core_base_url": "http://localhost:9000",
            "request_timeout_s": "15",
            "retries": 0,
            "key_setup_variant": "Passphrase",
            "data_dir": "  ",
            "debug_logging": "yes",
        }
    )

    assert vm.api_base_url == "https://cloud.example"
    assert vm.core_base_url == "http://localhost:9000"
    assert vm.request_timeout_s == 15
    assert vm.config.retries == 0
    assert vm.key_setup_variant == "passphrase"
    assert vm.config.data_dir == "."
    assert vm.debug_logging is True
    assert vm.is_valid()


def test_apply_dict_rejects_unknown_keys() -> None:
    vm = SettingsVM()

    with pytest.raises(ValueError, match="Unsupported settings keys: relay_ip"):
        vm.apply_dict({"relay_ip": "10.0.0.1"})


@pytest.mark.parametrize(
    "payload",
    [
        {"api_base_url": "ftp://cloud.example"},
        {"api_base_url": 42},
        {"request_timeout_s": -1},
        {"retries": True},
        {"key_setup_variant": "hybrid"},
    ],
)
def test_apply_dict_rejects_invalid_values(payload) -> None:
    vm = SettingsVM()

    with pytest.raises(ValueError):
        vm.apply_dict(payload)
    assert vm.config == CloudSyncConfig()


def test_empty_url_makes_settings_invalid() -> None:
    vm = SettingsVM()
    vm.api_base_url = ""

    assert vm.is_valid() is False
    with pytest.raises(ValueError):
        vm.cmd_save()


def test_apply_env_overrides_persisted_values() -> None:
    vm = SettingsVM()
    vm.apply_env(
        {
            "CLOUDSYNC_API_URL": "https://staging.example/",
            "CLOUDSYNC_VARIANT": "passphrase",
            "CLOUDSYNC_CORE_URL": "   ",
        }
    )

    assert vm.api_base_url == "https://staging.example"
    assert vm.key_setup_variant == "passphrase"
    assert vm.core_base_url == CloudSyncConfig().core_base_url


def test_cmd_save_hands_snapshot_to_callback() -> None:
    saved = []
    vm = SettingsVM(on_save=saved.append)
    vm.set_debug_logging(False)

    vm.cmd_save()

    assert saved == [vm.to_dict()]
    assert saved[0]["debug_logging"] is False
    assert saved[0]["key_setup_variant"] == "unified"


def test_default_payload_lists_every_key() -> None:
    payload = default_settings_payload()

    assert set(payload) == {*CloudSyncConfig.__annotations__, "debug_logging"}
    SettingsVM().apply_dict(payload)
