from __future__ import annotations

import json

import pytest

from cloudsync.app.main import main

DEMO_LOGIN = ["--email", "demo@privstack.test", "--password", "correct-horse"]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "CLOUDSYNC_API_URL",
        "CLOUDSYNC_CORE_URL",
        "CLOUDSYNC_VARIANT",
        "CLOUDSYNC_VAULT_PASSWORD",
        "CLOUDSYNC_DEBUG_LOGGING",
        "CLOUDSYNC_DEBUG",
        "CLOUDSYNC_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_status_when_signed_out(tmp_path, capsys):
    assert main(["status", "--mock", "--data-dir", str(tmp_path)]) == 0

    out = capsys.readouterr().out
    assert out.splitlines() == ["panel: auth_form"]


def test_login_with_wrong_password_fails(tmp_path, capsys):
    code = main(
        ["login", "--mock", "--data-dir", str(tmp_path), "--email", "demo@privstack.test", "--password", "x"]
    )

    assert code == 1
    assert "error: Invalid email or password." in capsys.readouterr().out


def test_enable_without_vault_password_is_blocked(tmp_path, capsys):
    code = main(["enable", "--mock", "--data-dir", str(tmp_path), *DEMO_LOGIN])

    assert code == 1
    out = capsys.readouterr().out
    assert "panel: dashboard" in out
    assert "error: " in out
    assert "recovery kit:" not in out


def test_enable_shows_recovery_kit(tmp_path, capsys, monkeypatch):
    monkeypatch.setenv("CLOUDSYNC_VAULT_PASSWORD", "vault-pw")

    code = main(["enable", "--mock", "--data-dir", str(tmp_path), *DEMO_LOGIN])

    assert code == 0
    out = capsys.readouterr().out
    assert "recovery kit:" in out
    assert " 12. " in out
    assert "workspace: Demo workspace (not synced to cloud)" in out
    assert "syncing: no" in out


def test_enable_with_ack_starts_sync(tmp_path, capsys, monkeypatch):
    monkeypatch.setenv("CLOUDSYNC_VAULT_PASSWORD", "vault-pw")

    code = main(["enable", "--mock", "--ack", "--data-dir", str(tmp_path), *DEMO_LOGIN])

    assert code == 0
    out = capsys.readouterr().out
    assert "recovery kit:" not in out
    assert "workspace: Demo workspace (cloud sync enabled)" in out
    assert "syncing: yes" in out
    assert "storage: 1.0 MB / 10.0 GB (ok)" in out
    registry = json.loads((tmp_path / "workspaces.json").read_text(encoding="utf-8"))
    assert registry["workspaces"][0]["sync_tier"] == "PrivStackCloud"


def test_invalid_persisted_settings_exit_with_usage_error(tmp_path, capsys):
    (tmp_path / "user_settings.json").write_text(json.dumps({"relay_port": 1}), encoding="utf-8")

    assert main(["status", "--mock", "--data-dir", str(tmp_path)]) == 2
    assert "Unsupported settings keys: relay_port" in capsys.readouterr().err
