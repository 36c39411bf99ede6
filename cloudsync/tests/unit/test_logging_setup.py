from __future__ import annotations

import logging

from cloudsync.utils.logging import (
    SecretRedactionFilter,
    apply_preferences,
    env_requests_debug,
    parse_level,
)


def _record(msg: str, *args) -> logging.LogRecord:
    return logging.LogRecord("cloudsync.test", logging.INFO, __file__, 1, msg, args, None)


def test_redaction_masks_tokens_and_secret_fields() -> None:
    record = _record("POST %s with %s", "/keys/unlock", '{"passphrase": "hunter22", "mode": "x"}')
    bearer = _record("Authorization: Bearer abc.def.ghi")

    assert SecretRedactionFilter().filter(record) is True
    SecretRedactionFilter().filter(bearer)

    assert "hunter22" not in record.getMessage()
    assert '"mode": "x"' in record.getMessage()
    assert bearer.getMessage() == "Authorization: Bearer ***"


def test_plain_messages_keep_their_args() -> None:
    record = _record("Cloud sync started for workspace %s", "ws-1")

    SecretRedactionFilter().filter(record)

    assert record.args == ("ws-1",)


def test_parse_level() -> None:
    assert parse_level("debug") == logging.DEBUG
    assert parse_level("15") == 15
    assert parse_level("nonsense", logging.WARNING) == logging.WARNING
    assert parse_level(logging.ERROR) == logging.ERROR


def test_environment_overrides_preferences(monkeypatch) -> None:
    monkeypatch.delenv("CLOUDSYNC_LOG_LEVEL", raising=False)
    monkeypatch.delenv("CLOUDSYNC_DEBUG_LOGGING", raising=False)
    monkeypatch.delenv("CLOUDSYNC_DEBUG", raising=False)
    assert apply_preferences(True) == logging.DEBUG
    assert apply_preferences(False) == logging.INFO
    assert env_requests_debug() is False

    monkeypatch.setenv("CLOUDSYNC_DEBUG", "yes")
    assert apply_preferences(False) == logging.DEBUG
    assert env_requests_debug() is True

    monkeypatch.setenv("CLOUDSYNC_LOG_LEVEL", "WARNING")
    assert apply_preferences(True) == logging.WARNING
