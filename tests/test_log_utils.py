from __future__ import annotations

import json
import logging

import pytest

from promptly.log_utils import (
    _PROMPT_SCOPE,
    LogConfig,
    build_log_config,
    configure_logging,
    log_event,
    prompt_scope,
)


def test_build_log_config_reads_environment(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("PROMPTLY_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("PROMPTLY_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("PROMPTLY_LOG_JSON", "1")
    monkeypatch.setenv("PROMPTLY_LOG_BACKUPS", "5")

    config = build_log_config(log_file_name="test.log")

    assert config.log_file == tmp_path / "logs" / "test.log"
    assert config.log_file.parent.is_dir()
    assert config.level == logging.DEBUG
    assert config.json is True
    assert config.stderr is False
    assert config.backup_count == 5
    assert config.max_bytes == LogConfig.max_bytes


def test_build_log_config_defaults_to_warning_in_log_dir() -> None:
    config = build_log_config()
    assert config.level == logging.WARNING
    assert config.log_file.name == "promptly.log"


@pytest.mark.usefixtures("restore_root_logging")
def test_text_lines_carry_prompt_scope_and_event_fields(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("PROMPTLY_LOG_DIR", str(tmp_path))
    config = build_log_config(log_file_name="text.log", default_level=logging.DEBUG)
    configure_logging(config)
    logger = logging.getLogger("promptly.test")

    with prompt_scope("Enter age", "int"):
        log_event(logger, "prompt.retry", attempt=2, diagnostic=None)
    log_event(logger, "cli.done")

    before, after = config.log_file.read_text().strip().splitlines()[-2:]
    assert before.endswith('prompt.retry attempt=2 prompt="Enter age" type=int')
    assert after.endswith("cli.done")


@pytest.mark.usefixtures("restore_root_logging")
def test_json_lines(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("PROMPTLY_LOG_DIR", str(tmp_path))
    monkeypatch.setenv("PROMPTLY_LOG_JSON", "true")
    config = build_log_config(log_file_name="json.log")
    configure_logging(config)

    with prompt_scope("Port", "int"):
        log_event(logging.getLogger("promptly.test"), "prompt.accept", level=logging.WARNING, attempt=1)

    payload = json.loads(config.log_file.read_text().strip().splitlines()[-1])
    assert payload["event"] == "prompt.accept"
    assert payload["level"] == "WARNING"
    assert payload["prompt"] == {"prompt": "Port", "type": "int"}
    assert payload["fields"] == {"attempt": 1}


def test_prompt_scopes_nest_and_restore() -> None:
    with prompt_scope("Outer", "str"):
        with prompt_scope("Inner", "bool"):
            assert _PROMPT_SCOPE.get() == {"prompt": "Inner", "type": "bool"}
        assert _PROMPT_SCOPE.get()["prompt"] == "Outer"
    assert _PROMPT_SCOPE.get() == {}


@pytest.mark.usefixtures("restore_root_logging")
def test_configure_logging_replaces_root_handlers(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("PROMPTLY_LOG_DIR", str(tmp_path))
    monkeypatch.setenv("PROMPTLY_LOG_STDERR", "yes")
    config = build_log_config(log_file_name="twice.log")

    configure_logging(config)
    configure_logging(config)

    assert len(logging.getLogger().handlers) == 2
