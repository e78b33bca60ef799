from __future__ import annotations

import logging
import os

from promptly import paths
from promptly.config import PromptSettings, load_settings, parse_flag, parse_int, parse_level


def test_parse_helpers() -> None:
    assert parse_level(None, logging.INFO) == logging.INFO
    assert parse_level("debug", logging.INFO) == logging.DEBUG
    assert parse_level("15", logging.INFO) == 15
    assert parse_level("loud", logging.INFO) == logging.INFO
    assert parse_flag("Yes", False) is True
    assert parse_flag("off", True) is False
    assert parse_flag(None, True) is True
    assert parse_int("12", 3) == 12
    assert parse_int("twelve", 3) == 3


def test_defaults_without_environment() -> None:
    assert load_settings() == PromptSettings()


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("PROMPTLY_DIAGNOSTICS", "off")
    monkeypatch.setenv("PROMPTLY_PATH_COMPLETION", "0")
    monkeypatch.setenv("PROMPTLY_REQUIRE_TTY", "no")

    settings = load_settings()

    assert settings == PromptSettings(show_diagnostics=False, path_completion=False, require_tty=False)


def test_env_file_does_not_override_process_environment(monkeypatch) -> None:
    env_file = paths.env_file()
    env_file.parent.mkdir(parents=True)
    env_file.write_text("PROMPTLY_DIAGNOSTICS=false\nPROMPTLY_REQUIRE_TTY=false\n")
    monkeypatch.setenv("PROMPTLY_REQUIRE_TTY", "true")

    settings = load_settings()

    assert settings.show_diagnostics is False
    assert settings.require_tty is True
    assert os.environ["PROMPTLY_REQUIRE_TTY"] == "true"


def test_settings_are_loaded_once(monkeypatch) -> None:
    first = load_settings()
    monkeypatch.setenv("PROMPTLY_DIAGNOSTICS", "off")

    assert load_settings() is first

    load_settings.cache_clear()
    assert load_settings().show_diagnostics is False


def test_loading_settings_leaves_config_dir_alone() -> None:
    load_settings()
    assert not paths.env_file().parent.exists()
