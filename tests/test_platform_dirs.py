from __future__ import annotations

import os
from pathlib import Path

from promptly import paths


def test_platform_dirs_use_xdg_homes() -> None:
    expected_config = Path(os.environ["XDG_CONFIG_HOME"]) / "promptly"
    expected_state = Path(os.environ["XDG_STATE_HOME"]) / "promptly"

    assert paths.config_dir() == expected_config
    assert paths.log_dir().is_relative_to(expected_state)
    assert paths.log_dir().is_dir()


def test_env_file_lives_in_config_dir_without_creating_it() -> None:
    env_file = paths.env_file()
    assert not env_file.parent.exists()
    assert env_file == paths.config_dir() / ".env"
