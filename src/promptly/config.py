"""Runtime settings for prompting, read from the environment and a ``.env`` file."""

from __future__ import annotations

import contextlib
import functools
import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from promptly.paths import env_file


@dataclass(frozen=True)
class PromptSettings:
    """Toggles that shape how prompts behave.

    ``show_diagnostics`` controls the advisory message printed after a rejected
    answer; ``path_completion`` enables filename completion for path prompts;
    ``require_tty`` makes a prompt fail fast when stdin is not a terminal.
    """

    show_diagnostics: bool = True
    path_completion: bool = True
    require_tty: bool = True


def parse_flag(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    with contextlib.suppress(ValueError):
        return int(value)
    return default


def parse_level(value: str | None, default: int) -> int:
    """Accept ``debug``/``INFO`` style names or a numeric level."""
    if not value:
        return default
    if value.isdigit():
        return int(value)
    return logging.getLevelNamesMapping().get(value.upper(), default)


@functools.lru_cache(maxsize=1)
def load_settings() -> PromptSettings:
    """Build settings from ``PROMPTLY_*`` variables, once per process.

    Values in the user config ``.env`` never override variables that are
    already set in the process environment. Call ``load_settings.cache_clear()``
    to pick up changes.
    """

    path = env_file()
    if path.is_file():
        load_dotenv(path, override=False)
    return PromptSettings(
        show_diagnostics=parse_flag(os.getenv("PROMPTLY_DIAGNOSTICS"), True),
        path_completion=parse_flag(os.getenv("PROMPTLY_PATH_COMPLETION"), True),
        require_tty=parse_flag(os.getenv("PROMPTLY_REQUIRE_TTY"), True),
    )
