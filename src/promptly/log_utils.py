"""Logging for prompt calls.

Each prompt runs inside :func:`prompt_scope`, which tags every record emitted
during that call with the prompt message and target type. The engine reports
state transitions through :func:`log_event` using stable names such as
``prompt.retry``. Handlers are only installed by :func:`configure_logging`,
which the CLI calls; library callers keep their own logging setup.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterator

from promptly.config import parse_flag, parse_int, parse_level
from promptly.paths import log_dir

_PROMPT_SCOPE: contextvars.ContextVar[dict[str, str]] = contextvars.ContextVar("promptly_prompt_scope", default={})


@dataclass(frozen=True)
class LogConfig:
    """Where prompt logs go.

    The terminal belongs to the prompt, so records are written to a rotating
    file and only mirrored to stderr on request.
    """

    log_file: Path
    level: int = logging.WARNING
    stderr: bool = False
    json: bool = False
    max_bytes: int = 1_000_000
    backup_count: int = 2


def build_log_config(*, log_file_name: str = "promptly.log", default_level: int = logging.WARNING) -> LogConfig:
    """Read ``PROMPTLY_LOG_*`` variables into a :class:`LogConfig`."""

    directory = Path(os.getenv("PROMPTLY_LOG_DIR") or log_dir())
    directory.mkdir(parents=True, exist_ok=True)
    return LogConfig(
        log_file=directory / log_file_name,
        level=parse_level(os.getenv("PROMPTLY_LOG_LEVEL"), default_level),
        stderr=parse_flag(os.getenv("PROMPTLY_LOG_STDERR"), False),
        json=parse_flag(os.getenv("PROMPTLY_LOG_JSON"), False),
        max_bytes=parse_int(os.getenv("PROMPTLY_LOG_MAX_BYTES"), LogConfig.max_bytes),
        backup_count=parse_int(os.getenv("PROMPTLY_LOG_BACKUPS"), LogConfig.backup_count),
    )


def configure_logging(config: LogConfig) -> None:
    """Install the prompt log handlers on the root logger, replacing any previous ones."""

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    root.setLevel(config.level)

    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            config.log_file,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    ]
    if config.stderr:
        handlers.append(logging.StreamHandler())

    formatter = PromptLogFormatter(as_json=config.json)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)


@contextlib.contextmanager
def prompt_scope(message: str, type_name: str) -> Iterator[None]:
    """Tag records logged inside the block with the prompt they belong to."""

    token = _PROMPT_SCOPE.set({"prompt": message, "type": type_name})
    try:
        yield
    finally:
        _PROMPT_SCOPE.reset(token)


def log_event(logger: logging.Logger, event: str, *, level: int = logging.DEBUG, **fields: Any) -> None:
    logger.log(level, event, extra={"event_fields": fields})


def _quote(value: Any) -> str:
    text = str(value)
    if text == "" or any(ch.isspace() or ch in '="' for ch in text):
        return json.dumps(text)
    return text


class PromptLogFormatter(logging.Formatter):
    """Append the active prompt scope and event fields to each record.

    Text lines end in sorted ``key=value`` pairs; JSON lines carry them under
    ``prompt`` and ``fields``.
    """

    def __init__(self, *, as_json: bool = False) -> None:
        super().__init__("%(asctime)s %(levelname)s %(name)s %(message)s")
        self.as_json = as_json

    def format(self, record: logging.LogRecord) -> str:
        scope = _PROMPT_SCOPE.get()
        fields = {k: v for k, v in getattr(record, "event_fields", {}).items() if v is not None}
        if self.as_json:
            payload: dict[str, Any] = {
                "timestamp": self.formatTime(record),
                "level": record.levelname,
                "logger": record.name,
                "event": record.getMessage(),
            }
            if scope:
                payload["prompt"] = scope
            if fields:
                payload["fields"] = fields
            return json.dumps(payload, ensure_ascii=True, default=str)

        pairs = " ".join(f"{key}={_quote(value)}" for key, value in sorted({**scope, **fields}.items()))
        base = super().format(record)
        return f"{base} {pairs}" if pairs else base
