"""Rich rendering routed through prompt_toolkit so output never tears the prompt line."""

from __future__ import annotations

import sys
from io import StringIO
from threading import Lock
from typing import Any, TextIO

from prompt_toolkit.formatted_text import ANSI  # type: ignore
from prompt_toolkit.shortcuts import print_formatted_text  # type: ignore
from rich.console import Console
from rich.text import Text

_render_buffer = StringIO()
_render_console = Console(
    file=_render_buffer,
    force_terminal=True,
    color_system="standard",
    markup=False,
    highlight=False,
)
_render_lock = Lock()


def render(*args: Any, **kwargs: Any) -> str:
    """Render rich renderables to an ANSI string.

    Lines are never hard-wrapped; the terminal wraps long answers itself.
    """
    with _render_lock:
        _render_buffer.seek(0)
        _render_buffer.truncate(0)
        kwargs.setdefault("soft_wrap", True)
        _render_console.print(*args, **kwargs)
        return _render_buffer.getvalue()


def _render_and_print(*args: Any, file: TextIO | None = None, **kwargs: Any) -> None:
    output = render(*args, **kwargs)
    if output:
        print_formatted_text(ANSI(output), end="", file=file)


def print_diagnostic(text: str) -> None:
    """Print an advisory message (e.g. a rejected answer) to stderr."""
    _render_and_print(Text(text, style="yellow"), file=sys.stderr)

