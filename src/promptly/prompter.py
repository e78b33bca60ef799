"""Single-line interactive input on top of prompt_toolkit."""

from __future__ import annotations

import sys
from typing import Any

from prompt_toolkit import PromptSession  # type: ignore
from prompt_toolkit.completion import Completer, PathCompleter  # type: ignore

from promptly.display import print_diagnostic
from promptly.errors import IoUnavailable, UserCancelled


def _stdin_is_tty() -> bool:
    return sys.stdin is not None and sys.stdin.isatty()


def path_completer() -> Completer:
    return PathCompleter(expanduser=True)


class Prompter:
    """Owns one interactive input session.

    The session is acquired on construction and released by :meth:`close`
    (or by leaving the ``with`` block). Reading never retries: a cancelled
    read raises ``UserCancelled`` and a broken terminal raises
    ``IoUnavailable``.

    ``session`` accepts any object exposing ``prompt(message, default=...)``
    and ``prompt_async(...)``; ``input``/``output`` are forwarded to a new
    ``PromptSession`` otherwise.
    """

    def __init__(
        self,
        completer: Completer | None = None,
        *,
        session: Any = None,
        input: Any = None,  # noqa: A002 - mirrors prompt_toolkit naming
        output: Any = None,
        require_tty: bool = True,
    ) -> None:
        if session is None:
            if input is None and require_tty and not _stdin_is_tty():
                raise IoUnavailable("stdin is not an interactive terminal")
            try:
                session = PromptSession(
                    completer=completer,
                    complete_while_typing=False,
                    input=input,
                    output=output,
                )
            except OSError as exc:
                raise IoUnavailable(f"cannot open terminal session: {exc}") from exc
        self._session: Any = session

    def __enter__(self) -> Prompter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._session is None

    def close(self) -> None:
        self._session = None

    def _require_session(self) -> Any:
        if self._session is None:
            raise IoUnavailable("prompter is closed")
        return self._session

    def read_line(self, message: str, prefill: str | None = None) -> str:
        """Show ``"{message}: "`` and block until a line is submitted."""
        session = self._require_session()
        try:
            return session.prompt(f"{message}: ", default=prefill or "")
        except (KeyboardInterrupt, EOFError) as exc:
            raise UserCancelled(message) from exc
        except OSError as exc:
            raise IoUnavailable(f"cannot read from terminal: {exc}") from exc

    async def read_line_async(self, message: str, prefill: str | None = None) -> str:
        session = self._require_session()
        try:
            return await session.prompt_async(f"{message}: ", default=prefill or "")
        except (KeyboardInterrupt, EOFError) as exc:
            raise UserCancelled(message) from exc
        except OSError as exc:
            raise IoUnavailable(f"cannot read from terminal: {exc}") from exc

    def warn(self, text: str) -> None:
        print_diagnostic(text)
