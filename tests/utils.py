from __future__ import annotations

from typing import Any, Iterable

from promptly.config import PromptSettings
from promptly.registry import Promptable
from promptly.prompter import Prompter


class ScriptedSession:
    """Stand-in for a PromptSession that replays canned answers.

    An answer that is an exception class or instance is raised instead of
    returned, e.g. ``KeyboardInterrupt`` to simulate Ctrl-C.
    """

    def __init__(self, answers: Iterable[Any]) -> None:
        self.answers = list(answers)
        self.messages: list[str] = []
        self.defaults: list[str] = []

    def prompt(self, message: str, default: str = "") -> str:
        self.messages.append(message)
        self.defaults.append(default)
        if not self.answers:
            raise AssertionError(f"unexpected extra prompt: {message!r}")
        answer = self.answers.pop(0)
        if isinstance(answer, BaseException) or (isinstance(answer, type) and issubclass(answer, BaseException)):
            raise answer
        return answer

    async def prompt_async(self, message: str, default: str = "") -> str:
        return self.prompt(message, default=default)


class ScriptedPrompterFactory:
    """Prompter factory backed by a single scripted session."""

    def __init__(self, answers: Iterable[Any]) -> None:
        self.session = ScriptedSession(answers)
        self.descriptors: list[Promptable] = []
        self.prompters: list[Prompter] = []

    def __call__(self, descriptor: Promptable, _settings: PromptSettings) -> Prompter:
        self.descriptors.append(descriptor)
        prompter = Prompter(session=self.session)
        self.prompters.append(prompter)
        return prompter

    @property
    def messages(self) -> list[str]:
        return self.session.messages

    @property
    def remaining(self) -> list[Any]:
        return self.session.answers
