"""Retry-until-valid prompt loop.

The loop is a small state machine::

    AWAIT_INPUT -> VALIDATE -> ACCEPT | SUBSTITUTE_DEFAULT | PRODUCE_ABSENT
                            -> RETRY -> AWAIT_INPUT

There is no retry limit. The only ways out are the three terminal states or a
``UserCancelled``/``IoUnavailable`` raised by the prompter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from promptly.config import PromptSettings, load_settings
from promptly.errors import IoUnavailable, ParseRejected, UserCancelled
from promptly.log_utils import log_event, prompt_scope
from promptly.registry import NO_DEFAULT, EmptyPolicy, Promptable
from promptly.prompter import Prompter, path_completer

logger = logging.getLogger(__name__)


class PromptState(str, Enum):
    AWAIT_INPUT = "await_input"
    VALIDATE = "validate"
    RETRY = "retry"
    ACCEPT = "accept"
    SUBSTITUTE_DEFAULT = "substitute_default"
    PRODUCE_ABSENT = "produce_absent"


TERMINAL_STATES = frozenset(
    {PromptState.ACCEPT, PromptState.SUBSTITUTE_DEFAULT, PromptState.PRODUCE_ABSENT}
)

_STATE_EVENTS = {
    PromptState.ACCEPT: "prompt.accept",
    PromptState.SUBSTITUTE_DEFAULT: "prompt.default",
    PromptState.PRODUCE_ABSENT: "prompt.absent",
    PromptState.RETRY: "prompt.retry",
}


@dataclass(frozen=True)
class PromptRequest:
    message: str
    default: Any = NO_DEFAULT
    empty_policy: EmptyPolicy = EmptyPolicy.RETRY

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT


@dataclass(frozen=True)
class PromptOutcome:
    """Result of validating one raw answer.

    ``value`` is only meaningful for ``ACCEPT`` and ``SUBSTITUTE_DEFAULT``;
    ``diagnostic`` is only set for a rejected (``RETRY``) answer.
    """

    state: PromptState
    value: Any = None
    diagnostic: str | None = None

    @property
    def absent(self) -> bool:
        return self.state is PromptState.PRODUCE_ABSENT


PrompterFactory = Callable[[Promptable, PromptSettings], Prompter]


def default_prompter_factory(descriptor: Promptable, settings: PromptSettings) -> Prompter:
    completer = path_completer() if descriptor.path_shaped and settings.path_completion else None
    return Prompter(completer, require_tty=settings.require_tty)


class PromptEngine:
    """Drive one prompt call for ``descriptor`` until it resolves."""

    def __init__(
        self,
        descriptor: Promptable,
        request: PromptRequest,
        *,
        settings: PromptSettings | None = None,
        prompter_factory: PrompterFactory | None = None,
    ) -> None:
        self.descriptor = descriptor
        self.request = request
        self.settings = settings or load_settings()
        self._prompter_factory = prompter_factory or default_prompter_factory
        self.attempts = 0

    @property
    def empty_policy(self) -> EmptyPolicy:
        if EmptyPolicy.ABSENT in (self.request.empty_policy, self.descriptor.empty_policy):
            return EmptyPolicy.ABSENT
        return EmptyPolicy.RETRY

    @property
    def display_message(self) -> str:
        return self.descriptor.annotate(self.request.message, self.request.default)

    def validate(self, raw: str) -> PromptOutcome:
        """Decide what a raw answer means. Never raises for bad input."""
        text = raw.strip()
        if not text:
            # A default wins over the absent policy; it is returned as given.
            if self.request.has_default:
                return PromptOutcome(PromptState.SUBSTITUTE_DEFAULT, self.request.default)
            if self.empty_policy is EmptyPolicy.ABSENT:
                return PromptOutcome(PromptState.PRODUCE_ABSENT)
            return PromptOutcome(PromptState.RETRY)
        try:
            value = self.descriptor.attempt_parse(text)
        except ParseRejected as exc:
            return PromptOutcome(PromptState.RETRY, diagnostic=str(exc))
        return PromptOutcome(PromptState.ACCEPT, value)

    def run(self) -> PromptOutcome:
        with prompt_scope(self.request.message, self.descriptor.name):
            with self._open_prompter() as prompter:
                state = PromptState.AWAIT_INPUT
                raw = ""
                while state not in TERMINAL_STATES:
                    if state is PromptState.VALIDATE:
                        outcome = self._step(prompter, raw)
                        state = outcome.state
                        continue
                    try:
                        raw = prompter.read_line(self.display_message)
                    except UserCancelled:
                        self._log_cancelled()
                        raise
                    state = PromptState.VALIDATE
                return outcome

    async def run_async(self) -> PromptOutcome:
        with prompt_scope(self.request.message, self.descriptor.name):
            with self._open_prompter() as prompter:
                state = PromptState.AWAIT_INPUT
                raw = ""
                while state not in TERMINAL_STATES:
                    if state is PromptState.VALIDATE:
                        outcome = self._step(prompter, raw)
                        state = outcome.state
                        continue
                    try:
                        raw = await prompter.read_line_async(self.display_message)
                    except UserCancelled:
                        self._log_cancelled()
                        raise
                    state = PromptState.VALIDATE
                return outcome

    def _open_prompter(self) -> Prompter:
        log_event(
            logger,
            "prompt.start",
            policy=self.empty_policy.value,
            has_default=self.request.has_default,
        )
        try:
            return self._prompter_factory(self.descriptor, self.settings)
        except IoUnavailable as exc:
            log_event(logger, "prompt.io_unavailable", level=logging.WARNING, error=str(exc))
            raise

    def _step(self, prompter: Prompter, raw: str) -> PromptOutcome:
        self.attempts += 1
        outcome = self.validate(raw)
        log_event(logger, _STATE_EVENTS[outcome.state], attempt=self.attempts)
        if outcome.diagnostic and self.settings.show_diagnostics:
            prompter.warn(outcome.diagnostic)
        return outcome

    def _log_cancelled(self) -> None:
        log_event(logger, "prompt.cancelled", level=logging.INFO, attempt=self.attempts + 1)
