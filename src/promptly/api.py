"""Caller-facing prompt functions.

    name = prompt("Enter your name")
    age = prompt("Enter your age", NonNegativeInt)
    photo = prompt_opt("Enter a path to a profile picture", Path)
    emails = prompt_default("Would you like to receive marketing emails", True)
"""

from __future__ import annotations

from typing import Any, Callable

from promptly.config import PromptSettings
from promptly.engine import PromptEngine, PromptOutcome, PromptRequest, PrompterFactory
from promptly.registry import NO_DEFAULT, EmptyPolicy, Promptable, descriptor_for, type_of_value


def _engine(
    message: str,
    descriptor: Promptable,
    *,
    default: Any = NO_DEFAULT,
    empty_policy: EmptyPolicy = EmptyPolicy.RETRY,
    settings: PromptSettings | None,
    prompter_factory: PrompterFactory | None,
) -> PromptEngine:
    request = PromptRequest(message=message, default=default, empty_policy=empty_policy)
    return PromptEngine(descriptor, request, settings=settings, prompter_factory=prompter_factory)


def _unwrap(outcome: PromptOutcome) -> Any:
    return None if outcome.absent else outcome.value


def _default_type(default: Any, type_: Any) -> Any:
    if type_ is not None:
        return type_
    return type_of_value(default)


def prompt(
    message: str,
    type_: Any = str,
    *,
    settings: PromptSettings | None = None,
    prompter_factory: PrompterFactory | None = None,
) -> Any:
    """Prompt until input parses as ``type_``.

    Empty input re-prompts, including for ``str``. Passing ``Optional[X]``
    makes empty input return ``None`` instead.
    """
    engine = _engine(message, descriptor_for(type_), settings=settings, prompter_factory=prompter_factory)
    return _unwrap(engine.run())


def prompt_opt(
    message: str,
    type_: Any = str,
    *,
    settings: PromptSettings | None = None,
    prompter_factory: PrompterFactory | None = None,
) -> Any:
    """Prompt until input parses as ``type_``; empty input returns ``None``."""
    engine = _engine(
        message,
        descriptor_for(type_),
        empty_policy=EmptyPolicy.ABSENT,
        settings=settings,
        prompter_factory=prompter_factory,
    )
    return _unwrap(engine.run())


def prompt_default(
    message: str,
    default: Any,
    type_: Any = None,
    *,
    settings: PromptSettings | None = None,
    prompter_factory: PrompterFactory | None = None,
) -> Any:
    """Prompt until input parses, returning ``default`` for empty input.

    The type is taken from ``default`` unless ``type_`` is given. The default
    is mentioned in the prompt and returned as-is, without being parsed.
    """
    engine = _engine(
        message,
        descriptor_for(_default_type(default, type_)),
        default=default,
        settings=settings,
        prompter_factory=prompter_factory,
    )
    return engine.run().value


def prompt_with(
    message: str,
    parse: Callable[[str], Any],
    *,
    name: str = "value",
    optional: bool = False,
    default: Any = NO_DEFAULT,
    settings: PromptSettings | None = None,
    prompter_factory: PrompterFactory | None = None,
) -> Any:
    """Prompt with a custom parse function.

    ``parse`` receives the stripped, non-empty line and rejects it by raising
    ``ParseRejected`` (its message is shown) or ``ValueError``.
    """
    descriptor = Promptable(name=name, parse=parse)
    engine = _engine(
        message,
        descriptor,
        default=default,
        empty_policy=EmptyPolicy.ABSENT if optional else EmptyPolicy.RETRY,
        settings=settings,
        prompter_factory=prompter_factory,
    )
    return _unwrap(engine.run())


async def prompt_async(
    message: str,
    type_: Any = str,
    *,
    settings: PromptSettings | None = None,
    prompter_factory: PrompterFactory | None = None,
) -> Any:
    engine = _engine(message, descriptor_for(type_), settings=settings, prompter_factory=prompter_factory)
    return _unwrap(await engine.run_async())


async def prompt_opt_async(
    message: str,
    type_: Any = str,
    *,
    settings: PromptSettings | None = None,
    prompter_factory: PrompterFactory | None = None,
) -> Any:
    engine = _engine(
        message,
        descriptor_for(type_),
        empty_policy=EmptyPolicy.ABSENT,
        settings=settings,
        prompter_factory=prompter_factory,
    )
    return _unwrap(await engine.run_async())


async def prompt_default_async(
    message: str,
    default: Any,
    type_: Any = None,
    *,
    settings: PromptSettings | None = None,
    prompter_factory: PrompterFactory | None = None,
) -> Any:
    engine = _engine(
        message,
        descriptor_for(_default_type(default, type_)),
        default=default,
        settings=settings,
        prompter_factory=prompter_factory,
    )
    return (await engine.run_async()).value
