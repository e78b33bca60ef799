"""Opinionated, type-driven prompting for interactive terminals.

Prompts repeat until the answer parses as the requested type; empty answers
re-prompt, fall back to a default, or yield ``None`` depending on the call.
"""

from promptly.api import (
    prompt,
    prompt_async,
    prompt_default,
    prompt_default_async,
    prompt_opt,
    prompt_opt_async,
    prompt_with,
)
from promptly.config import PromptSettings, load_settings
from promptly.engine import PromptEngine, PromptOutcome, PromptRequest, PromptState
from promptly.errors import IoUnavailable, ParseRejected, PromptError, UnsupportedType, UserCancelled
from promptly.registry import (
    NO_DEFAULT,
    EmptyPolicy,
    Promptable,
    descriptor_for,
    promptable,
    register_promptable,
)
from promptly.prompter import Prompter

__version__ = "0.1.0"

__all__ = [
    "NO_DEFAULT",
    "EmptyPolicy",
    "IoUnavailable",
    "ParseRejected",
    "PromptEngine",
    "PromptError",
    "PromptOutcome",
    "PromptRequest",
    "PromptSettings",
    "PromptState",
    "Promptable",
    "Prompter",
    "UnsupportedType",
    "UserCancelled",
    "descriptor_for",
    "load_settings",
    "prompt",
    "prompt_async",
    "prompt_default",
    "prompt_default_async",
    "prompt_opt",
    "prompt_opt_async",
    "prompt_with",
    "promptable",
    "register_promptable",
]
