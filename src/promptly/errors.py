"""Exception taxonomy for prompting.

Only ``ParseRejected`` is handled inside the prompt loop; everything else ends
the current prompt call and reaches the caller.
"""

from __future__ import annotations


class PromptError(Exception):
    """Base class for all prompting errors."""


class ParseRejected(PromptError, ValueError):
    """Raw text does not satisfy the target type's parse rule."""


class IoUnavailable(PromptError, OSError):
    """The interactive session cannot be opened or read."""


class UserCancelled(PromptError):
    """The user interrupted the prompt (Ctrl-C or Ctrl-D)."""


class UnsupportedType(PromptError, TypeError):
    """No promptable descriptor exists or can be built for a type."""
