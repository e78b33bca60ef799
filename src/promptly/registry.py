"""Registry of promptable types.

Each supported type maps to a :class:`Promptable` descriptor holding its parse
rule and its emptiness policy. The prompt loop only ever talks to descriptors,
so supporting a new type means registering a new entry:

    @promptable(Color)
    def _parse_color(text: str) -> Color:
        return Color.from_hex(text)

Types without an entry fall back to pydantic validation, which covers things
like ``NonNegativeInt``, ``IPvAnyAddress`` or ``AnyUrl``.
"""

from __future__ import annotations

import contextlib
import functools
import types
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from ipaddress import IPv4Address, IPv6Address
from pathlib import Path, PurePath
from typing import Annotated, Any, Callable, Union, get_args, get_origin

from pydantic import PydanticUserError, TypeAdapter, ValidationError

from promptly.errors import ParseRejected, UnsupportedType

ParseFn = Callable[[str], Any]
AnnotateFn = Callable[[str, Any], str]

TRUE_WORDS = frozenset({"true", "yes", "y"})
FALSE_WORDS = frozenset({"false", "no", "n"})


class _NoDefault:
    def __repr__(self) -> str:
        return "NO_DEFAULT"


NO_DEFAULT: Any = _NoDefault()


class EmptyPolicy(str, Enum):
    RETRY = "retry"
    ABSENT = "absent"


@dataclass(frozen=True)
class Promptable:
    """Parse rule and emptiness policy for one target type."""

    name: str
    parse: ParseFn
    format_default: Callable[[Any], str] = str
    annotator: AnnotateFn | None = None
    path_shaped: bool = False
    empty_policy: EmptyPolicy = EmptyPolicy.RETRY

    def attempt_parse(self, text: str) -> Any:
        """Parse non-empty text, raising ``ParseRejected`` on failure."""
        try:
            return self.parse(text)
        except ParseRejected:
            raise
        except (ValueError, TypeError, ArithmeticError) as exc:
            raise ParseRejected(f"Could not parse {text} as {self.name}.") from exc

    def annotate(self, message: str, default: Any = NO_DEFAULT) -> str:
        """Return the message as shown to the user, including any default hint."""
        if self.annotator is not None:
            return self.annotator(message, default)
        if default is NO_DEFAULT:
            return message
        return f"{message} (default={self.format_default(default)})"

    def optional(self) -> Promptable:
        return replace(self, empty_policy=EmptyPolicy.ABSENT)


_REGISTRY: dict[Any, Promptable] = {}


def register_promptable(tp: Any, descriptor: Promptable) -> Promptable:
    """Register (or replace) the descriptor used for ``tp``."""
    _REGISTRY[tp] = descriptor
    return descriptor


def promptable(
    tp: Any,
    *,
    name: str | None = None,
    format_default: Callable[[Any], str] = str,
    annotator: AnnotateFn | None = None,
    path_shaped: bool = False,
) -> Callable[[ParseFn], ParseFn]:
    """Decorator registering a parse function for ``tp``."""

    def _decorator(func: ParseFn) -> ParseFn:
        register_promptable(
            tp,
            Promptable(
                name=name or type_name(tp),
                parse=func,
                format_default=format_default,
                annotator=annotator,
                path_shaped=path_shaped,
            ),
        )
        return func

    return _decorator


def type_name(tp: Any) -> str:
    if get_origin(tp) is Annotated:
        return type_name(get_args(tp)[0])
    return getattr(tp, "__name__", None) or str(tp)


def type_of_value(value: Any) -> Any:
    """Return the registered type a value belongs to, e.g. ``Path`` for a ``PosixPath``.

    Enums keep their own type so their members are not parsed as plain ints or strs.
    """
    tp = type(value)
    if tp in _REGISTRY or issubclass(tp, Enum):
        return tp
    for base in tp.__mro__[1:]:
        if base in _REGISTRY:
            return base
    return tp


def descriptor_for(tp: Any) -> Promptable:
    """Resolve the descriptor for ``tp``.

    ``Optional[X]`` resolves to the descriptor of ``X`` with the absent
    policy. Registered types win over the pydantic fallback.
    """

    inner = _unwrap_optional(tp)
    if inner is not None:
        return descriptor_for(inner).optional()
    try:
        registered = _REGISTRY.get(tp)
    except TypeError as exc:
        raise UnsupportedType(f"Cannot prompt for unhashable type {tp!r}") from exc
    if registered is not None:
        return registered
    return _adapter_descriptor(tp)


def _unwrap_optional(tp: Any) -> Any:
    if get_origin(tp) not in (Union, types.UnionType):
        return None
    args = get_args(tp)
    present = tuple(arg for arg in args if arg is not types.NoneType)
    if len(present) == len(args) or not present:
        return None
    if len(present) == 1:
        return present[0]
    return Union[present]


def _is_path_type(tp: Any) -> bool:
    base = get_args(tp)[0] if get_origin(tp) is Annotated else tp
    return isinstance(base, type) and issubclass(base, PurePath)


def _expand_home(text: str) -> str:
    if text.startswith("~"):
        with contextlib.suppress(RuntimeError):
            return str(Path(text).expanduser())
    return text


@functools.lru_cache(maxsize=None)
def _adapter_descriptor(tp: Any) -> Promptable:
    try:
        adapter = TypeAdapter(tp)
    except PydanticUserError as exc:
        raise UnsupportedType(f"Cannot prompt for {type_name(tp)}: {exc}") from exc

    name = type_name(tp)
    path_shaped = _is_path_type(tp)

    def _parse(text: str) -> Any:
        if path_shaped:
            text = _expand_home(text)
        try:
            return adapter.validate_python(text)
        except ValidationError as exc:
            errors = exc.errors()
            detail = errors[0]["msg"] if errors else str(exc)
            raise ParseRejected(f"Could not parse {text} as {name}: {detail}.") from exc

    return Promptable(name=name, parse=_parse, path_shaped=path_shaped)


def _annotate_bool(message: str, default: Any) -> str:
    if default is NO_DEFAULT:
        return f"{message} (y/n)"
    if default:
        return f"{message} (Y/n)"
    return f"{message} (y/N)"


@promptable(str, name="text")
def _parse_text(text: str) -> str:
    return text


@promptable(bool, annotator=_annotate_bool)
def _parse_bool(text: str) -> bool:
    lowered = text.lower()
    if lowered in TRUE_WORDS:
        return True
    if lowered in FALSE_WORDS:
        return False
    raise ParseRejected(f"Could not parse {text} as bool.")


@promptable(Path, path_shaped=True)
def _parse_path(text: str) -> Path:
    return Path(_expand_home(text))


for _tp in (int, float, Decimal, Fraction, IPv4Address, IPv6Address):
    register_promptable(_tp, Promptable(name=_tp.__name__, parse=_tp))
