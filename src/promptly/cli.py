"""Command line entry point: ask one question and print the answer.

    $ age=$(promptly "Enter your age" --type uint)
    $ promptly "Send emails?" --type bool --default yes
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from decimal import Decimal
from ipaddress import IPv4Address, IPv6Address
from pathlib import Path
from typing import Any

from pydantic import AnyUrl, IPvAnyAddress, NonNegativeInt

from promptly import api
from promptly.engine import PrompterFactory
from promptly.config import parse_level
from promptly.errors import IoUnavailable, ParseRejected, UserCancelled
from promptly.log_utils import build_log_config, configure_logging
from promptly.registry import descriptor_for

logger = logging.getLogger(__name__)

TYPE_CHOICES: dict[str, Any] = {
    "str": str,
    "int": int,
    "uint": NonNegativeInt,
    "float": float,
    "decimal": Decimal,
    "bool": bool,
    "path": Path,
    "ipv4": IPv4Address,
    "ipv6": IPv6Address,
    "ip": IPvAnyAddress,
    "url": AnyUrl,
}

EXIT_CANCELLED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="promptly", description="Prompt for a typed value on the terminal.")
    parser.add_argument("message", help="Question shown to the user")
    parser.add_argument("--type", dest="type_name", choices=sorted(TYPE_CHOICES), default="str")
    parser.add_argument("--default", help="Value returned for empty input (shown in the prompt)")
    parser.add_argument("--optional", action="store_true", help="Print nothing for empty input instead of re-prompting")
    parser.add_argument("--log-level", help="Override PROMPTLY_LOG_LEVEL")
    return parser


def _format_answer(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def run(argv: list[str] | None = None, *, prompter_factory: PrompterFactory | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    log_config = build_log_config(log_file_name="promptly.log", default_level=logging.WARNING)
    if args.log_level:
        log_config = replace(log_config, level=parse_level(args.log_level, log_config.level))
    configure_logging(log_config)

    target = TYPE_CHOICES[args.type_name]
    default: Any = None
    if args.default is not None:
        try:
            default = descriptor_for(target).attempt_parse(args.default.strip())
        except ParseRejected as exc:
            parser.error(f"invalid --default: {exc}")

    try:
        if args.default is not None:
            value = api.prompt_default(args.message, default, target, prompter_factory=prompter_factory)
        elif args.optional:
            value = api.prompt_opt(args.message, target, prompter_factory=prompter_factory)
        else:
            value = api.prompt(args.message, target, prompter_factory=prompter_factory)
    except UserCancelled:
        print("[cancelled]", file=sys.stderr)
        return EXIT_CANCELLED
    except IoUnavailable as exc:
        logger.error("Prompt failed: %s", exc)
        print(f"[terminal unavailable: {exc}]", file=sys.stderr)
        return 1

    if value is not None:
        print(_format_answer(value))
    return 0


def main() -> None:
    raise SystemExit(run())
