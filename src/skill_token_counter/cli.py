"""Command-line entry point for skill-token-counter."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console

from .config import CounterSettings
from .exceptions import SkillTokenCounterError
from .git import GitRepository
from .logging_utils import configure_logging
from .render import render_report, report_to_payload
from .runner import count_skill_tokens
from .tokens import ApproximateTokenCounter, GeminiTokenCounter, TokenCounter


def parse_args(
    argv: Sequence[str] | None = None,
    settings: CounterSettings | None = None,
) -> argparse.Namespace:
    settings = settings or CounterSettings()
    parser = argparse.ArgumentParser(
        prog="skill-token-counter",
        description="Count the context tokens used by skills, optionally against a git ref.",
    )
    parser.add_argument(
        "target",
        nargs="?",
        type=Path,
        default=settings.default_target,
        help=f"Skill directory or directory of skills (default: {settings.default_target}).",
    )
    parser.add_argument(
        "--compare",
        nargs="?",
        const=settings.default_compare_ref,
        default=None,
        metavar="REF",
        help=f"Compare against a git ref (default when given without value: {settings.default_compare_ref}).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON and suppress all other output.",
    )
    parser.add_argument(
        "--model",
        default=None,
        help=f"Model used for token counting (default: {settings.model_name}).",
    )
    parser.add_argument(
        "--shallow",
        action="store_true",
        help="Only look for skills in immediate subdirectories of the target.",
    )
    parser.add_argument(
        "--approximate",
        action="store_true",
        help="Estimate tokens locally (len // 4) instead of calling the API.",
    )
    return parser.parse_args(argv)


def build_counter(args: argparse.Namespace, settings: CounterSettings) -> TokenCounter:
    if args.approximate:
        return ApproximateTokenCounter()
    if args.model:
        settings = settings.model_copy(update={"model_name": args.model})
    return GeminiTokenCounter.from_settings(settings)


async def _run(
    args: argparse.Namespace,
    settings: CounterSettings,
    *,
    console: Console,
) -> int:
    counter = build_counter(args, settings)
    repository = await GitRepository.discover() if args.compare else None

    report = await count_skill_tokens(
        args.target,
        counter,
        compare_ref=args.compare,
        repository=repository,
        recursive=not args.shallow,
        console=None if args.json else console,
    )

    if args.json:
        console.out(json.dumps(report_to_payload(report), indent=2), highlight=False)
    else:
        render_report(report, console)
    return 0


def main(
    argv: Sequence[str] | None = None,
    *,
    settings: CounterSettings | None = None,
    console: Console | None = None,
    error_console: Console | None = None,
) -> int:
    settings = settings or CounterSettings.from_env()
    args = parse_args(argv, settings)
    configure_logging(quiet=args.json)

    console = console or Console()
    error_console = error_console or Console(stderr=True)
    try:
        return asyncio.run(_run(args, settings, console=console))
    except SkillTokenCounterError as exc:
        error_console.print(f"Error: {exc}", markup=False, highlight=False)
        return 1


def run() -> None:
    sys.exit(main())


__all__ = ["build_counter", "main", "parse_args", "run"]
