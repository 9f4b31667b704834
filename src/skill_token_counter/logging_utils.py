"""Shared logging helpers that default to structured logfire logging."""

from __future__ import annotations

import sys
from string import Formatter
from typing import Any, Literal, Protocol

import logfire


class StructuredLogger(Protocol):
    """Protocol for loggers supporting logfire-style structured methods."""

    def info(self, message: str, /, *args: Any, **kwargs: Any) -> Any:
        ...

    def debug(self, message: str, /, *args: Any, **kwargs: Any) -> Any:
        ...

    def warning(self, message: str, /, *args: Any, **kwargs: Any) -> Any:
        ...

    def error(self, message: str, /, *args: Any, **kwargs: Any) -> Any:
        ...


def get_structured_logger(preferred: StructuredLogger | None = None) -> StructuredLogger:
    """Return the preferred logger or fall back to logfire."""

    if preferred is not None:
        return preferred
    return logfire  # type: ignore[return-value]


def render_message(template: str, data: dict[str, Any]) -> str:
    """Fill logfire-style ``{field}`` placeholders and append unused fields.

    Used for loggers that cannot take structured kwargs, so the text still
    carries every value. Unknown placeholders are left in place.
    """

    used: set[str] = set()
    pieces: list[str] = []
    try:
        for literal, field_name, _, _ in Formatter().parse(template):
            pieces.append(literal)
            if field_name is None:
                continue
            if field_name in data:
                used.add(field_name)
                pieces.append(str(data[field_name]))
            else:
                pieces.append("{" + field_name + "}")
    except ValueError:
        pieces, used = [template], set()

    message = "".join(pieces)
    extra = {key: value for key, value in data.items() if key not in used}
    if extra:
        formatted = ", ".join(f"{key}={value!r}" for key, value in extra.items())
        message = f"{message} | {formatted}"
    return message


def log_structured(
    logger: StructuredLogger,
    level: Literal["debug", "info", "warning", "error"],
    message: str,
    **data: Any,
) -> None:
    """Call ``logger.<level>`` with a logfire message template and its fields.

    Loggers that reject keyword arguments get the rendered text instead.
    """

    method = getattr(logger, level, None)
    if not callable(method):  # pragma: no cover - defensive guard
        return

    try:
        method(message, **data)
    except TypeError:
        method(render_message(message, data))


def configure_logging(*, quiet: bool = False) -> None:
    """Configure logfire for command-line use.

    Console output goes to stderr so stdout stays reserved for the report.
    ``quiet`` disables console output entirely (machine-readable mode).
    """

    console: logfire.ConsoleOptions | Literal[False]
    if quiet:
        console = False
    else:
        console = logfire.ConsoleOptions(
            output=sys.stderr,
            include_timestamps=False,
            min_log_level="warn",
        )
    logfire.configure(
        send_to_logfire="if-token-present",
        console=console,
        service_name="skill-token-counter",
    )


__all__ = [
    "StructuredLogger",
    "configure_logging",
    "get_structured_logger",
    "log_structured",
    "render_message",
]
