"""Logging setup for actionkit.

Library modules log through ``logging.getLogger(__name__)`` and never install
handlers. An application calls ``configure_logging`` once to pick JSON lines
or a console format for everything under the ``actionkit`` logger.

Dispatch records carry the action being run in ``record.action`` (passed as
``extra={"action": ...}``); both formatters print it when present.

Example:
    Basic usage::

        from actionkit.observability.logging import configure_logging, log_context

        configure_logging(level="DEBUG", json_format=True)

        with log_context(request_id="abc-123"):
            api.invoke(GetUser("octocat"))  # dispatch records include request_id
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import IO, Any

ROOT_LOGGER = "actionkit"

_bound_fields: ContextVar[Mapping[str, Any]] = ContextVar("actionkit_log_context", default={})


def _action_of(record: logging.LogRecord) -> str | None:
    action = getattr(record, "action", None)
    return None if action is None else str(action)


class StructuredFormatter(logging.Formatter):
    """One JSON object per record.

    Keys: ``timestamp``, ``level``, ``logger``, ``message``, then ``action``,
    ``context``, ``location`` and ``exception`` when they apply. Static
    ``extra_fields`` never overwrite those keys.
    """

    def __init__(
        self,
        include_location: bool = False,
        extra_fields: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__()
        self.include_location = include_location
        self.extra_fields = dict(extra_fields or {})

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }

        action = _action_of(record)
        if action is not None:
            payload["action"] = action

        bound = _bound_fields.get()
        if bound:
            payload["context"] = dict(bound)

        if self.include_location:
            payload["location"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc, _ = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc) if exc is not None else None,
                "traceback": self.formatException(record.exc_info),
            }

        for key, value in self.extra_fields.items():
            payload.setdefault(key, value)

        return json.dumps(payload, default=str, ensure_ascii=False)


class HumanReadableFormatter(logging.Formatter):
    """Single-line console output, coloured by level on a terminal."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True, stream: IO[str] | None = None) -> None:
        super().__init__()
        self.use_colors = use_colors and _is_color_terminal(stream or sys.stderr)

    def format(self, record: logging.LogRecord) -> str:
        when = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]
        level = f"{record.levelname:<8}"
        if self.use_colors:
            level = f"{self.LEVEL_COLORS.get(record.levelname, '')}{level}{self.RESET}"

        parts = [f"{when} {level} [{record.name}] {record.getMessage()}"]

        action = _action_of(record)
        if action is not None:
            parts.append(f"action={action}")

        bound = _bound_fields.get()
        if bound:
            parts.append(f"context={json.dumps(dict(bound), default=str)}")

        line = " | ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def _is_color_terminal(stream: IO[str]) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def configure_logging(
    level: int | str = logging.INFO,
    json_format: bool = False,
    include_location: bool = False,
    extra_fields: Mapping[str, Any] | None = None,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Install a single handler on the ``actionkit`` logger.

    Calling it again replaces the previous handler. Records do not propagate
    to the root logger afterwards.

    Args:
        level: Minimum level, as a number or a name such as ``"debug"``.
        json_format: Emit JSON lines instead of console text.
        include_location: Add file/line/function to JSON records.
        extra_fields: Static fields merged into every JSON record.
        stream: Destination stream; defaults to ``sys.stderr``.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    target = stream or sys.stderr
    formatter: logging.Formatter
    if json_format:
        formatter = StructuredFormatter(include_location=include_location, extra_fields=extra_fields)
    else:
        formatter = HumanReadableFormatter(stream=target)

    handler = logging.StreamHandler(target)
    handler.setFormatter(formatter)

    logger = logging.getLogger(ROOT_LOGGER)
    for old in list(logger.handlers):
        logger.removeHandler(old)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Bind ``fields`` to every record logged inside the block; blocks nest."""
    token = _bound_fields.set({**_bound_fields.get(), **fields})
    try:
        yield
    finally:
        _bound_fields.reset(token)


def get_context() -> dict[str, Any]:
    """Fields currently bound by enclosing ``log_context`` blocks."""
    return dict(_bound_fields.get())
