"""structlog setup for ackgen: console output in dev, JSON lines in prod.

Every record carries the run context bound through ``log_context`` (cache
dir, SDK repo URL, service alias, resolved version), including records
emitted by ackgen modules through the stdlib ``logging`` API.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from pathlib import PurePath
from typing import Any

import structlog

from ackgen.config import Settings


def stringify_paths(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Render Path values as plain strings instead of their repr."""
    for key, value in event_dict.items():
        if isinstance(value, PurePath):
            event_dict[key] = str(value)
    return event_dict


def configure_logging(level: str, json_output: bool | None = None) -> None:
    """Configure logging with structlog.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR).
        json_output: Force JSON output. If None, JSON when APP_ENV is prod.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if json_output is None:
        json_output = Settings().app_env == "prod"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        stringify_paths,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # ackgen modules log through stdlib; route them through the same chain
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level)


def run_context(settings: Settings, **extra: object) -> dict[str, object]:
    """Context keys for one ackgen run; empty values are left out."""
    context: dict[str, object] = {
        "app_env": settings.app_env,
        "sdk_repo_url": settings.sdk_repo_url,
        "cache_dir": settings.cache_root(),
        **extra,
    }
    return {key: value for key, value in context.items() if value not in (None, "")}


@contextmanager
def log_context(**kwargs: object) -> Iterator[None]:
    """Bind *kwargs* for the duration of the block, skipping empty values."""
    bound = {key: value for key, value in kwargs.items() if value not in (None, "")}
    with structlog.contextvars.bound_contextvars(**bound):
        yield

