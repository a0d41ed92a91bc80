"""Structlog configuration for bgcheck."""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from bgcheck.config import CheckerConfig, LogFormat

SERVICE_NAME = "bgcheck"


def add_service(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Tag every event with the emitting service."""
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def resolve_level(config: CheckerConfig) -> int:
    """Map the configured level name to a stdlib level, INFO when unknown."""
    level = logging.getLevelName(config.log_level.upper())
    return level if isinstance(level, int) else logging.INFO


def build_processors(config: CheckerConfig, stream=None) -> list[Processor]:
    """
    Processor chain for the configured format.

    JSON lines carry formatted tracebacks; the console renderer prints
    them itself and only colors output when the stream is a terminal.
    """
    stream = stream or sys.stderr
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if config.log_format == LogFormat.JSON:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors += [
            structlog.dev.set_exc_info,
            structlog.dev.ConsoleRenderer(colors=stream.isatty()),
        ]
    return processors


def configure_logging(config: CheckerConfig | None = None) -> None:
    """
    Configure structlog for lookups.

    Output goes to stderr so JSON the CLI prints on stdout stays parseable.
    Safe to call once per Checker; the last call wins.

    Args:
        config: CheckerConfig instance, uses defaults if None
    """
    config = config or CheckerConfig()
    level = resolve_level(config)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    structlog.configure(
        processors=build_processors(config, sys.stderr),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Logger bound to a component name (``logger_name``) when given."""
    logger = structlog.get_logger()
    return logger.bind(logger_name=name) if name else logger


@contextmanager
def account_context(account_id: int) -> Iterator[None]:
    """Attach ``account_id`` to every event logged inside the block."""
    with structlog.contextvars.bound_contextvars(account_id=account_id):
        yield
