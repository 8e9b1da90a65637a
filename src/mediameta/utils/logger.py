"""Structured logging configuration for mediameta."""

import logging
import sys
from pathlib import Path
from typing import Optional

import structlog

from mediameta.config import LoggingConfig


def _renderer(config: LoggingConfig):
    if config.format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def _log_file_handler(output: str) -> Optional[logging.Handler]:
    try:
        Path(output).parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(output, mode="a", encoding="utf-8")
    except OSError as e:
        print(f"Warning: Could not create log file {output}: {e}", file=sys.stderr)
        return None


def setup_logging(config: LoggingConfig) -> None:
    """Configure structlog on top of stdlib logging.

    Records go to stderr, never stdout, so they don't interleave with the
    rendered reports. config.output adds a log file.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            _renderer(config),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.output:
        file_handler = _log_file_handler(config.output)
        if file_handler is not None:
            handlers.append(file_handler)

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, config.level.upper()),
        handlers=handlers,
        force=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Logger for a module; pass __name__."""
    return structlog.get_logger(name)
