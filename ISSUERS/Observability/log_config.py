"""Structured logging with structlog."""

import logging
import sys

import structlog

__all__ = ["configure_logging", "LOG_LEVELS", "LOG_FORMATS"]

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
LOG_FORMATS = ("console", "json")


def configure_logging(level: str = "INFO", fmt: str = "console") -> None:
	"""Configure structlog for the pipeline; output goes to stderr."""
	level = level.upper()
	if level not in LOG_LEVELS:
		raise ValueError(f"log level must be one of {list(LOG_LEVELS)}")
	if fmt not in LOG_FORMATS:
		raise ValueError(f"log format must be one of {list(LOG_FORMATS)}")

	renderer = structlog.processors.JSONRenderer() if fmt == "json" else structlog.dev.ConsoleRenderer()

	structlog.configure(
		processors=[
			structlog.contextvars.merge_contextvars,
			structlog.stdlib.add_log_level,
			structlog.processors.TimeStamper(fmt="iso"),
			renderer,
		],
		wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level)),
		logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
	)
