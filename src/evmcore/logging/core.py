"""Core logging configuration for evmcore.

This module defines the logging configuration and wires it onto the standard
library logging tree under the ``evmcore`` logger.
"""

import logging
import sys
from enum import Enum
from typing import IO, Optional, Tuple

from ..errors import ConfigurationError
from .formatters import JSONFormatter, TextFormatter


class LogLevel(Enum):
    """Log levels."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    def to_stdlib(self) -> int:
        """Numeric level understood by the logging module."""
        return getattr(logging, self.name)


class LogConfig:
    """Log configuration."""

    def __init__(
        self,
        name: str = "evmcore",
        level: LogLevel = LogLevel.INFO,
        format_type: str = "text",
        stream: Optional[IO[str]] = None,
        propagate: bool = False,
    ):
        if format_type not in ("text", "json"):
            raise ConfigurationError(
                f"Unknown log format: {format_type}",
                config_key="format_type",
                config_value=format_type,
            )

        self.name = name
        self.level = level
        self.format_type = format_type
        self.stream = stream
        self.propagate = propagate


# (logger, handler, previous level, previous propagate) installed by setup_logging
_installed: Optional[Tuple[logging.Logger, logging.Handler, int, bool]] = None


def setup_logging(config: Optional[LogConfig] = None) -> logging.Logger:
    """Install a single handler on the package logger."""
    global _installed
    config = config or LogConfig()

    shutdown_logging()

    handler = logging.StreamHandler(config.stream or sys.stderr)
    if config.format_type == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter())

    logger = logging.getLogger(config.name)
    _installed = (logger, handler, logger.level, logger.propagate)

    logger.setLevel(config.level.to_stdlib())
    logger.propagate = config.propagate
    logger.addHandler(handler)
    return logger


def get_logger(name: str = "evmcore") -> logging.Logger:
    """Get logger instance."""
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """Remove the handler installed by setup_logging and restore the logger."""
    global _installed
    if _installed is None:
        return

    logger, handler, level, propagate = _installed
    logger.removeHandler(handler)
    handler.close()
    logger.setLevel(level)
    logger.propagate = propagate
    _installed = None
