"""evmcore Logging System.

This package configures the standard library logging tree for evmcore with
text or JSON output.
"""

from .core import LogConfig, LogLevel, get_logger, setup_logging, shutdown_logging
from .formatters import JSONFormatter, TextFormatter

__all__ = [
    # Core
    "LogLevel",
    "LogConfig",
    "get_logger",
    "setup_logging",
    "shutdown_logging",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
]
