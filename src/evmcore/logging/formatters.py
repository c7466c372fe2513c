"""Log formatters for evmcore.

This module provides JSON and text formatters for records emitted by the
virtual machine.
"""

import json
import logging
import time
from typing import Any, Dict, Optional

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RESERVED_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """JSON log formatter."""

    def __init__(
        self,
        include_timestamp: bool = True,
        include_logger: bool = True,
        include_extra: bool = True,
        timestamp_format: str = "iso",
        indent: Optional[int] = None,
    ):
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_logger = include_logger
        self.include_extra = include_extra
        self.timestamp_format = timestamp_format
        self.indent = indent

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        data: Dict[str, Any] = {}

        if self.include_timestamp:
            data["timestamp"] = self._format_timestamp(record.created)

        data["level"] = record.levelname.lower()

        if self.include_logger:
            data["logger"] = record.name

        data["message"] = record.getMessage()

        if record.exc_info and record.exc_info[0]:
            data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        if self.include_extra:
            extra = {
                key: value
                for key, value in vars(record).items()
                if key not in _RESERVED_ATTRS
            }
            if extra:
                data["extra"] = extra

        return json.dumps(data, indent=self.indent, default=str)

    def _format_timestamp(self, timestamp: float) -> str:
        """Format timestamp."""
        if self.timestamp_format == "iso":
            return (
                time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(timestamp))
                + f".{int((timestamp % 1) * 1000000):06d}Z"
            )
        elif self.timestamp_format == "unix":
            return str(timestamp)
        else:
            return time.strftime(self.timestamp_format, time.gmtime(timestamp))


class TextFormatter(logging.Formatter):
    """Text log formatter."""

    def __init__(
        self,
        include_timestamp: bool = True,
        include_logger: bool = True,
        timestamp_format: str = "%Y-%m-%d %H:%M:%S",
    ):
        parts = []
        if include_timestamp:
            parts.append("%(asctime)s")
        parts.append("[%(levelname)s]")
        if include_logger:
            parts.append("%(name)s:")
        parts.append("%(message)s")

        super().__init__(" ".join(parts), datefmt=timestamp_format)
