"""Structured logging module with JSON output support."""

import json
import sys
import traceback
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from src.utils.config import config

LEVEL_ORDER = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40, "CRITICAL": 50}


class StructuredLogger:
    """Logger that writes one JSON object per line to stderr, keeping stdout for data."""

    def __init__(self, component: str, file_path: str | None = None, level: str = "INFO"):
        """
        Initialize the structured logger.

        Args:
            component: Name of the component using this logger
            file_path: Optional path to append logs to
            level: Minimum level written (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        self.component = component
        self.file_path = file_path
        self.level = level.upper()
        if self.level not in LEVEL_ORDER:
            raise ValueError(f"Unknown log level: {level}")
        if file_path:
            Path(file_path).parent.mkdir(parents=True, exist_ok=True)

    def is_enabled_for(self, level: str) -> bool:
        """Return True if entries at `level` would be written."""
        return LEVEL_ORDER.get(level.upper(), LEVEL_ORDER["INFO"]) >= LEVEL_ORDER[self.level]

    def _format_log_entry(
        self,
        level: str,
        message: str,
        context: dict[str, Any] | None = None,
        exception: dict[str, Any] | None = None,
    ) -> str:
        entry = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": level,
            "component": self.component,
            "message": message,
        }

        if context:
            entry["context"] = context

        if exception:
            entry["exception"] = exception

        # Context may carry datetimes or other non-JSON values
        return json.dumps(entry, default=str)

    def _write_log(self, log_entry: str) -> None:
        try:
            print(log_entry, file=sys.stderr)
            if self.file_path:
                with open(self.file_path, "a", encoding="utf-8") as f:
                    f.write(log_entry + "\n")
        except OSError as e:
            print(f"Failed to write log: {e}", file=sys.stderr)

    @staticmethod
    def _describe_exception(exception: BaseException | None) -> dict[str, Any] | None:
        if exception is None:
            return None
        return {
            "type": type(exception).__name__,
            "message": str(exception),
            "stack_trace": "".join(
                traceback.format_exception(type(exception), exception, exception.__traceback__)
            ),
        }

    def _emit(
        self,
        level: str,
        message: str,
        context: dict[str, Any] | None = None,
        exception: BaseException | None = None,
    ) -> None:
        if not self.is_enabled_for(level):
            return
        log_entry = self._format_log_entry(
            level, message, context, self._describe_exception(exception)
        )
        self._write_log(log_entry)

    def debug(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Log a debug message."""
        self._emit("DEBUG", message, context)

    def info(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Log an info message."""
        self._emit("INFO", message, context)

    def warning(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Log a warning message."""
        self._emit("WARNING", message, context)

    def error(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        exception: BaseException | None = None,
    ) -> None:
        """Log an error message with optional exception details."""
        self._emit("ERROR", message, context, exception)

    def critical(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        exception: BaseException | None = None,
    ) -> None:
        """Log a critical message with optional exception details."""
        self._emit("CRITICAL", message, context, exception)

    def log(
        self,
        level: str,
        message: str,
        context: dict[str, Any] | None = None,
        exception: BaseException | None = None,
    ) -> None:
        """
        Log a message with specified level.

        Unknown levels are logged as INFO.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            message: Log message
            context: Optional context fields
            exception: Optional exception
        """
        level = level.upper()
        if level not in LEVEL_ORDER:
            level = "INFO"
        self._emit(level, message, context, exception)


def get_logger(component: str) -> StructuredLogger:
    """Build a logger for `component` using the configured level and file."""
    return StructuredLogger(
        component,
        file_path=config.logging.file_path,
        level=config.logging.level if config.logging.level in LEVEL_ORDER else "INFO",
    )
