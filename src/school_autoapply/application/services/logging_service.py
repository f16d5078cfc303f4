"""Logging service implementation."""

import functools
import time
from collections import deque
from datetime import datetime
from typing import Deque, Dict, List, Optional

from ..interfaces import ILoggingService

MAX_BUFFERED_LINES = 500


class LoggingService(ILoggingService):
    """
    Logging service with timestamps, levels and run-scoped children.

    Every emitted line is printed and kept in a bounded buffer so a run can
    attach its own log lines to the result it returns.
    """

    _level_hierarchy = {"DEBUG": 0, "INFO": 1, "WARNING": 2, "ERROR": 3}
    _level_icons = {"DEBUG": "🔍", "INFO": "ℹ️", "WARNING": "⚠️", "ERROR": "❌"}

    def __init__(self, log_level: str = "INFO", context: Optional[Dict[str, str]] = None):
        """
        Initialize logging service.

        Args:
            log_level: Minimum log level to output (DEBUG, INFO, WARNING, ERROR)
            context: Key/value tags prefixed to every line
        """
        self.log_level = log_level.upper()
        self.context = dict(context or {})
        self._lines: Deque[str] = deque(maxlen=MAX_BUFFERED_LINES)

    def log(self, level: str, message: str) -> None:
        """Log a message at the specified level."""
        level = level.upper()

        if self._level_hierarchy.get(level, 1) < self._level_hierarchy.get(self.log_level, 1):
            return

        timestamp = datetime.now().strftime("%H:%M:%S")
        icon = self._level_icons.get(level, "📝")
        prefix = ""
        if self.context:
            prefix = "[" + " ".join(f"{key}={value}" for key, value in self.context.items()) + "] "

        formatted_message = f"[{timestamp}] {icon} {level}: {prefix}{message}"
        self._lines.append(f"{level}: {message}")
        print(formatted_message)

    def debug(self, message: str) -> None:
        """Log debug message."""
        self.log("DEBUG", message)

    def info(self, message: str) -> None:
        """Log info message."""
        self.log("INFO", message)

    def warning(self, message: str) -> None:
        """Log warning message."""
        self.log("WARNING", message)

    def error(self, message: str) -> None:
        """Log error message."""
        self.log("ERROR", message)

    def time_operation(self, operation_name: str):
        """Context manager for timing operations."""
        return TimingContext(self, operation_name)

    def child(self, **context: str) -> "LoggingService":
        """Create a logger with extra context tags and its own line buffer."""
        return LoggingService(log_level=self.log_level, context={**self.context, **context})

    @property
    def lines(self) -> List[str]:
        """Lines emitted by this logger, oldest first."""
        return list(self._lines)


class TimingContext:
    """Context manager for timing operations."""

    def __init__(self, logging_service: ILoggingService, operation_name: str):
        """
        Initialize timing context.

        Args:
            logging_service: Service for logging results
            operation_name: Name of operation being timed
        """
        self.logger = logging_service
        self.operation_name = operation_name
        self.start_time = None

    def __enter__(self):
        """Start timing."""
        self.start_time = time.time()
        self.logger.debug(f"⏱️ Starting {self.operation_name}...")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """End timing and log result."""
        if self.start_time:
            execution_time = time.time() - self.start_time

            if exc_type is None:
                self.logger.debug(f"✅ {self.operation_name} completed in {execution_time:.3f}s")
            else:
                self.logger.error(f"❌ {self.operation_name} failed after {execution_time:.3f}s: {exc_val}")


def timing_decorator(operation_name: str):
    """Decorator to time coroutine methods and log results."""

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs):
            logger = getattr(self, "logger", None) or getattr(self, "_logger", None)

            if not logger:
                return await func(self, *args, **kwargs)

            start_time = time.time()
            try:
                result = await func(self, *args, **kwargs)
                execution_time = time.time() - start_time
                logger.debug(f"✅ {operation_name} completed in {execution_time:.3f}s")
                return result
            except Exception as e:
                execution_time = time.time() - start_time
                logger.error(f"❌ {operation_name} failed after {execution_time:.3f}s: {e}")
                raise

        return wrapper

    return decorator
