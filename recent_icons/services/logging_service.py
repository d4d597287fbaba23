"""
Logging service implementation for Recent Icons.
Wraps the standard library logger with key=value context formatting.
"""

from __future__ import annotations
from typing import Optional, Dict, Any, List
from pathlib import Path
import logging
import sys
from datetime import datetime
from enum import Enum

from .interfaces import ILogger


CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'


class LogLevel(Enum):
    """Log level enumeration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


def format_context(context: Dict[str, Any]) -> str:
    """Render keyword context as a ``[k=v, ...]`` suffix."""
    if not context:
        return ""
    parts = [f"{key}={value}" for key, value in context.items()]
    return f" [{', '.join(parts)}]"


class LoggingService(ILogger):
    """Logger backed by a named ``logging.Logger``."""

    def __init__(self, name: str = "RecentIcons", log_file: Optional[Path] = None,
                 console_level: LogLevel = LogLevel.INFO, file_level: LogLevel = LogLevel.DEBUG):
        self._name = name
        self._log_file = log_file
        self._console_level = console_level
        self._file_level = file_level

        self._logger = logging.getLogger(name)
        self._logger.setLevel(logging.DEBUG)
        self._logger.handlers.clear()

        self._console_handler = logging.StreamHandler(sys.stdout)
        self._console_handler.setLevel(getattr(logging, console_level.value))
        self._console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
        self._logger.addHandler(self._console_handler)

        if log_file:
            self.add_file_handler(log_file, file_level)

    @property
    def name(self) -> str:
        return self._name

    def debug(self, message: str, **kwargs) -> None:
        self._logger.debug(f"{message}{format_context(kwargs)}")

    def info(self, message: str, **kwargs) -> None:
        self._logger.info(f"{message}{format_context(kwargs)}")

    def warning(self, message: str, **kwargs) -> None:
        self._logger.warning(f"{message}{format_context(kwargs)}")

    def error(self, message: str, exception: Optional[Exception] = None, **kwargs) -> None:
        full_message = f"{message}{format_context(kwargs)}"
        if exception:
            self._logger.error(full_message, exc_info=exception)
        else:
            self._logger.error(full_message)

    def set_console_level(self, level: LogLevel) -> None:
        """Change the console logging level."""
        self._console_level = level
        self._console_handler.setLevel(getattr(logging, level.value))

    def add_file_handler(self, log_file: Path, level: LogLevel = LogLevel.DEBUG) -> bool:
        """Add a file handler; returns False if the file cannot be opened."""
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
        except OSError as e:
            self.error(f"Failed to add file handler for {log_file}", exception=e)
            return False

        file_handler.setLevel(getattr(logging, level.value))
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        self._logger.addHandler(file_handler)
        return True

    def log_system_info(self, info: Dict[str, Any]) -> None:
        """Log system information."""
        self.info("System info", **info)


class NullLogger(ILogger):
    """Null logger implementation for when logging is disabled."""

    def debug(self, message: str, **kwargs) -> None:
        pass

    def info(self, message: str, **kwargs) -> None:
        pass

    def warning(self, message: str, **kwargs) -> None:
        pass

    def error(self, message: str, exception: Optional[Exception] = None, **kwargs) -> None:
        pass


class MemoryLogger(ILogger):
    """In-memory logger for testing purposes."""

    def __init__(self, max_entries: int = 1000):
        self._max_entries = max_entries
        self._entries: List[Dict[str, Any]] = []

    def debug(self, message: str, **kwargs) -> None:
        self._add_entry("DEBUG", message, kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._add_entry("INFO", message, kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._add_entry("WARNING", message, kwargs)

    def error(self, message: str, exception: Optional[Exception] = None, **kwargs) -> None:
        entry_kwargs = dict(kwargs)
        if exception:
            entry_kwargs['exception'] = str(exception)
        self._add_entry("ERROR", message, entry_kwargs)

    def _add_entry(self, level: str, message: str, kwargs: Dict[str, Any]) -> None:
        self._entries.append({
            'timestamp': datetime.now(),
            'level': level,
            'message': message,
            'kwargs': kwargs,
        })
        if len(self._entries) > self._max_entries:
            self._entries = self._entries[-self._max_entries:]

    def get_entries(self, level: Optional[str] = None) -> List[Dict[str, Any]]:
        """Get log entries, optionally filtered by level."""
        if level:
            return [e for e in self._entries if e['level'] == level]
        return self._entries.copy()

    def messages(self, level: Optional[str] = None) -> List[str]:
        """Messages only, in logging order."""
        return [e['message'] for e in self.get_entries(level)]

    def clear(self) -> None:
        self._entries.clear()
