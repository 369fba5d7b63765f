"""Structured logging configuration for the workout tracker backend.

This module provides:
- JSON structured logging for production environments
- Colored console output for development
- Optional rotating file handler (10MB max, 5 backups)
- Redaction of passwords, tokens and credentials from messages and from
  the structured ``context`` extra
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from workout_tracker.core.config import Settings


REDACTED = "[REDACTED]"


class SensitiveDataFilter(logging.Filter):
    """Filter to prevent credentials from appearing in logs.

    Redacts ``key: value`` / ``key=value`` pairs in the message text and
    replaces the value of any sensitive key inside ``record.context``.

    Examples:
        >>> logger = logging.getLogger("workout_tracker")
        >>> logger.addFilter(SensitiveDataFilter())
        >>> logger.info("User password: secret123")
        # Logs: "User password: [REDACTED]"
    """

    SENSITIVE_PATTERNS: ClassVar[list[str]] = [
        "password",
        "passwd",
        "pwd",
        "secret",
        "token",
        "authorization",
        "bearer",
        "credential",
        "hashed_password",
    ]

    _MESSAGE_PATTERNS: ClassVar[list[tuple[str, re.Pattern[str]]]] = [
        (pattern, re.compile(rf"{pattern}[:=]\s*[\"']?[^\s\"',]+", re.IGNORECASE))
        for pattern in SENSITIVE_PATTERNS
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        """Redact sensitive data from the record. Always keeps the record."""
        record.msg = self._redact_text(str(record.msg))

        if record.args:
            record.args = tuple(
                self._redact_text(arg) if isinstance(arg, str) else arg
                for arg in record.args
            )

        context = getattr(record, "context", None)
        if isinstance(context, dict):
            record.context = self._redact_mapping(context)

        return True

    def _redact_text(self, text: str) -> str:
        for pattern, regex in self._MESSAGE_PATTERNS:
            text = regex.sub(f"{pattern}: {REDACTED}", text)
        return text

    def _redact_mapping(self, data: dict[str, Any]) -> dict[str, Any]:
        redacted: dict[str, Any] = {}
        for key, value in data.items():
            lowered = key.lower()
            if any(pattern in lowered for pattern in self.SENSITIVE_PATTERNS):
                redacted[key] = REDACTED
            elif isinstance(value, dict):
                redacted[key] = self._redact_mapping(value)
            else:
                redacted[key] = value
        return redacted


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Format:
        {
            "timestamp": "2025-01-12T10:30:45.123Z",
            "level": "INFO",
            "logger": "workout_tracker.services.workout_service",
            "message": "Workout created",
            "service": "Workout Tracker API",
            "context": {"workout_id": "...", "action": "create_workout"}
        }
    """

    def __init__(self, service_name: str, service_version: str) -> None:
        super().__init__()
        self.service_name = service_name
        self.service_version = service_version

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "version": self.service_version,
        }

        if hasattr(record, "context"):
            log_entry["context"] = record.context

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        if record.levelno >= logging.ERROR:
            log_entry["source"] = {
                "function": record.funcName,
                "line": record.lineno,
                "file": record.pathname,
            }

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class ColoredConsoleFormatter(logging.Formatter):
    """Colored, human-readable console formatter for development."""

    COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[41m",  # Red background
    }
    RESET: ClassVar[str] = "\033[0m"

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        log_color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{log_color}{record.levelname}{self.RESET}"

        if getattr(record, "context", None):
            record.msg = f"{record.msg} | Context: {json.dumps(record.context, default=str)}"

        return super().format(record)


def setup_logging(settings: Settings, enable_console: bool = True) -> logging.Logger:
    """Configure the root logger from application settings.

    Args:
        settings: Application settings (level, file, JSON format, filtering)
        enable_console: Attach a stdout handler

    Returns:
        Configured root logger instance

    Examples:
        >>> logger = setup_logging(Settings(LOG_LEVEL="INFO"))
        >>> logger.info("Application started", extra={"context": {"port": 8000}})
    """
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(level)
    logger.handlers.clear()

    handlers: list[logging.Handler] = []

    if settings.LOG_FILE:
        log_file_path = Path(settings.LOG_FILE)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=str(log_file_path),
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        if settings.LOG_JSON_FORMAT:
            file_handler.setFormatter(
                JSONFormatter(settings.PROJECT_NAME, settings.VERSION)
            )
        else:
            file_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
        handlers.append(file_handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        if settings.DEBUG:
            console_handler.setFormatter(ColoredConsoleFormatter())
        else:
            console_handler.setFormatter(
                JSONFormatter(settings.PROJECT_NAME, settings.VERSION)
            )
        handlers.append(console_handler)

    sensitive_filter = SensitiveDataFilter() if settings.LOG_SENSITIVE_FILTER else None
    for handler in handlers:
        if sensitive_filter is not None:
            handler.addFilter(sensitive_filter)
        logger.addHandler(handler)

    logger.info(
        "Logging initialized",
        extra={
            "context": {
                "log_level": settings.LOG_LEVEL,
                "log_file": settings.LOG_FILE,
                "service": settings.PROJECT_NAME,
            }
        },
    )

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name.

    Examples:
        >>> from workout_tracker.core.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Processing request")
    """
    return logging.getLogger(name)


__all__ = [
    "ColoredConsoleFormatter",
    "JSONFormatter",
    "SensitiveDataFilter",
    "get_logger",
    "setup_logging",
]
