import logging
import logging.handlers
import os
import re
import sys
import uuid
from typing import Any, Dict

import structlog

from imgconvert.core.constants import (
    DEFAULT_LOG_BACKUP_COUNT,
    DEFAULT_LOG_DIR,
    DEFAULT_MAX_LOG_SIZE_MB,
)

_SENSITIVE_KEYS = {
    "file_path",
    "filename",
    "file_name",
    "path",
    "input_path",
    "output_path",
    "directory",
    "exif",
    "image_data",
}

_PATH_PATTERN = re.compile(r"^(/|[A-Za-z]:\\|\\\\|\./|\.\./)")
_FILENAME_PATTERN = re.compile(
    r"\.(jpg|jpeg|png|gif|bmp|tif|tiff|webp)$", re.IGNORECASE
)


def filter_sensitive_data(_, __, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Mask file paths and names in log events."""

    def _recursive_filter(obj: Any, depth: int = 0) -> Any:
        if depth > 10:
            return "***DEPTH_LIMIT***"

        if isinstance(obj, dict):
            filtered = {}
            for key, value in obj.items():
                key_lower = str(key).lower()
                if key_lower in _SENSITIVE_KEYS or any(
                    key_lower.endswith(f"_{sensitive}") for sensitive in _SENSITIVE_KEYS
                ):
                    filtered[key] = "***REDACTED***"
                else:
                    filtered[key] = _recursive_filter(value, depth + 1)
            return filtered
        elif isinstance(obj, list):
            return [_recursive_filter(item, depth + 1) for item in obj]
        elif isinstance(obj, str):
            if _PATH_PATTERN.match(obj):
                return "***PATH_REDACTED***"
            if _FILENAME_PATTERN.search(obj):
                return "***FILENAME_REDACTED***"
        return obj

    return _recursive_filter(event_dict)


def add_correlation_id(_, __, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add correlation ID to log entries."""
    if "correlation_id" not in event_dict:
        event_dict["correlation_id"] = structlog.contextvars.get_contextvars().get(
            "correlation_id", str(uuid.uuid4())
        )
    return event_dict


def setup_logging(
    log_level: str = "WARNING",
    json_logs: bool = False,
    enable_file_logging: bool = False,
    log_dir: str = DEFAULT_LOG_DIR,
    max_log_size_mb: int = DEFAULT_MAX_LOG_SIZE_MB,
    backup_count: int = DEFAULT_LOG_BACKUP_COUNT,
) -> None:
    """Configure structured logging.

    Console output always goes to stderr so stdout stays reserved for the
    converter's status lines.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Use JSON format for logs
        enable_file_logging: Also log to a rotating file in ``log_dir``
        log_dir: Directory for log files
        max_log_size_mb: Maximum size of each log file in MB
        backup_count: Number of backup files to keep
    """
    level = getattr(logging, log_level.upper())
    handlers = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    handlers.append(console_handler)

    if enable_file_logging:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=os.path.join(log_dir, "imgconvert.log"),
            maxBytes=max_log_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        handlers.append(file_handler)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        add_correlation_id,
        filter_sensitive_data,
    ]

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        handlers=handlers,
        level=level,
        force=True,
    )

    logging.getLogger("PIL").setLevel(logging.WARNING)


class LoggingContext:
    """Context manager for adding context to logs."""

    def __init__(self, **kwargs) -> None:
        self.context = kwargs
        self.tokens = None

    def __enter__(self) -> "LoggingContext":
        self.tokens = structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        structlog.contextvars.reset_contextvars(**self.tokens)
