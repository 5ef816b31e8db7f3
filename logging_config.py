"""
Centralized logging configuration for PrintRelay.

This module provides thread-aware logging with automatic thread context
in all log messages. Every HTTP request runs on its own thread and temp
file cleanup runs on timer threads, so the thread name is the quickest way
to follow a single job through the log.

Features:
    - Automatic thread name and ID in all log messages
    - Console output (always enabled)
    - Rotating file logs (optional, for production)
    - Separate error log for ERROR/CRITICAL messages
    - Structured helpers for print and server lifecycle events

Log Format:
    2025-12-03 10:15:30 [INFO    ] [MainThread] print_relay.app - Starting PrintRelay
    2025-12-03 10:15:31 [INFO    ] [Listener-9999] print_relay.server - Print server started | port=9999
    2025-12-03 10:15:32 [INFO    ] [Thread-3] print_relay.events - Print request received | type=pdf ...

Usage:
    # At application startup
    from logging_config import setup_logging, get_logger

    setup_logging(log_level=logging.INFO, enable_file_logging=True)

    # In modules
    logger = get_logger(__name__)
    logger.info("This message includes thread context automatically")
"""

import logging
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional


APP_LOGGER_NAME = "print_relay"

LOG_FORMAT = "%(asctime)s [%(levelname)-8s] [%(thread_name)s] %(name)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Rotation: 10 MB per file, 5 backups
LOG_MAX_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5


# =============================================================================
# THREAD CONTEXT FILTER
# =============================================================================

class ThreadContextFilter(logging.Filter):
    """
    Stamps each record with the emitting thread.

    Request threads, the listener and cleanup timers all log through the
    same loggers; thread_name is what tells their lines apart.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.thread_name = threading.current_thread().name
        record.thread_id = threading.get_ident()
        return True


# =============================================================================
# LOGGING SETUP
# =============================================================================

def _attach(
    logger: logging.Logger,
    handler: logging.Handler,
    level: int,
    formatter: logging.Formatter,
    thread_filter: logging.Filter,
) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(thread_filter)
    logger.addHandler(handler)


def _rotating_file(path: Path) -> RotatingFileHandler:
    return RotatingFileHandler(
        filename=path,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )


def setup_logging(
    app_name: str = APP_LOGGER_NAME,
    log_level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    enable_file_logging: bool = True,
) -> logging.Logger:
    """
    Configure the relay's logger tree.

    Handlers on the application logger:
        stdout            - always, at log_level
        print.log         - if enable_file_logging, at log_level
        print_error.log   - if enable_file_logging, ERROR and above

    Calling it again replaces the previous handlers.

    Args:
        app_name: Application logger name (default: "print_relay")
        log_level: Minimum level for stdout and print.log
        log_dir: Directory for the log files (default: ./storage/logs)
        enable_file_logging: Write the rotating log files

    Returns:
        The application logger
    """
    logger = logging.getLogger(app_name)
    logger.setLevel(log_level)
    # Our handlers only; records must not reach the root logger twice
    logger.propagate = False
    logger.handlers.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    thread_filter = ThreadContextFilter()

    _attach(logger, logging.StreamHandler(sys.stdout), log_level, formatter, thread_filter)

    if enable_file_logging:
        log_dir = Path(log_dir) if log_dir is not None else Path("storage") / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        app_log_file = log_dir / "print.log"
        _attach(logger, _rotating_file(app_log_file), log_level, formatter, thread_filter)
        _attach(logger, _rotating_file(log_dir / "print_error.log"), logging.ERROR, formatter, thread_filter)

        logger.info(f"File logging enabled: {app_log_file}")

    logger.info(f"Logging configured at level {logging.getLevelName(log_level)}")
    return logger


# =============================================================================
# LOGGER FACTORY FUNCTIONS
# =============================================================================

def get_logger(name: str) -> logging.Logger:
    """
    Get a child logger with the application namespace.

    Args:
        name: Module name (typically __name__)

    Example:
        get_logger("services.dispatcher")  # -> "print_relay.services.dispatcher"
    """
    if not name.startswith(APP_LOGGER_NAME):
        name = f"{APP_LOGGER_NAME}.{name}"

    return logging.getLogger(name)


# =============================================================================
# STRUCTURED EVENT HELPERS
# =============================================================================

_events_logger = get_logger("events")


def _fields(**fields: Any) -> str:
    return " ".join(f"{key}={value}" for key, value in fields.items())


def log_print_request(job_type: str, content_length: int, remote_addr: Optional[str]) -> None:
    """Log an incoming print request (content itself is never logged)."""
    _events_logger.info(
        "Print request received | "
        + _fields(type=job_type, content_length=content_length, remote_addr=remote_addr or "-")
    )


def log_print_success(printer: str) -> None:
    """Log a job handed to the OS; empty printer means the OS default."""
    _events_logger.info("Print job sent successfully | " + _fields(printer=printer or "<default>"))


def log_print_error(message: str, error: BaseException) -> None:
    _events_logger.error(f"{message} | error={error}")


def log_server_started(port: int) -> None:
    _events_logger.info("Print server started | " + _fields(port=port))


def log_server_stopped() -> None:
    _events_logger.info("Print server stopped")
