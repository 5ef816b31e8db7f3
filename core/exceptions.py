"""
Custom exceptions for PrintRelay.

Exception Hierarchy:
    PrintRelayError (base)
    ├── ValidationError       - Malformed or incomplete print request (HTTP 400)
    ├── DecodeError           - Encoded payload could not be decoded (HTTP 500)
    ├── PrintBackendError     - OS printing call failed at a named stage (HTTP 500)
    ├── ServerLifecycleError  - Double start, listener bind failure
    ├── CleanupError          - Temp file deletion failed (logged only)
    ├── ConfigError           - Config file unreadable or invalid
    └── AutostartError        - OS autostart registration failed

Usage:
    Request-scoped errors (ValidationError, DecodeError, PrintBackendError)
    fail one job; the server keeps accepting new jobs.
    Nothing in this package is fatal to the process.
"""

from typing import Optional, Dict, Any


class PrintRelayError(Exception):
    """
    Base exception for all PrintRelay errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all application-specific errors with a single except clause if needed.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# REQUEST ERRORS - One job fails, the server keeps running
# =============================================================================

class ValidationError(PrintRelayError):
    """
    Print request is malformed or missing required fields.

    Maps to HTTP 400. Fully recoverable - the caller fixes the request.
    """


class DecodeError(PrintRelayError):
    """
    Job content could not be decoded from its transport encoding.

    Raised before any temp file is written.
    """

    def __init__(self, job_type: str, cause: Exception):
        message = f"failed to decode base64: {cause}"
        details = {
            "stage": "decode",
            "job_type": job_type,
        }
        super().__init__(message, details)
        self.job_type = job_type
        self.cause = cause


class PrintBackendError(PrintRelayError):
    """
    An OS-level printing call failed.

    Stages:
        open, start-document, start-page, write, end-page, end-document
            - Windows spooler calls
        enumerate - printer listing command failed or returned garbage
        process   - print command could not be run or exited non-zero
        write-temp - temp file for a file-based job could not be written
        encode    - raw text could not be encoded as UTF-8
    """

    def __init__(
        self,
        stage: str,
        message: str,
        printer: Optional[str] = None,
        cause: Optional[BaseException] = None
    ):
        details: Dict[str, Any] = {"stage": stage}
        if printer:
            details["printer"] = printer
        super().__init__(message, details)
        self.stage = stage
        self.printer = printer
        self.cause = cause


# =============================================================================
# LIFECYCLE ERRORS
# =============================================================================

class ServerLifecycleError(PrintRelayError):
    """
    Print server could not change phase.

    Double start is raised synchronously to the caller. A bind failure
    happens on the listener thread after start() already returned, so it
    is only logged and reflected in is_running().
    """

    def __init__(self, message: str, port: Optional[int] = None):
        details = {"port": port} if port is not None else None
        super().__init__(message, details)
        self.port = port


class CleanupError(PrintRelayError):
    """
    A temporary job file could not be deleted.

    Never propagated to a caller - the cleanup timer logs it and moves on.
    """

    def __init__(self, path: str, cause: BaseException):
        message = f"Failed to cleanup temp file: {path}"
        details = {"path": path, "error": str(cause)}
        super().__init__(message, details)
        self.path = path
        self.cause = cause


class ConfigError(PrintRelayError):
    """Configuration file exists but cannot be read or parsed."""

    def __init__(self, message: str, config_path: Optional[str] = None):
        details = {
            "config_path": config_path,
            "resolution": "Fix or delete the config file to regenerate defaults"
        } if config_path else None
        super().__init__(message, details)
        self.config_path = config_path


class AutostartError(PrintRelayError):
    """Launch-at-login registration could not be changed."""
