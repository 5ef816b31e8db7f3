"""
Core module for PrintRelay.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
"""

from .exceptions import (
    PrintRelayError,
    ValidationError,
    DecodeError,
    PrintBackendError,
    ServerLifecycleError,
    CleanupError,
    ConfigError,
    AutostartError,
)

__all__ = [
    "PrintRelayError",
    "ValidationError",
    "DecodeError",
    "PrintBackendError",
    "ServerLifecycleError",
    "CleanupError",
    "ConfigError",
    "AutostartError",
]
