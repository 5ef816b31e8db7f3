"""
Data models for PrintRelay.

This module contains dataclasses for:
- PrintJob: One decoded print request (frozen)
- DispatchResult: Successful dispatch outcome
- PrinterInfo: Enumerated printer and normalized status (frozen)
- WindowsStatus: Tagged union for the raw Windows status field
- RelayConfig: User settings snapshot (frozen)
- ServerState: Print server lifecycle phase and port

Frozen dataclasses are safe to hand between request threads.
"""

from .print_job import PrintJob, JobType, DispatchResult
from .printer import PrinterInfo, WindowsStatus, WINDOWS_STATUS_CODES
from .settings import RelayConfig
from .server_state import ServerPhase, ServerState

__all__ = [
    # Job models
    "PrintJob",
    "JobType",
    "DispatchResult",
    # Printer models
    "PrinterInfo",
    "WindowsStatus",
    "WINDOWS_STATUS_CODES",
    # Settings / state
    "RelayConfig",
    "ServerPhase",
    "ServerState",
]
