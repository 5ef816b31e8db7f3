"""
Services layer for PrintRelay.

This module contains the relay's moving parts:
- TempFileManager: pdf temp files and their deferred deletion
- PrintDispatcher: routes a job to the printer backend
- PrintServer: HTTP listener lifecycle (start/stop/is_running)
- EventNotifier: print-received / print-success / print-error observers
- ConfigStore: persisted user settings
- Autostart: launch-at-login registration
- RelayService: facade owning all of the above

Thread Model:
    Main Thread
    ├── Listener thread (one per PrintServer.start)
    │   └── Request threads (one per HTTP request)
    └── Cleanup timer threads (one per pdf job)
"""

from .temp_files import TempFileManager
from .dispatcher import PrintDispatcher
from .events import EventNotifier, PRINT_RECEIVED, PRINT_SUCCESS, PRINT_ERROR
from .config_store import ConfigStore
from .autostart import Autostart, create_autostart
from .print_server import PrintServer
from .relay_service import RelayService

__all__ = [
    "TempFileManager",
    "PrintDispatcher",
    "EventNotifier",
    "PRINT_RECEIVED",
    "PRINT_SUCCESS",
    "PRINT_ERROR",
    "ConfigStore",
    "Autostart",
    "create_autostart",
    "PrintServer",
    "RelayService",
]
