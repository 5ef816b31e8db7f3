"""
Hosting application facade.

RelayService is what a UI, tray icon or the console entry point talks to.
It owns the one PrintServer for the process and wires the collaborators:

    RelayService
    ├── ConfigStore     - selected printer / port / autostart flag
    ├── PrinterBackend  - printer enumeration
    ├── PrintDispatcher - test pages go through the normal job path
    ├── PrintServer     - start / stop / is_running
    ├── Autostart       - launch-at-login toggle
    └── EventNotifier   - print-received / print-success / print-error

Usage:
    relay = build_relay()                # app.py wires everything
    relay.start_server()                 # configured port
    relay.notifier.subscribe(on_event)
    ...
    relay.shutdown()
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from core.exceptions import AutostartError, PrintRelayError, ValidationError
from logging_config import get_logger
from models.print_job import DispatchResult, JobType, PrintJob
from models.printer import PrinterInfo
from models.settings import RelayConfig
from printers.base import PrinterBackend
from services.autostart import Autostart
from services.config_store import ConfigStore
from services.dispatcher import PrintDispatcher
from services.events import EventNotifier
from services.print_server import PrintServer


logger = get_logger(__name__)

TEST_PAGE_TEMPLATE = """
================================
      PRINTRELAY TEST PAGE
================================

Printer: {printer}
Time: {time}

Hello World!

This is a test page from
PrintRelay.

If you can read this, your
printer is working correctly.

================================
"""


class RelayService:
    """
    Application service exposing the relay's operations.

    Attributes:
        server: The process-wide PrintServer
        notifier: Observer registry for print notifications
    """

    def __init__(
        self,
        config_store: ConfigStore,
        backend: PrinterBackend,
        dispatcher: PrintDispatcher,
        server: PrintServer,
        autostart: Optional[Autostart] = None,
        notifier: Optional[EventNotifier] = None
    ):
        self._config_store = config_store
        self._backend = backend
        self._dispatcher = dispatcher
        self._server = server
        self._autostart = autostart
        self._notifier = notifier or EventNotifier()

    @property
    def server(self) -> PrintServer:
        return self._server

    @property
    def notifier(self) -> EventNotifier:
        return self._notifier

    @property
    def dispatcher(self) -> PrintDispatcher:
        return self._dispatcher

    # ---------- Printers ----------

    def get_printers(self) -> List[PrinterInfo]:
        """Installed printers; an enumeration failure yields an empty list."""
        try:
            return self._backend.list_printers()
        except PrintRelayError as e:
            logger.error(f"Failed to list printers: {e}")
            return []

    def print_test_page(self) -> DispatchResult:
        """
        Print a short text banner on the selected printer.

        Raises:
            ValidationError: If no printer is selected
            PrintRelayError: If the print call fails
        """
        printer = self._config_store.get_config().selected_printer
        if not printer:
            raise ValidationError("no printer selected")

        content = TEST_PAGE_TEMPLATE.format(
            printer=printer,
            time=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        )

        logger.info(f"Printing test page to: {printer}")
        return self._dispatcher.dispatch(
            PrintJob(job_type=JobType.TEXT.value, content=content, target_printer=printer)
        )

    # ---------- Configuration ----------

    def get_config(self) -> RelayConfig:
        return self._config_store.get_config()

    def save_config(self, printer: str, port: int, auto_start: bool) -> RelayConfig:
        """
        Persist settings. An autostart failure is logged; the rest is saved.

        A new port takes effect at the next start_server().
        """
        if self._autostart is not None:
            try:
                self._autostart.toggle(auto_start)
            except AutostartError as e:
                logger.error(f"Failed to toggle autostart: {e}")

        return self._config_store.update_config(printer, port, auto_start)

    def get_autostart_status(self) -> bool:
        if self._autostart is None:
            return False
        return self._autostart.is_enabled()

    def set_autostart(self, enabled: bool) -> None:
        """
        Raises:
            AutostartError: If the OS registration cannot be changed
        """
        if self._autostart is None:
            raise AutostartError("autostart is not available on this platform")
        self._autostart.toggle(enabled)

    # ---------- Server lifecycle ----------

    def start_server(self, port: Optional[int] = None) -> None:
        """
        Start the print server on `port` (default: configured port).

        Raises:
            ServerLifecycleError: If already running
        """
        if port is None:
            port = self._config_store.get_config().port
        self._server.start(port)

    def stop_server(self) -> None:
        self._server.stop()

    def is_server_running(self) -> bool:
        return self._server.is_running()

    def shutdown(self) -> None:
        """Stop the server; pending temp file cleanups keep their timers."""
        self._server.stop()
        logger.info("PrintRelay shutdown")
