"""
PrintRelay - Local print-job relay entry point.

This module:
1. Builds the Flask app serving /health and /print (create_app)
2. Wires backend, dispatcher, config, notifier and server (build_relay)
3. Runs the relay headless until interrupted (main)

ARCHITECTURE:
    Main Thread
    ├── Logging + config load
    ├── RelayService construction (single PrintServer for the process)
    └── Waits for Ctrl+C / SIGTERM, then stops the server

    Listener Thread
    └── werkzeug threaded server, one thread per request

    Cleanup Timer Threads
    └── One per pdf job, deletes the temp file after the delay
"""

from __future__ import annotations

import logging
import signal
import sys
import threading
from pathlib import Path
from typing import Optional, Type

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import Config, get_config_class
from core.exceptions import ConfigError
from logging_config import setup_logging, get_logger
from printers import PrinterBackend, create_backend
from routes import register_blueprints
from services.autostart import create_autostart
from services.config_store import ConfigStore
from services.dispatcher import PrintDispatcher
from services.events import EventNotifier
from services.print_server import PrintServer
from services.relay_service import RelayService
from services.temp_files import TempFileManager


# Module logger (configured after setup_logging)
logger = get_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
    "Access-Control-Allow-Headers": "Origin, Content-Type, Accept",
}


def create_app(
    dispatcher: PrintDispatcher,
    config_store: ConfigStore,
    notifier: EventNotifier,
    config_class: Type[Config] = Config
) -> Flask:
    """
    Application factory - creates the Flask app for the print endpoint.

    Args:
        dispatcher: Sends validated jobs to the printer backend
        config_store: Provides the selected printer per request
        notifier: Receives print-received/success/error events
        config_class: Settings object loaded into app.config

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Collaborators for the routes
    app.config["DISPATCHER"] = dispatcher
    app.config["CONFIG_STORE"] = config_store
    app.config["NOTIFIER"] = notifier

    register_blueprints(app)

    # =========================================================================
    # CORS - any local page may post print jobs
    # =========================================================================

    @app.after_request
    def add_cors_headers(response):
        response.headers.update(CORS_HEADERS)
        return response

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        message = "Not found" if e.code == 404 else e.name
        return jsonify({"success": False, "message": message}), e.code

    @app.errorhandler(Exception)
    def handle_server_error(e):
        logger.error(f"Unhandled error: {e}", exc_info=True)
        return jsonify({"success": False, "message": "Internal server error"}), 500

    return app


def build_relay(
    config_class: Type[Config] = Config,
    backend: Optional[PrinterBackend] = None
) -> RelayService:
    """
    Wire every collaborator into a RelayService.

    The returned service owns the only PrintServer for this process; hand it
    to whatever needs to start or stop the relay.
    """
    config_store = ConfigStore(Path(config_class.CONFIG_FILE), default_port=config_class.DEFAULT_PORT)

    if backend is None:
        backend = create_backend()
    logger.info(f"Using printer backend: {backend.name}")

    notifier = EventNotifier()
    dispatcher = PrintDispatcher(
        backend,
        TempFileManager(),
        cleanup_delay=config_class.CLEANUP_DELAY_SECONDS,
    )
    flask_app = create_app(dispatcher, config_store, notifier, config_class)
    server = PrintServer(flask_app, host=config_class.HOST)

    return RelayService(
        config_store,
        backend,
        dispatcher,
        server,
        autostart=create_autostart(),
        notifier=notifier,
    )


def main() -> int:
    config_class = get_config_class()

    setup_logging(
        log_level=logging.DEBUG if config_class.DEBUG else logging.INFO,
        log_dir=Path(config_class.LOG_DIR),
        enable_file_logging=config_class.ENVIRONMENT == "production",
    )

    logger.info(f"Starting PrintRelay in {config_class.ENVIRONMENT} mode")

    try:
        relay = build_relay(config_class)
        config = relay.get_config()
    except ConfigError as e:
        logger.error(f"FATAL: Cannot start application - {e}")
        return 1

    stop_requested = threading.Event()

    def request_stop(signum, _frame):
        logger.info(f"Received signal {signum}, shutting down...")
        stop_requested.set()

    signal.signal(signal.SIGINT, request_stop)
    signal.signal(signal.SIGTERM, request_stop)

    relay.start_server(config.port)

    # Event.wait() without a timeout cannot be interrupted on Windows
    while not stop_requested.wait(0.5):
        pass

    relay.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
