"""
HTTP listener lifecycle for the print relay.

The server is a small state machine (STOPPED <-> RUNNING) around a
werkzeug threaded WSGI server serving the Flask app from create_app().

THREAD MODEL:
    Caller thread
    ├── start(port) - flips to RUNNING and spawns the listener, returns at once
    └── stop()      - flips to STOPPED, then shuts the listener down

    Listener thread (one per start)
    ├── binds the port, then serve_forever()
    └── on bind/serve failure: logs and flips back to STOPPED

    Request threads (one per HTTP request, from ThreadedWSGIServer)

The gate lock guards (phase, port, listener) only. It is never held across
a bind, a shutdown or a join.

Because the phase changes before the bind, is_running() is True right
after start() even if the port later turns out to be taken. A failed bind
is reported through the log and is_running(), not through start().
"""

from __future__ import annotations

import socket
import threading
from typing import Optional

from flask import Flask
from werkzeug.serving import ThreadedWSGIServer, WSGIRequestHandler

from core.exceptions import ServerLifecycleError
from logging_config import get_logger, log_server_started, log_server_stopped
from models.server_state import ServerPhase, ServerState


logger = get_logger(__name__)

SOCKET_TIMEOUT_SECONDS = 10.0


class _RequestHandler(WSGIRequestHandler):
    # Applied to each accepted connection (read and write)
    timeout = SOCKET_TIMEOUT_SECONDS

    # No keep-alive: an idle browser connection would otherwise hold up the
    # drain in stop() until its timeout
    protocol_version = "HTTP/1.0"


class _DrainingWSGIServer(ThreadedWSGIServer):
    # Non-daemon request threads are joined by server_close(), which is what
    # lets stop() finish in-flight jobs before releasing the port
    daemon_threads = False
    block_on_close = True


class PrintServer:
    """
    Start/stop controller for the print HTTP endpoint.

    Owned by the hosting application for the lifetime of the process and
    passed by reference to whatever starts or stops it.

    Attributes:
        app: Flask application being served
        host: Interface the listener binds to
    """

    SHUTDOWN_TIMEOUT_SECONDS = 15.0

    def __init__(self, app: Flask, host: str = "127.0.0.1"):
        self._app = app
        self._host = host

        # The gate: every read/write of the fields below holds it
        self._lock = threading.Lock()
        self._state = ServerState()
        self._listener: Optional[ThreadedWSGIServer] = None
        self._thread: Optional[threading.Thread] = None
        # Bumped on every start/stop so a stale listener thread can tell it
        # has been superseded
        self._generation = 0

    @property
    def app(self) -> Flask:
        return self._app

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        with self._lock:
            return self._state.port

    def is_running(self) -> bool:
        with self._lock:
            return self._state.is_running

    def get_state(self) -> ServerState:
        """Consistent copy of (phase, port)."""
        with self._lock:
            return ServerState(phase=self._state.phase, port=self._state.port)

    def start(self, port: int) -> None:
        """
        Start listening on `port` in the background.

        Raises:
            ServerLifecycleError: If the server is already running
        """
        with self._lock:
            if self._state.is_running:
                raise ServerLifecycleError("server is already running", port=self._state.port)

            self._state.port = port
            self._state.phase = ServerPhase.RUNNING
            self._generation += 1
            generation = self._generation

            thread = threading.Thread(
                target=self._listen,
                args=(port, generation),
                name=f"Listener-{port}",
                daemon=True
            )
            self._thread = thread

        thread.start()

    def stop(self) -> None:
        """
        Stop the server, letting in-flight requests finish.

        Safe to call when already stopped.
        """
        with self._lock:
            if not self._state.is_running:
                return

            self._state.phase = ServerPhase.STOPPED
            self._generation += 1
            listener, thread = self._listener, self._thread
            self._listener = None
            self._thread = None

        log_server_stopped()

        # A listener that has not bound yet sees the new generation and
        # closes itself; only a serving one needs an explicit shutdown.
        if listener is not None:
            listener.shutdown()

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.SHUTDOWN_TIMEOUT_SECONDS)
            if thread.is_alive():
                logger.warning("Listener thread did not stop cleanly")

    # ---------- Listener thread ----------

    def _listen(self, port: int, generation: int) -> None:
        try:
            listener = self._bind(port)
        except OSError as e:
            error = ServerLifecycleError(f"failed to listen on port {port}: {e}", port=port)
            logger.error(f"Server error: {error}")
            self._mark_stopped(generation)
            return

        with self._lock:
            current = generation == self._generation
            if current:
                self._listener = listener

        if not current:
            listener.server_close()
            return

        log_server_started(listener.server_address[1])

        try:
            # werkzeug closes the socket (and joins request threads) on exit
            listener.serve_forever()
        except Exception as e:
            logger.error(f"Server error: {e}", exc_info=True)
            self._mark_stopped(generation)

    def _bind(self, port: int) -> ThreadedWSGIServer:
        # Bind ourselves so a busy port surfaces as OSError on this thread
        # instead of werkzeug's print-and-exit handling.
        sock = socket.create_server((self._host, port))
        try:
            return _DrainingWSGIServer(
                self._host, port, self._app,
                handler=_RequestHandler,
                fd=sock.fileno(),
            )
        finally:
            sock.close()

    def _mark_stopped(self, generation: int) -> None:
        with self._lock:
            if generation == self._generation and self._state.is_running:
                self._state.phase = ServerPhase.STOPPED
                self._listener = None
                self._thread = None
