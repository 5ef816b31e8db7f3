"""
Print server state model.

One ServerState per PrintServer. The server mutates it only while holding
its gate lock, so readers always see a consistent (phase, port) pair.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class ServerPhase(Enum):
    """
    Lifecycle phase of the HTTP listener.

    Lifecycle:
        STOPPED -> RUNNING (start)
        RUNNING -> STOPPED (stop, or listener failure)
    """

    STOPPED = "stopped"
    RUNNING = "running"


@dataclass
class ServerState:
    phase: ServerPhase = ServerPhase.STOPPED
    port: int = 0

    @property
    def is_running(self) -> bool:
        return self.phase is ServerPhase.RUNNING

    def to_dict(self) -> Dict[str, Any]:
        return {"phase": self.phase.value, "port": self.port}
