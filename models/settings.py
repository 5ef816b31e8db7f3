"""
User settings model.

RelayConfig is the value the configuration provider hands out. It is
frozen: the core reads it per request and per server start, and only
ConfigStore.update_config() replaces it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

DEFAULT_PORT = 9999

# Seconds a pdf temp file outlives its print call
DEFAULT_CLEANUP_DELAY = 20.0


@dataclass(frozen=True)
class RelayConfig:
    """Selected printer, listener port and launch-at-login flag."""

    selected_printer: str = ""
    port: int = DEFAULT_PORT
    auto_start: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the on-disk JSON shape."""
        return {
            "selected_printer": self.selected_printer,
            "port": self.port,
            "auto_start": self.auto_start,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default_port: int = DEFAULT_PORT) -> "RelayConfig":
        """Create from the on-disk JSON shape, filling gaps with defaults."""
        return cls(
            selected_printer=str(data.get("selected_printer") or ""),
            port=int(data.get("port", default_port)),
            auto_start=bool(data.get("auto_start", False)),
        )
