"""
Printer data models.

PrinterInfo is produced only by backend enumeration and is read-only to
callers. WindowsStatus is the parsing-boundary representation of the
PowerShell PrinterStatus field, which arrives either as a string or as a
numeric Win32_Printer status code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


# Win32_Printer.PrinterStatus codes
WINDOWS_STATUS_CODES: Dict[int, str] = {
    1: "Other",
    2: "Error",
    3: "Ready",
    4: "Printing",
    5: "Warmup",
    6: "Stopped",
    7: "Offline",
}

STATUS_READY = "Ready"
STATUS_OFFLINE = "Offline"
STATUS_UNKNOWN = "Unknown"


@dataclass(frozen=True)
class PrinterInfo:
    """A printer known to the OS and its normalized status."""

    name: str
    """Queue name as the OS reports it."""

    status: str
    """Normalized status (Ready, Printing, Offline, ... or 'Status <code>')."""

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "status": self.status}


@dataclass(frozen=True)
class WindowsStatus:
    """
    Tagged union for the raw PrinterStatus value.

    kind is one of:
        "text"    - the value was a string, kept verbatim
        "code"    - the value was a number, mapped via WINDOWS_STATUS_CODES
        "unknown" - missing or any other JSON type
    """

    kind: str
    text: Optional[str] = None
    code: Optional[int] = None

    @classmethod
    def decode(cls, raw: Any) -> "WindowsStatus":
        # bool is an int subclass; JSON true/false is not a status code
        if isinstance(raw, bool) or raw is None:
            return cls(kind="unknown")
        if isinstance(raw, str):
            return cls(kind="text", text=raw)
        if isinstance(raw, (int, float)):
            return cls(kind="code", code=int(raw))
        return cls(kind="unknown")

    def normalized(self) -> str:
        if self.kind == "text":
            return self.text or STATUS_UNKNOWN
        if self.kind == "code":
            return WINDOWS_STATUS_CODES.get(self.code, f"Status {self.code}")
        return STATUS_UNKNOWN
