"""
Print job data models.

A PrintJob is created per request, consumed once by the dispatcher and
never persisted. DispatchResult is what a successful dispatch hands back to
the route for logging and notification.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional


class JobType(str, Enum):
    """
    Declared job types.

    Only PDF changes routing. TEXT, RAW and any value not listed here are
    forwarded verbatim to the raw print path.
    """

    PDF = "pdf"
    RAW = "raw"
    TEXT = "text"


@dataclass(frozen=True)
class PrintJob:
    """A single decoded print request awaiting dispatch."""

    job_type: str
    """Declared type from the request body ("pdf", "raw", "text", or anything)."""

    content: str
    """Base64 text for pdf jobs, literal text for everything else."""

    target_printer: str = ""
    """Queue name; empty string means the OS default printer."""

    @property
    def is_pdf(self) -> bool:
        return self.job_type == JobType.PDF.value

    @classmethod
    def from_request(cls, data: Dict[str, Any], target_printer: str = "") -> "PrintJob":
        """Build a job from an already validated request body."""
        return cls(
            job_type=data["type"],
            content=data["content"],
            target_printer=target_printer or "",
        )


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of a successful dispatch."""

    printer: str
    """Printer the job was sent to ("" = OS default)."""

    job_type: str

    temp_file: Optional[Path] = None
    """Temp file scheduled for deletion (pdf jobs only)."""

    @property
    def printer_label(self) -> str:
        return self.printer or "<default>"
