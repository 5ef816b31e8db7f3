# tests/fakes/fake_backend.py

from pathlib import Path
from typing import List, Optional

from core.exceptions import PrintBackendError
from models.printer import PrinterInfo
from printers.base import PrinterBackend


class FakeBackend(PrinterBackend):
    """Records every call; optionally fails with a PrintBackendError."""

    def __init__(self, printers: Optional[List[PrinterInfo]] = None):
        self.printers = printers or []
        self.raw_jobs = []
        self.file_jobs = []
        # Contents of each submitted file, read at submission time
        self.file_contents = []
        self.fail_with: Optional[PrintBackendError] = None

    @property
    def name(self) -> str:
        return "fake"

    def list_printers(self) -> List[PrinterInfo]:
        if self.fail_with is not None:
            raise self.fail_with
        return list(self.printers)

    def print_raw(self, printer_name: str, data: bytes) -> None:
        self.raw_jobs.append((printer_name, data))
        if self.fail_with is not None:
            raise self.fail_with

    def print_file(self, printer_name: str, path: Path) -> None:
        self.file_jobs.append((printer_name, path))
        self.file_contents.append(path.read_bytes())
        if self.fail_with is not None:
            raise self.fail_with
