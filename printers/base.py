# printers/base.py

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from models.printer import PrinterInfo


class PrinterBackend(ABC):
    """
    Abstract printer backend.

    One variant per platform family. The dispatcher owns job routing and
    error wrapping; backends only talk to the OS spooler. Implementations
    raise PrintBackendError on failure and never retry.

    An empty printer_name always means "the OS default printer".
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in logs."""
        raise NotImplementedError

    @abstractmethod
    def list_printers(self) -> List[PrinterInfo]:
        """Return installed printers in OS order with normalized status."""
        raise NotImplementedError

    @abstractmethod
    def print_raw(self, printer_name: str, data: bytes) -> None:
        """Send `data` to the printer unmodified."""
        raise NotImplementedError

    @abstractmethod
    def print_file(self, printer_name: str, path: Path) -> None:
        """Submit an existing file (used for PDFs)."""
        raise NotImplementedError
