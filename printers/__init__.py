"""
Printer backends for PrintRelay.

One backend is selected at startup from the detected OS and injected into
the dispatcher:
- Windows: WindowsPrinterBackend (spooler + PowerShell)
- Darwin: UnixPrinterBackend in raw mode (lp -o raw)
- anything else: UnixPrinterBackend (CUPS lp/lpstat)
"""

import platform
from typing import Optional

from .base import PrinterBackend
from .unix import UnixPrinterBackend, parse_lpstat
from .windows import WindowsPrinterBackend, parse_printer_json

__all__ = [
    "PrinterBackend",
    "UnixPrinterBackend",
    "WindowsPrinterBackend",
    "create_backend",
    "parse_lpstat",
    "parse_printer_json",
]


def create_backend(system: Optional[str] = None) -> PrinterBackend:
    """
    Build the backend for the given (or detected) OS.

    Args:
        system: platform.system() value; detected when omitted

    Returns:
        PrinterBackend for the platform
    """
    system = system or platform.system()

    if system == "Windows":
        return WindowsPrinterBackend()
    if system == "Darwin":
        return UnixPrinterBackend(raw_mode=True)
    return UnixPrinterBackend()
