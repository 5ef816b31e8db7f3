# printers/windows.py

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any, Callable, List, Optional

from core.exceptions import PrintBackendError
from logging_config import get_logger
from models.printer import PrinterInfo, WindowsStatus
from printers.base import PrinterBackend

logger = get_logger(__name__)

CREATE_NO_WINDOW = 0x08000000
DOCUMENT_NAME = "PrintRelay Document"

# @() forces an array even when a single printer is installed
LIST_PRINTERS_COMMAND = "@(Get-Printer | Select-Object Name, PrinterStatus) | ConvertTo-Json"


def _powershell_quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def parse_printer_json(output: str) -> List[PrinterInfo]:
    """
    Parse `Get-Printer | ConvertTo-Json` output.

    PowerShell emits a bare object instead of a one-element array on some
    versions, and nothing at all when no printers are installed.
    """
    output = output.strip()
    if not output:
        return []

    try:
        items = json.loads(output)
    except ValueError as exc:
        raise PrintBackendError("enumerate", f"failed to parse printer list: {exc}", cause=exc) from exc

    if isinstance(items, dict):
        items = [items]
    if not isinstance(items, list):
        raise PrintBackendError("enumerate", f"unexpected printer list payload: {type(items).__name__}")

    printers = []
    for item in items:
        if not isinstance(item, dict) or not item.get("Name"):
            continue
        status = WindowsStatus.decode(item.get("PrinterStatus"))
        printers.append(PrinterInfo(name=str(item["Name"]), status=status.normalized()))
    return printers


class WindowsPrinterBackend(PrinterBackend):
    """
    Windows bridge.

    Raw jobs go straight to the spooler through pywin32's win32print with
    an explicit document/page frame. Files are handed to the shell "Print"
    verb, which lets the registered PDF handler print silently. Printer
    enumeration uses PowerShell's Get-Printer for its status codes.
    """

    def __init__(self, spooler: Any = None, powershell: str = "powershell") -> None:
        if spooler is None:
            import win32print  # pywin32; only importable on Windows
            spooler = win32print
        self._spooler = spooler
        self._powershell = powershell

    @property
    def name(self) -> str:
        return "windows-spooler"

    def list_printers(self) -> List[PrinterInfo]:
        proc = self._run_powershell(LIST_PRINTERS_COMMAND, stage="enumerate")
        return parse_printer_json(proc.stdout.decode("utf-8", errors="replace"))

    def print_raw(self, printer_name: str, data: bytes) -> None:
        spooler = self._spooler
        target = printer_name or self._default_printer()

        handle = self._stage(
            "open", f"failed to open printer '{target}'", target, spooler.OpenPrinter, target
        )
        try:
            self._stage(
                "start-document", "failed to start document", target,
                spooler.StartDocPrinter, handle, 1, (DOCUMENT_NAME, None, "RAW"),
            )
            self._stage("start-page", "failed to start page", target, spooler.StartPagePrinter, handle)
            self._stage("write", "failed to write to printer", target, spooler.WritePrinter, handle, data)
            self._stage("end-page", "failed to end page", target, spooler.EndPagePrinter, handle)
            self._stage("end-document", "failed to end document", target, spooler.EndDocPrinter, handle)
        finally:
            try:
                spooler.ClosePrinter(handle)
            except Exception as exc:
                logger.warning(f"Failed to close printer handle for '{target}': {exc}")

    def print_file(self, printer_name: str, path: Path) -> None:
        # The Print verb always targets the default printer.
        command = (
            f"Start-Process -FilePath {_powershell_quote(str(path))} "
            "-Verb Print -WindowStyle Hidden"
        )
        self._run_powershell(command, stage="process", printer=printer_name)

    def _default_printer(self) -> str:
        try:
            return str(self._spooler.GetDefaultPrinter())
        except Exception as exc:
            raise PrintBackendError("open", f"failed to resolve default printer: {exc}", cause=exc) from exc

    @staticmethod
    def _stage(stage: str, message: str, printer: Optional[str], call: Callable, *args: Any) -> Any:
        try:
            return call(*args)
        except Exception as exc:
            raise PrintBackendError(stage, f"{message}: {exc}", printer=printer, cause=exc) from exc

    def _run_powershell(
            self,
            command: str,
            *,
            stage: str,
            printer: Optional[str] = None,
    ) -> subprocess.CompletedProcess:
        cmd = [self._powershell, "-NoProfile", "-NonInteractive", "-Command", command]
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                creationflags=CREATE_NO_WINDOW,
            )
        except OSError as exc:
            raise PrintBackendError(
                stage, f"failed to run powershell: {exc}", printer=printer, cause=exc
            ) from exc

        if proc.returncode != 0:
            detail = (proc.stderr or b"").decode("utf-8", errors="replace").strip()
            raise PrintBackendError(
                stage, f"powershell failed (rc={proc.returncode}): {detail}", printer=printer
            )
        return proc
