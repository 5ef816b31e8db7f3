# printers/unix.py

from __future__ import annotations

import re
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from core.exceptions import PrintBackendError
from logging_config import get_logger
from models.printer import PrinterInfo, STATUS_OFFLINE, STATUS_READY
from printers.base import PrinterBackend

logger = get_logger(__name__)

# "printer Office_Laser is idle.  enabled since ..."
_PRINTER_LINE = re.compile(r"^printer\s+(\S+)\s+is\s+(\w+)")
# "\tAlerts: offline-report"
_ALERTS_LINE = re.compile(r"^\s+Alerts:\s+(.*)")


def normalize_lpstat_state(state: str) -> str:
    if state == "idle":
        return STATUS_READY
    return state[:1].upper() + state[1:]


def parse_lpstat(output: str) -> List[PrinterInfo]:
    """
    Parse `lpstat -l -p` output into printers.

    A block starts at a `printer <name> is <state>` line and runs until the
    next one or end of input. An indented Alerts line mentioning "offline"
    inside the block overrides whatever state the header reported.
    """
    printers: List[PrinterInfo] = []
    name: Optional[str] = None
    status = ""

    for line in output.splitlines():
        match = _PRINTER_LINE.match(line)
        if match:
            if name is not None:
                printers.append(PrinterInfo(name=name, status=status))
            name = match.group(1)
            status = normalize_lpstat_state(match.group(2))
            continue

        if name is None:
            continue

        alert = _ALERTS_LINE.match(line)
        if alert and "offline" in alert.group(1):
            status = STATUS_OFFLINE

    if name is not None:
        printers.append(PrinterInfo(name=name, status=status))

    return printers


class UnixPrinterBackend(PrinterBackend):
    """
    CUPS-backed printer using the `lp` and `lpstat` commands.

    Shared by macOS and Linux. On macOS raw jobs are submitted with
    `-o raw` so CUPS does not run them through a text filter.
    """

    def __init__(
            self,
            raw_mode: bool = False,
            lp_path: str = "lp",
            lpstat_path: str = "lpstat",
    ) -> None:
        self._raw_mode = raw_mode
        self._lp_path = lp_path
        self._lpstat_path = lpstat_path

    @property
    def name(self) -> str:
        return "cups-raw" if self._raw_mode else "cups"

    def list_printers(self) -> List[PrinterInfo]:
        proc = self._run([self._lpstat_path, "-l", "-p"], stage="enumerate")
        return parse_lpstat(proc.stdout.decode("utf-8", errors="replace"))

    def print_raw(self, printer_name: str, data: bytes) -> None:
        cmd = self._lp_command(printer_name)
        if self._raw_mode:
            cmd += ["-o", "raw"]

        self._run(cmd, stage="process", printer=printer_name, stdin=data)
        logger.debug(f"Streamed {len(data)} bytes to {cmd[0]}")

    def print_file(self, printer_name: str, path: Path) -> None:
        cmd = self._lp_command(printer_name) + [str(path)]
        self._run(cmd, stage="process", printer=printer_name)

    def _lp_command(self, printer_name: str) -> List[str]:
        cmd = [self._lp_path]
        if printer_name:
            cmd += ["-d", printer_name]
        return cmd

    def _run(
            self,
            cmd: Sequence[str],
            *,
            stage: str,
            printer: Optional[str] = None,
            stdin: Optional[bytes] = None,
    ) -> subprocess.CompletedProcess:
        try:
            proc = subprocess.run(
                list(cmd),
                input=stdin,
                capture_output=True,
            )
        except OSError as exc:
            raise PrintBackendError(
                stage, f"failed to run {cmd[0]}: {exc}", printer=printer, cause=exc
            ) from exc

        if proc.returncode != 0:
            out = (proc.stdout or b"") + (proc.stderr or b"")
            detail = out.decode("utf-8", errors="replace").strip()
            raise PrintBackendError(
                stage, f"{cmd[0]} failed (rc={proc.returncode}): {detail}", printer=printer
            )
        return proc
