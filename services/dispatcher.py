"""
Print job dispatch.

Routes one decoded job to the injected PrinterBackend:

    pdf        -> base64 decode -> temp file -> backend.print_file
                  (temp file deletion is always scheduled, success or not)
    everything -> content forwarded verbatim -> backend.print_raw
    else

Unknown job types are deliberately handled like "raw".

Every failure leaves here as a PrintRelayError subclass carrying the stage
that failed. Each call is a single attempt.
"""

from __future__ import annotations

import base64
from typing import Optional

from core.exceptions import DecodeError, PrintBackendError
from logging_config import get_logger, log_print_error, log_print_success
from models.print_job import DispatchResult, PrintJob
from models.settings import DEFAULT_CLEANUP_DELAY
from printers.base import PrinterBackend
from services.temp_files import TempFileManager


logger = get_logger(__name__)


class PrintDispatcher:
    """
    Single entry point between the HTTP layer and the printer backend.

    Attributes:
        backend: Platform backend jobs are sent to
        temp_files: Owner of the pdf temp files and their cleanup timers
        cleanup_delay: Seconds before a pdf temp file is deleted
    """

    def __init__(
        self,
        backend: PrinterBackend,
        temp_files: Optional[TempFileManager] = None,
        cleanup_delay: float = DEFAULT_CLEANUP_DELAY
    ):
        self._backend = backend
        self._temp_files = temp_files or TempFileManager()
        self._cleanup_delay = cleanup_delay

    @property
    def backend(self) -> PrinterBackend:
        return self._backend

    @property
    def temp_files(self) -> TempFileManager:
        return self._temp_files

    @property
    def cleanup_delay(self) -> float:
        return self._cleanup_delay

    def dispatch(self, job: PrintJob) -> DispatchResult:
        """
        Send one job to the printer.

        Args:
            job: Validated print job

        Returns:
            DispatchResult with the resolved printer name

        Raises:
            DecodeError: pdf content is not valid base64
            PrintBackendError: temp file write or OS print call failed
        """
        if job.is_pdf:
            return self._dispatch_pdf(job)
        return self._dispatch_raw(job)

    def _dispatch_pdf(self, job: PrintJob) -> DispatchResult:
        # Line breaks are common in wrapped base64 and carry no data
        encoded = job.content.replace("\r", "").replace("\n", "")
        try:
            data = base64.b64decode(encoded, validate=True)
        except ValueError as exc:
            log_print_error("Failed to decode base64 PDF", exc)
            raise DecodeError(job.job_type, exc) from exc

        try:
            path = self._temp_files.create_unique(data)
        except OSError as exc:
            log_print_error("Failed to write temp PDF file", exc)
            raise PrintBackendError(
                "write-temp", f"failed to write temp file: {exc}",
                printer=job.target_printer, cause=exc
            ) from exc

        logger.info(f"Created temp PDF: {path}")

        try:
            self._backend.print_file(job.target_printer, path)
        except PrintBackendError as exc:
            log_print_error("Failed to execute print command", exc)
            raise PrintBackendError(
                exc.stage, f"failed to print PDF: {exc.message}",
                printer=job.target_printer, cause=exc
            ) from exc
        finally:
            self._temp_files.schedule_delete(path, self._cleanup_delay)

        log_print_success(job.target_printer)
        return DispatchResult(printer=job.target_printer, job_type=job.job_type, temp_file=path)

    def _dispatch_raw(self, job: PrintJob) -> DispatchResult:
        try:
            data = job.content.encode("utf-8")
        except UnicodeEncodeError as exc:
            # JSON allows lone surrogates, UTF-8 does not
            log_print_error("Failed to encode raw text", exc)
            raise PrintBackendError(
                "encode", f"failed to encode raw text as UTF-8: {exc}",
                printer=job.target_printer, cause=exc
            ) from exc

        try:
            self._backend.print_raw(job.target_printer, data)
        except PrintBackendError as exc:
            log_print_error("Failed to print raw text", exc)
            raise PrintBackendError(
                exc.stage, f"failed to print raw text: {exc.message}",
                printer=job.target_printer, cause=exc
            ) from exc

        log_print_success(job.target_printer)
        return DispatchResult(printer=job.target_printer, job_type=job.job_type)
