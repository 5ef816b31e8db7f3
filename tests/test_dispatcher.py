"""
Unit tests for PrintDispatcher.

Routing by job type, base64 handling and the temp file lifecycle of pdf
jobs, against FakeBackend.
"""

import base64

import pytest

from core.exceptions import DecodeError, PrintBackendError
from models.print_job import PrintJob
from services.dispatcher import PrintDispatcher
from services.temp_files import TempFileManager


PDF_BYTES = b"%PDF-1.7\n1 0 obj\n<<>>\nendobj\n%%EOF"


def pdf_job(data: bytes = PDF_BYTES, printer: str = "") -> PrintJob:
    return PrintJob(job_type="pdf", content=base64.b64encode(data).decode("ascii"), target_printer=printer)


class TestRawDispatch:
    """Non-pdf jobs are forwarded verbatim."""

    @pytest.mark.parametrize("job_type", ["raw", "text", "zpl", "weird"])
    def test_content_is_sent_as_utf8(self, dispatcher, fake_backend, job_type):
        result = dispatcher.dispatch(PrintJob(job_type=job_type, content="Grüße", target_printer="P1"))

        assert fake_backend.raw_jobs == [("P1", "Grüße".encode("utf-8"))]
        assert fake_backend.file_jobs == []
        assert result.printer == "P1"
        assert result.temp_file is None

    def test_empty_printer_means_default(self, dispatcher, fake_backend):
        result = dispatcher.dispatch(PrintJob(job_type="raw", content="x"))

        assert fake_backend.raw_jobs == [("", b"x")]
        assert result.printer_label == "<default>"

    def test_backend_error_keeps_stage(self, dispatcher, fake_backend):
        fake_backend.fail_with = PrintBackendError("start-page", "failed to start page: busy")

        with pytest.raises(PrintBackendError) as exc_info:
            dispatcher.dispatch(PrintJob(job_type="raw", content="x", target_printer="P1"))

        error = exc_info.value
        assert error.stage == "start-page"
        assert error.message == "failed to print raw text: failed to start page: busy"
        assert error.printer == "P1"

    def test_unencodable_text_is_backend_error(self, dispatcher, fake_backend):
        with pytest.raises(PrintBackendError) as exc_info:
            dispatcher.dispatch(PrintJob(job_type="raw", content="abc\ud800", target_printer="P1"))

        assert exc_info.value.stage == "encode"
        assert exc_info.value.message.startswith("failed to encode raw text as UTF-8")
        assert fake_backend.raw_jobs == []


class TestPdfDispatch:
    """pdf jobs are decoded to a temp file that is always cleaned up."""

    def test_decoded_bytes_reach_backend(self, dispatcher, fake_backend):
        result = dispatcher.dispatch(pdf_job(printer="Office_Laser"))

        assert fake_backend.file_contents == [PDF_BYTES]
        printer, path = fake_backend.file_jobs[0]
        assert printer == "Office_Laser"
        assert path == result.temp_file
        assert path.suffix == ".pdf"

    def test_temp_file_deleted_after_flush(self, dispatcher, temp_files):
        result = dispatcher.dispatch(pdf_job())

        assert result.temp_file.exists()
        assert temp_files.pending_count == 1

        assert temp_files.flush() == 1
        assert not result.temp_file.exists()

    def test_temp_file_deleted_even_when_print_fails(self, dispatcher, fake_backend, temp_files):
        fake_backend.fail_with = PrintBackendError("process", "lp failed (rc=1): no queue")

        with pytest.raises(PrintBackendError) as exc_info:
            dispatcher.dispatch(pdf_job())

        assert exc_info.value.message == "failed to print PDF: lp failed (rc=1): no queue"
        _, path = fake_backend.file_jobs[0]
        assert temp_files.pending_paths() == [path]

        temp_files.flush()
        assert not path.exists()

    def test_wrapped_base64_is_accepted(self, dispatcher, fake_backend):
        encoded = base64.encodebytes(PDF_BYTES * 10).decode("ascii").replace("\n", "\r\n")

        dispatcher.dispatch(PrintJob(job_type="pdf", content=encoded))

        assert fake_backend.file_contents == [PDF_BYTES * 10]

    @pytest.mark.parametrize("content", ["not base64!", "QUJ", "####"])
    def test_invalid_base64_creates_no_file(self, dispatcher, fake_backend, temp_files, tmp_path, content):
        with pytest.raises(DecodeError) as exc_info:
            dispatcher.dispatch(PrintJob(job_type="pdf", content=content))

        assert exc_info.value.message.startswith("failed to decode base64")
        assert fake_backend.file_jobs == []
        assert temp_files.pending_count == 0
        assert list(tmp_path.iterdir()) == []

    def test_temp_write_failure_is_backend_error(self, fake_backend, tmp_path):
        missing_dir = tmp_path / "does-not-exist"
        dispatcher = PrintDispatcher(fake_backend, TempFileManager(directory=missing_dir))

        with pytest.raises(PrintBackendError) as exc_info:
            dispatcher.dispatch(pdf_job())

        assert exc_info.value.stage == "write-temp"
        assert fake_backend.file_jobs == []

    def test_each_job_gets_its_own_file(self, dispatcher, fake_backend):
        for i in range(5):
            dispatcher.dispatch(pdf_job(data=PDF_BYTES + bytes([i])))

        paths = [path for _, path in fake_backend.file_jobs]
        assert len(set(paths)) == 5
        assert fake_backend.file_contents == [PDF_BYTES + bytes([i]) for i in range(5)]


class TestCleanupDelay:
    """Temp pdf files are kept for the default delay unless told otherwise."""

    def test_default_delay_is_twenty_seconds(self, fake_backend, temp_files, monkeypatch):
        delays = []
        monkeypatch.setattr(temp_files, "schedule_delete", lambda path, delay: delays.append(delay))
        fake_backend.fail_with = PrintBackendError("process", "lp failed (rc=1): no queue")
        dispatcher = PrintDispatcher(fake_backend, temp_files)

        with pytest.raises(PrintBackendError):
            dispatcher.dispatch(pdf_job())

        assert dispatcher.cleanup_delay == 20.0
        assert delays == [20.0]

    def test_configured_delay_is_used(self, fake_backend, temp_files, monkeypatch):
        delays = []
        monkeypatch.setattr(temp_files, "schedule_delete", lambda path, delay: delays.append(delay))

        PrintDispatcher(fake_backend, temp_files, cleanup_delay=5.0).dispatch(pdf_job())

        assert delays == [5.0]
