"""
Tests for data models, the event notifier and the backend factory.
"""

import pytest

from models.print_job import PrintJob
from models.printer import WindowsStatus
from models.server_state import ServerPhase, ServerState
from models.settings import RelayConfig
from printers import UnixPrinterBackend, create_backend
from services.events import PRINT_SUCCESS, EventNotifier


class TestWindowsStatus:

    def test_string_kept_verbatim(self):
        status = WindowsStatus.decode("Paper Jam")

        assert status.kind == "text"
        assert status.normalized() == "Paper Jam"

    def test_float_code_is_mapped(self):
        assert WindowsStatus.decode(3.0).normalized() == "Ready"

    def test_bool_is_not_a_code(self):
        assert WindowsStatus.decode(True).kind == "unknown"


class TestPrintJob:

    def test_from_request(self):
        job = PrintJob.from_request({"type": "pdf", "content": "QUJD"}, target_printer="P")

        assert job.is_pdf is True
        assert job.target_printer == "P"

    def test_only_pdf_is_file_based(self):
        assert PrintJob(job_type="PDF", content="x").is_pdf is False


def test_relay_config_round_trip():
    config = RelayConfig(selected_printer="P", port=9100, auto_start=True)

    assert RelayConfig.from_dict(config.to_dict()) == config


def test_server_state_dict():
    state = ServerState(phase=ServerPhase.RUNNING, port=9999)

    assert state.is_running is True
    assert state.to_dict() == {"phase": "running", "port": 9999}


class TestEventNotifier:

    def test_unsubscribe(self):
        received = []
        notifier = EventNotifier()
        unsubscribe = notifier.subscribe(lambda event, payload: received.append(event))

        notifier.emit(PRINT_SUCCESS, {"printer": "P"})
        unsubscribe()
        notifier.emit(PRINT_SUCCESS, {"printer": "P"})

        assert received == [PRINT_SUCCESS]

    def test_observers_get_a_copy(self):
        payload = {"printer": "P"}
        notifier = EventNotifier()
        notifier.subscribe(lambda event, data: data.clear())

        notifier.emit(PRINT_SUCCESS, payload)

        assert payload == {"printer": "P"}


@pytest.mark.parametrize("system, name", [("Darwin", "cups-raw"), ("Linux", "cups")])
def test_create_backend_for_cups_platforms(system, name):
    backend = create_backend(system)

    assert isinstance(backend, UnixPrinterBackend)
    assert backend.name == name
