"""
Unit tests for RelayService, the facade the hosting application uses.
"""

from unittest.mock import Mock

import pytest

from core.exceptions import AutostartError, PrintBackendError, ServerLifecycleError, ValidationError
from services.autostart import Autostart
from services.print_server import PrintServer
from services.relay_service import RelayService
from tests.helpers import free_port, wait_for


@pytest.fixture
def autostart():
    return Mock(spec=Autostart)


@pytest.fixture
def relay(app, config_store, fake_backend, dispatcher, notifier, autostart):
    relay = RelayService(
        config_store,
        fake_backend,
        dispatcher,
        PrintServer(app),
        autostart=autostart,
        notifier=notifier,
    )
    yield relay
    relay.shutdown()


class TestPrinters:

    def test_get_printers(self, relay):
        names = [printer.name for printer in relay.get_printers()]

        assert names == ["Office_Laser", "Label_Printer"]

    def test_enumeration_failure_yields_empty_list(self, relay, fake_backend):
        fake_backend.fail_with = PrintBackendError("enumerate", "lpstat failed (rc=1): ")

        assert relay.get_printers() == []


class TestTestPage:

    def test_requires_selected_printer(self, relay, fake_backend):
        with pytest.raises(ValidationError):
            relay.print_test_page()

        assert fake_backend.raw_jobs == []

    def test_prints_banner_to_selected_printer(self, relay, config_store, fake_backend):
        config_store.update_config("Office_Laser", 9999, False)

        result = relay.print_test_page()

        assert result.printer == "Office_Laser"
        printer, data = fake_backend.raw_jobs[0]
        assert printer == "Office_Laser"
        text = data.decode("utf-8")
        assert "PRINTRELAY TEST PAGE" in text
        assert "Printer: Office_Laser" in text


class TestConfigAndAutostart:

    def test_save_config_toggles_autostart(self, relay, autostart):
        config = relay.save_config("Label_Printer", 9100, True)

        autostart.toggle.assert_called_once_with(True)
        assert config.port == 9100
        assert relay.get_config() == config

    def test_autostart_failure_still_saves(self, relay, autostart):
        autostart.toggle.side_effect = AutostartError("registry locked")

        config = relay.save_config("P", 9100, True)

        assert relay.get_config() == config

    def test_autostart_status(self, relay, autostart):
        autostart.is_enabled.return_value = True

        assert relay.get_autostart_status() is True

    def test_without_autostart(self, config_store, fake_backend, dispatcher, app):
        relay = RelayService(config_store, fake_backend, dispatcher, PrintServer(app))

        assert relay.get_autostart_status() is False
        with pytest.raises(AutostartError):
            relay.set_autostart(True)


class TestServerControl:

    def test_start_uses_configured_port(self, relay, config_store):
        port = free_port()
        config_store.update_config("", port, False)

        relay.start_server()

        assert relay.is_server_running() is True
        assert relay.server.port == port

    def test_double_start_raises(self, relay):
        relay.start_server(free_port())

        with pytest.raises(ServerLifecycleError):
            relay.start_server(free_port())

    def test_stop_server(self, relay):
        relay.start_server(free_port())

        relay.stop_server()

        wait_for(lambda: not relay.is_server_running())
