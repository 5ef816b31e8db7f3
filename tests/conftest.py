"""
Shared fixtures for the PrintRelay test suite.

Everything runs against FakeBackend and tmp_path: no test talks to a real
printer or writes outside its own temp directory.
"""

import pytest

from app import create_app
from config import TestingConfig
from models.printer import PrinterInfo
from services.config_store import ConfigStore
from services.dispatcher import PrintDispatcher
from services.events import EventNotifier
from services.temp_files import TempFileManager
from tests.fakes.fake_backend import FakeBackend


@pytest.fixture
def fake_backend():
    """Backend with two printers that records every job."""
    return FakeBackend(printers=[
        PrinterInfo(name="Office_Laser", status="Ready"),
        PrinterInfo(name="Label_Printer", status="Offline"),
    ])


@pytest.fixture
def temp_files(tmp_path):
    """Temp file manager confined to the test's directory."""
    manager = TempFileManager(directory=tmp_path)
    yield manager
    manager.cancel_all()


@pytest.fixture
def dispatcher(fake_backend, temp_files):
    """Dispatcher whose cleanup timers never fire on their own."""
    return PrintDispatcher(fake_backend, temp_files, cleanup_delay=60.0)


@pytest.fixture
def config_store(tmp_path):
    return ConfigStore(tmp_path / "print_relay.json")


@pytest.fixture
def events():
    """List of (event, payload) tuples emitted through `notifier`."""
    return []


@pytest.fixture
def notifier(events):
    notifier = EventNotifier()
    notifier.subscribe(lambda event, payload: events.append((event, payload)))
    return notifier


@pytest.fixture
def app(dispatcher, config_store, notifier):
    return create_app(dispatcher, config_store, notifier, TestingConfig)


@pytest.fixture
def client(app):
    return app.test_client()
