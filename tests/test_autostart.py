"""
Tests for launch-at-login registration (file-based platforms only).
"""

import plistlib

import pytest

from core.exceptions import AutostartError
from services.autostart import (
    LAUNCH_AGENT_LABEL,
    DesktopEntryAutostart,
    LaunchAgentAutostart,
    RegistryAutostart,
    create_autostart,
)


COMMAND = ["/opt/print relay/printrelay", "--headless"]


class TestDesktopEntry:

    def test_enable_writes_entry(self, tmp_path):
        autostart = DesktopEntryAutostart(COMMAND, config_home=tmp_path)

        autostart.toggle(True)

        assert autostart.is_enabled() is True
        entry = autostart.entry_path.read_text()
        assert "[Desktop Entry]" in entry
        assert "Exec='/opt/print relay/printrelay' --headless" in entry

    def test_disable_removes_entry(self, tmp_path):
        autostart = DesktopEntryAutostart(COMMAND, config_home=tmp_path)
        autostart.enable()

        autostart.toggle(False)

        assert autostart.is_enabled() is False

    def test_disable_when_absent(self, tmp_path):
        DesktopEntryAutostart(COMMAND, config_home=tmp_path).disable()

    def test_write_failure(self, tmp_path):
        blocker = tmp_path / "autostart"
        blocker.write_text("not a directory")

        with pytest.raises(AutostartError):
            DesktopEntryAutostart(COMMAND, config_home=tmp_path).enable()


class TestLaunchAgent:

    def test_enable_writes_plist(self, tmp_path):
        autostart = LaunchAgentAutostart(COMMAND, agents_dir=tmp_path)

        autostart.enable()

        with open(autostart.plist_path, "rb") as f:
            agent = plistlib.load(f)
        assert agent["Label"] == LAUNCH_AGENT_LABEL
        assert agent["ProgramArguments"] == COMMAND
        assert agent["RunAtLoad"] is True

    def test_disable(self, tmp_path):
        autostart = LaunchAgentAutostart(COMMAND, agents_dir=tmp_path)
        autostart.enable()

        autostart.disable()

        assert not autostart.plist_path.exists()


@pytest.mark.parametrize("system, expected", [
    ("Windows", RegistryAutostart),
    ("Darwin", LaunchAgentAutostart),
    ("Linux", DesktopEntryAutostart),
])
def test_create_autostart_per_platform(system, expected):
    assert isinstance(create_autostart(system, command=COMMAND), expected)
