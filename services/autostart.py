"""
Launch-at-login registration.

One implementation per platform, selected by create_autostart():
    Linux/other: XDG autostart .desktop entry
    macOS:       LaunchAgent plist in ~/Library/LaunchAgents
    Windows:     value under HKCU\\...\\CurrentVersion\\Run

The relay only ever calls toggle() and is_enabled().
"""

from __future__ import annotations

import os
import platform
import plistlib
import shlex
import subprocess
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

from core.exceptions import AutostartError
from logging_config import get_logger


logger = get_logger(__name__)

APP_NAME = "PrintRelay"
LAUNCH_AGENT_LABEL = "com.printrelay.agent"
RUN_KEY = r"Software\Microsoft\Windows\CurrentVersion\Run"


def default_launch_command() -> List[str]:
    """
    Command that starts the relay.

    In a frozen bundle: the executable itself
    In development: the interpreter running app.py
    """
    if getattr(sys, "frozen", False):
        return [sys.executable]
    return [sys.executable, str(Path(__file__).resolve().parents[1] / "app.py")]


class Autostart(ABC):
    """Autostart capability consumed by the relay service."""

    def __init__(self, command: Optional[Sequence[str]] = None):
        self._command = list(command or default_launch_command())

    @property
    def command(self) -> List[str]:
        return list(self._command)

    @abstractmethod
    def is_enabled(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def enable(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def disable(self) -> None:
        raise NotImplementedError

    def toggle(self, enabled: bool) -> None:
        """
        Raises:
            AutostartError: If the OS registration cannot be changed
        """
        if enabled:
            self.enable()
        else:
            self.disable()
        logger.info(f"Autostart {'enabled' if enabled else 'disabled'}")


class DesktopEntryAutostart(Autostart):
    """XDG autostart entry (~/.config/autostart/printrelay.desktop)."""

    def __init__(self, command: Optional[Sequence[str]] = None, config_home: Optional[Path] = None):
        super().__init__(command)
        if config_home is None:
            config_home = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
        self._entry_path = Path(config_home) / "autostart" / f"{APP_NAME.lower()}.desktop"

    @property
    def entry_path(self) -> Path:
        return self._entry_path

    def is_enabled(self) -> bool:
        return self._entry_path.exists()

    def enable(self) -> None:
        entry = "\n".join([
            "[Desktop Entry]",
            "Type=Application",
            f"Name={APP_NAME}",
            f"Exec={shlex.join(self._command)}",
            "X-GNOME-Autostart-enabled=true",
            "",
        ])
        try:
            self._entry_path.parent.mkdir(parents=True, exist_ok=True)
            self._entry_path.write_text(entry, encoding="utf-8")
        except OSError as e:
            raise AutostartError(f"Failed to write autostart entry: {e}") from e

    def disable(self) -> None:
        try:
            self._entry_path.unlink(missing_ok=True)
        except OSError as e:
            raise AutostartError(f"Failed to remove autostart entry: {e}") from e


class LaunchAgentAutostart(Autostart):
    """macOS LaunchAgent, loaded by launchd at the next login."""

    def __init__(self, command: Optional[Sequence[str]] = None, agents_dir: Optional[Path] = None):
        super().__init__(command)
        agents_dir = agents_dir or Path.home() / "Library" / "LaunchAgents"
        self._plist_path = Path(agents_dir) / f"{LAUNCH_AGENT_LABEL}.plist"

    @property
    def plist_path(self) -> Path:
        return self._plist_path

    def is_enabled(self) -> bool:
        return self._plist_path.exists()

    def enable(self) -> None:
        agent = {
            "Label": LAUNCH_AGENT_LABEL,
            "ProgramArguments": self._command,
            "RunAtLoad": True,
        }
        try:
            self._plist_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._plist_path, "wb") as f:
                plistlib.dump(agent, f)
        except OSError as e:
            raise AutostartError(f"Failed to write launch agent: {e}") from e

    def disable(self) -> None:
        try:
            self._plist_path.unlink(missing_ok=True)
        except OSError as e:
            raise AutostartError(f"Failed to remove launch agent: {e}") from e


class RegistryAutostart(Autostart):
    """Windows per-user Run key."""

    def is_enabled(self) -> bool:
        import winreg

        try:
            with winreg.OpenKey(winreg.HKEY_CURRENT_USER, RUN_KEY) as key:
                winreg.QueryValueEx(key, APP_NAME)
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(f"Failed to read autostart registry value: {e}")
            return False
        return True

    def enable(self) -> None:
        import winreg

        try:
            with winreg.CreateKey(winreg.HKEY_CURRENT_USER, RUN_KEY) as key:
                winreg.SetValueEx(key, APP_NAME, 0, winreg.REG_SZ, subprocess.list2cmdline(self._command))
        except OSError as e:
            raise AutostartError(f"Failed to write autostart registry value: {e}") from e

    def disable(self) -> None:
        import winreg

        try:
            with winreg.OpenKey(winreg.HKEY_CURRENT_USER, RUN_KEY, 0, winreg.KEY_SET_VALUE) as key:
                winreg.DeleteValue(key, APP_NAME)
        except FileNotFoundError:
            return
        except OSError as e:
            raise AutostartError(f"Failed to remove autostart registry value: {e}") from e


def create_autostart(system: Optional[str] = None, command: Optional[Sequence[str]] = None) -> Autostart:
    system = system or platform.system()

    if system == "Windows":
        return RegistryAutostart(command)
    if system == "Darwin":
        return LaunchAgentAutostart(command)
    return DesktopEntryAutostart(command)
