"""
Persistent user settings.

ConfigStore is the configuration provider the server reads on every
request (selected printer) and on every start (port). The settings live in
a small JSON file:

    {"selected_printer": "Office_Laser", "port": 9999, "auto_start": false}

A missing file is created with defaults on first load. A file that exists
but cannot be parsed raises ConfigError rather than being overwritten.

Thread Safety:
    - get_config() returns a frozen RelayConfig, so readers never see a
      half-updated value
    - update_config() writes a sibling temp file and renames it over the
      original, so a crash never leaves a truncated config behind
"""

from __future__ import annotations

import json
import os
import threading
from pathlib import Path
from typing import Optional

from core.exceptions import ConfigError, ValidationError
from logging_config import get_logger
from models.settings import DEFAULT_PORT, RelayConfig


logger = get_logger(__name__)


class ConfigStore:
    """JSON-file backed configuration provider."""

    def __init__(self, path: str | Path, default_port: int = DEFAULT_PORT):
        """
        Args:
            path: Config file location
            default_port: Port written to a newly created config file
        """
        self._path = Path(path)
        self._default_port = default_port
        self._lock = threading.Lock()
        self._current: Optional[RelayConfig] = None

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> RelayConfig:
        """
        (Re)read the config file, creating it with defaults if missing.

        Raises:
            ConfigError: If the file exists but is not valid JSON settings
        """
        with self._lock:
            self._current = self._read_or_create()
            return self._current

    def get_config(self) -> RelayConfig:
        """Current settings; loads the file on first use."""
        with self._lock:
            if self._current is None:
                self._current = self._read_or_create()
            return self._current

    def update_config(self, printer: str, port: int, auto_start: bool) -> RelayConfig:
        """
        Persist new settings and make them the current value.

        Raises:
            ValidationError: If port is not an integer in 1-65535
            ConfigError: If the file cannot be written
        """
        try:
            port_number = int(port)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid port: {port}", {"port": port}) from None

        if not 0 < port_number < 65536:
            raise ValidationError(f"Invalid port: {port}", {"port": port})

        config = RelayConfig(
            selected_printer=printer or "",
            port=port_number,
            auto_start=bool(auto_start),
        )

        with self._lock:
            self._write(config)
            self._current = config

        logger.info(
            f"Config updated: printer={config.selected_printer or '<default>'} "
            f"port={config.port} auto_start={config.auto_start}"
        )
        return config

    def _read_or_create(self) -> RelayConfig:
        if not self._path.exists():
            config = RelayConfig(port=self._default_port)
            logger.info(f"Config file not found, creating defaults at {self._path}")
            self._write(config)
            return config

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigError(f"Failed to read config file: {e}", str(self._path)) from e

        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a JSON object", str(self._path))

        try:
            return RelayConfig.from_dict(data, default_port=self._default_port)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid config value: {e}", str(self._path)) from e

    def _write(self, config: RelayConfig) -> None:
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as e:
            raise ConfigError(f"Failed to write config file: {e}", str(self._path)) from e
