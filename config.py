"""
Configuration for PrintRelay.

Process-level settings come from the environment (a .env file is loaded
first). The user-editable settings - selected printer, port, autostart -
live in the JSON config file managed by services.config_store.ConfigStore;
PRINT_RELAY_PORT only seeds that file the first time it is created.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from models.settings import DEFAULT_CLEANUP_DELAY, DEFAULT_PORT

# Load .env file early so environment variables are available for Config class
# This must happen before the Config class is defined
load_dotenv(override=True)

class Config:
    """Default configuration for the print relay."""

    ENVIRONMENT = os.environ.get("PRINT_RELAY_ENV", "development")
    DEBUG = os.environ.get("PRINT_RELAY_DEBUG", "0") == "1"
    TESTING = False

    # Listener
    # Only local web clients are expected; set 0.0.0.0 to accept LAN clients.
    HOST = os.environ.get("PRINT_RELAY_HOST", "127.0.0.1")
    DEFAULT_PORT = int(os.environ.get("PRINT_RELAY_PORT", str(DEFAULT_PORT)))

    # Persistent user settings (selected printer, port, autostart)
    CONFIG_FILE = os.environ.get(
        "PRINT_RELAY_CONFIG_FILE", str(Path.cwd() / "print_relay.json")
    )

    # Logs
    LOG_DIR = os.environ.get(
        "PRINT_RELAY_LOG_DIR", str(Path.cwd() / "storage" / "logs")
    )

    # Seconds a decoded PDF stays on disk after submission. The OS print
    # verb reads the file asynchronously, so it cannot be removed at once.
    CLEANUP_DELAY_SECONDS = float(
        os.environ.get("PRINT_RELAY_CLEANUP_DELAY", str(DEFAULT_CLEANUP_DELAY))
    )


class ProductionConfig(Config):
    """Production configuration."""
    ENVIRONMENT = "production"
    DEBUG = False
    TESTING = False


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    CLEANUP_DELAY_SECONDS = 0.0


CONFIG_BY_ENVIRONMENT = {
    "production": ProductionConfig,
    "development": DevelopmentConfig,
    "testing": TestingConfig,
}


def get_config_class(environment: str = Config.ENVIRONMENT):
    """Config class for an environment name; unknown names get Config."""
    return CONFIG_BY_ENVIRONMENT.get(environment, Config)
