"""Settings loader and singleton manager.

This module handles:
- Environment variable loading from .env files
- Configuration file loading from TOML
- Thread-safe singleton pattern for the Settings instance
- Logging setup from the loaded settings
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from photoscout.config.models.settings import Settings
from photoscout.shared.constants import Application, FileSystem
from photoscout.shared.errors import create_config_error
from photoscout.shared.logging import setup_structured_logger

logger = logging.getLogger(__name__)


class SettingsLoader:
    """Thread-safe singleton manager for Settings.

    Uses double-checked locking to keep the common read path lock free.
    """

    _instance: Settings | None = None
    _lock: threading.RLock = threading.RLock()

    def get_config(self) -> Settings:
        """Get the global settings instance, loading it if necessary."""
        if self._instance is None:
            with self._lock:
                if self._instance is None:
                    self._instance = load_settings()

        return self._instance

    def reload_config(self) -> Settings:
        """Reload the global settings instance from configuration files."""
        with self._lock:
            self._instance = load_settings()

        return self._instance

    def reset(self) -> None:
        """Forget the loaded instance (next get_config loads again)."""
        with self._lock:
            self._instance = None


def _load_env_file(env_file: Path = Path(FileSystem.ENV_FILE)) -> bool:
    """Load environment variables from a .env file when one exists.

    Variables already present in the environment are kept.

    Returns:
        True if a file was loaded
    """
    if not env_file.exists():
        return False
    load_dotenv(env_file, override=False)
    logger.debug("Loaded environment from %s", env_file)
    return True


def default_config_paths() -> list[Path]:
    return [
        Path("config") / FileSystem.CONFIG_FILE,
        Path(FileSystem.CONFIG_FILE),
        Path.home() / FileSystem.HOME_DIR / FileSystem.CONFIG_FILE,
    ]


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from a TOML configuration file or the environment.

    Args:
        config_path: Optional path to a TOML file. When omitted, the default
            locations are tried in order, then environment variables alone.

    Returns:
        Settings instance loaded from the specified source

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
        ApplicationError: If the configuration values are invalid
    """
    _load_env_file()

    try:
        if config_path:
            return Settings.from_toml_file(config_path)

        for candidate in default_config_paths():
            if candidate.exists():
                return Settings.from_toml_file(candidate)

        return Settings()
    except ValidationError as e:
        raise create_config_error(
            f"Invalid configuration: {e.error_count()} error(s)",
            config_key=str(config_path) if config_path else None,
            operation="load_settings",
            original_error=e,
        ) from e


def configure_logging(settings: Settings) -> logging.Logger:
    """Set up the application logger from the logging settings.

    Debug mode forces the DEBUG level.
    """
    log_settings = settings.logging
    level = "DEBUG" if settings.app.debug else log_settings.level
    return setup_structured_logger(
        Application.LOGGER_NAME,
        level=level,
        log_file=log_settings.file,
        use_rich_console=log_settings.rich_console,
        console_output=log_settings.console_output,
    )


# Global loader instance
_loader = SettingsLoader()


def get_config() -> Settings:
    """Get the global settings instance (thread-safe)."""
    return _loader.get_config()


def reload_config() -> Settings:
    """Reload the global settings instance from configuration files."""
    return _loader.reload_config()
