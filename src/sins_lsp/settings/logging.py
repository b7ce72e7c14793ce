"""
Logging-related settings for sins-lsp.
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)

LOG_FILE_PATH = "logs/sins_lsp.csv"

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggingSettings:
    """Manages logging-related settings."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def _get_str(self, key: str, default: str = "") -> str:
        """Type-safe string retrieval from settings."""
        value = self.settings.value(key, default)
        return str(value) if value is not None else default

    def _get_bool(self, key: str, default: bool = False) -> bool:
        """Type-safe boolean retrieval from settings."""
        value = self.settings.value(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes")
        return bool(value) if value is not None else default

    def _set_level(self, key: str, value: str, current: str) -> None:
        if value.upper() in VALID_LEVELS:
            self.settings.setValue(key, value.upper())
            self.settings.sync()
        else:
            logger.warning(f"Invalid log level for {key}: {value}, keeping current: {current}")

    # === CONSOLE (STDERR) LOGGING ===

    @property
    def console_logging(self) -> bool:
        """Check if console logging is enabled."""
        return self._get_bool("logging/console_enabled", True)

    @console_logging.setter
    def console_logging(self, value: bool) -> None:
        """Set console logging enabled state."""
        self.settings.setValue("logging/console_enabled", value)
        self.settings.sync()

    @property
    def console_log_level(self) -> str:
        """Get console logging level."""
        return self._get_str("logging/console_level", "INFO")

    @console_log_level.setter
    def console_log_level(self, value: str) -> None:
        """Set console logging level."""
        self._set_level("logging/console_level", value, self.console_log_level)

    @property
    def console_use_colors(self) -> bool:
        """Check if console should use colors."""
        return self._get_bool("logging/console_use_colors", False)

    @console_use_colors.setter
    def console_use_colors(self, value: bool) -> None:
        """Set console color usage."""
        self.settings.setValue("logging/console_use_colors", value)
        self.settings.sync()

    # === FILE LOGGING ===

    @property
    def file_logging(self) -> bool:
        """Check if file logging is enabled."""
        return self._get_bool("logging/file_enabled", False)

    @file_logging.setter
    def file_logging(self, value: bool) -> None:
        """Set file logging enabled state."""
        self.settings.setValue("logging/file_enabled", value)
        self.settings.sync()

    @property
    def log_file_path(self) -> str:
        """Get log file path (read-only, always returns constant)."""
        return LOG_FILE_PATH

    # === EDITOR OUTPUT CHANNEL ===

    @property
    def editor_log_level(self) -> str:
        """Get the level forwarded to the editor's output channel."""
        return self._get_str("logging/editor_level", "INFO")

    @editor_log_level.setter
    def editor_log_level(self, value: str) -> None:
        """Set the level forwarded to the editor's output channel."""
        self._set_level("logging/editor_level", value, self.editor_log_level)

    @property
    def editor_max_lines(self) -> int:
        """Get maximum number of records kept for the editor channel."""
        value = self.settings.value("logging/editor_max_lines", 1000)
        try:
            return int(str(value)) if value is not None else 1000
        except (ValueError, TypeError):
            return 1000

    @editor_max_lines.setter
    def editor_max_lines(self, value: int) -> None:
        """Set maximum number of records kept for the editor channel."""
        if value > 0:
            self.settings.setValue("logging/editor_max_lines", value)
            self.settings.sync()
        else:
            logger.warning(
                f"Invalid editor max lines: {value}, keeping current: {self.editor_max_lines}"
            )
