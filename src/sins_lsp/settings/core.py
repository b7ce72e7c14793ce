"""
Core settings management for sins-lsp.
"""

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QSettings

from .types import ConfigError, ConfigVersion, ValidationResult
from .migration import SettingsMigrator
from .validation import SettingsValidator
from .workspace import WorkspaceSettings
from .logging import LoggingSettings

logger = logging.getLogger(__name__)


class AppSettings:
    """
    Configuration management using QSettings.

    Provides type-safe access to server settings with automatic
    cross-platform storage and validation.
    """

    def __init__(self, profile: str = "default"):
        """Initialize settings for the given profile.

        Args:
            profile: Settings profile name (default: "default")

        Raises:
            ConfigError: If the settings store cannot be read or written
        """
        self.settings = QSettings("sins-lsp", "sins_lsp")
        self.profile = profile

        # Profile group: sins-lsp/sins_lsp/<profile>/...
        self.settings.beginGroup(profile)

        self._migrator = SettingsMigrator(self.settings)
        self._validator = SettingsValidator(self)
        self._workspace = WorkspaceSettings(self.settings)
        self._logging = LoggingSettings(self.settings)

        self._migrator.ensure_version()

        if self.settings.status() != QSettings.Status.NoError:
            raise ConfigError(
                f"Settings store at {self.settings.fileName()} is not usable: {self.settings.status().name}"
            )

        logger.debug(
            f"Settings initialized for profile '{profile}', stored at: {self.settings.fileName()}"
        )

    # === SUBSYSTEM ACCESS ===

    @property
    def workspace(self) -> WorkspaceSettings:
        """Access workspace settings subsystem."""
        return self._workspace

    @property
    def logging(self) -> LoggingSettings:
        """Access logging settings subsystem."""
        return self._logging

    @property
    def version(self) -> str:
        """Get configuration version."""
        value = self.settings.value("app/version", ConfigVersion.CURRENT.value)
        return str(value) if value is not None else ConfigVersion.CURRENT.value

    # === WORKSPACE SETTINGS (DELEGATED) ===

    @property
    def workspace_path(self) -> Optional[Path]:
        """Get the workspace root directory."""
        return self._workspace.workspace_path

    @workspace_path.setter
    def workspace_path(self, value: Optional[Path]) -> None:
        self._workspace.workspace_path = value

    @property
    def language(self) -> str:
        """Get the active localization language code."""
        return self._workspace.language

    @language.setter
    def language(self, value: str) -> None:
        self._workspace.language = value

    @property
    def search_max_depth(self) -> int:
        return self._workspace.search_max_depth

    @search_max_depth.setter
    def search_max_depth(self, value: int) -> None:
        self._workspace.search_max_depth = value

    @property
    def max_preview_kb(self) -> int:
        return self._workspace.max_preview_kb

    @max_preview_kb.setter
    def max_preview_kb(self, value: int) -> None:
        self._workspace.max_preview_kb = value

    @property
    def schemas_path(self) -> Optional[Path]:
        return self._workspace.schemas_path

    @schemas_path.setter
    def schemas_path(self, value: Optional[Path]) -> None:
        self._workspace.schemas_path = value

    @property
    def ready_timeout(self) -> float:
        return self._workspace.ready_timeout

    @ready_timeout.setter
    def ready_timeout(self, value: float) -> None:
        self._workspace.ready_timeout = value

    # === LOGGING SETTINGS (DELEGATED) ===

    @property
    def console_logging(self) -> bool:
        """Check if console logging is enabled."""
        return self._logging.console_logging

    @console_logging.setter
    def console_logging(self, value: bool) -> None:
        self._logging.console_logging = value

    @property
    def console_log_level(self) -> str:
        """Get console logging level."""
        return self._logging.console_log_level

    @console_log_level.setter
    def console_log_level(self, value: str) -> None:
        self._logging.console_log_level = value

    @property
    def console_use_colors(self) -> bool:
        """Check if console should use colors."""
        return self._logging.console_use_colors

    @console_use_colors.setter
    def console_use_colors(self, value: bool) -> None:
        self._logging.console_use_colors = value

    @property
    def file_logging(self) -> bool:
        """Check if file logging is enabled."""
        return self._logging.file_logging

    @file_logging.setter
    def file_logging(self, value: bool) -> None:
        self._logging.file_logging = value

    @property
    def log_file_path(self) -> str:
        """Get log file path (read-only)."""
        return self._logging.log_file_path

    @property
    def editor_log_level(self) -> str:
        """Get the level forwarded to the editor's output channel."""
        return self._logging.editor_log_level

    @editor_log_level.setter
    def editor_log_level(self, value: str) -> None:
        self._logging.editor_log_level = value

    @property
    def editor_max_lines(self) -> int:
        """Get maximum number of records kept for the editor channel."""
        return self._logging.editor_max_lines

    @editor_max_lines.setter
    def editor_max_lines(self, value: int) -> None:
        self._logging.editor_max_lines = value

    # === VALIDATION ===

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        return self._validator.validate()

    # === UTILITY METHODS ===

    def get_settings_file_path(self) -> str:
        """Get the file path where settings are stored."""
        return self.settings.fileName()

    def sync(self) -> None:
        """Force synchronization of settings to storage."""
        self.settings.sync()
