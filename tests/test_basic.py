"""Basic unit tests for sins-lsp settings and logging."""

import logging
from pathlib import Path
from typing import Any, List

import pytest


@pytest.fixture
def qsettings(tmp_path: Path) -> Any:
    """An ini-backed QSettings isolated from the user's configuration."""
    from PySide6.QtCore import QSettings

    return QSettings(str(tmp_path / "settings.ini"), QSettings.Format.IniFormat)


class TestSettingsInitialization:
    """Test settings initialization and basic operations."""

    def test_app_settings_init(self) -> None:
        """Test AppSettings can be initialized."""
        from sins_lsp.settings import AppSettings

        settings_obj = AppSettings("pytest")
        assert settings_obj is not None
        assert settings_obj.version == "1.0"

    def test_app_settings_validation(self) -> None:
        """Test settings validation returns result."""
        from sins_lsp.settings import AppSettings

        settings_obj = AppSettings("pytest")
        validation = settings_obj.validate()
        assert validation is not None

    def test_defaults(self) -> None:
        """Test the documented defaults."""
        from sins_lsp.settings import DEFAULTS

        assert DEFAULTS.language == "en"
        assert DEFAULTS.search_max_depth == 5
        assert DEFAULTS.max_preview_kb == 100


class TestWorkspaceSettings:
    """Test workspace settings accessors."""

    def test_unset_values_use_defaults(self, qsettings: Any) -> None:
        """Test a fresh store yields the defaults."""
        from sins_lsp.settings import DEFAULTS, WorkspaceSettings

        workspace = WorkspaceSettings(qsettings)
        assert workspace.workspace_path is None
        assert workspace.language == DEFAULTS.language
        assert workspace.search_max_depth == DEFAULTS.search_max_depth
        assert workspace.ready_timeout == DEFAULTS.ready_timeout

    def test_round_trip(self, qsettings: Any, tmp_path: Path) -> None:
        """Test written values are read back."""
        from sins_lsp.settings import WorkspaceSettings

        workspace = WorkspaceSettings(qsettings)
        workspace.workspace_path = tmp_path
        workspace.language = "fr"
        workspace.max_preview_kb = 250

        assert workspace.workspace_path == tmp_path
        assert workspace.language == "fr"
        assert workspace.max_preview_kb == 250

    def test_invalid_values_are_rejected(self, qsettings: Any) -> None:
        """Test bad input keeps the current value."""
        from sins_lsp.settings import WorkspaceSettings

        workspace = WorkspaceSettings(qsettings)
        workspace.language = "../etc"
        workspace.max_preview_kb = 0
        workspace.search_max_depth = 100

        assert workspace.language == "en"
        assert workspace.max_preview_kb == 100
        assert workspace.search_max_depth == 32


class TestSettingsMigration:
    """Test configuration migration."""

    def test_first_run_sets_version(self, qsettings: Any) -> None:
        """Test an empty store is stamped with the current version."""
        from sins_lsp.settings.migration import SettingsMigrator

        SettingsMigrator(qsettings).ensure_version()
        assert qsettings.value("app/version") == "1.0"

    def test_foreign_version_is_restamped(self, qsettings: Any) -> None:
        """Test another version is replaced and recorded, keys untouched."""
        from sins_lsp.settings.migration import SettingsMigrator

        qsettings.setValue("app/version", "0.9")
        qsettings.setValue("workspace/language", "de")

        SettingsMigrator(qsettings).ensure_version()

        assert qsettings.value("app/version") == "1.0"
        assert qsettings.value("app/migrated_from") == "0.9"
        assert qsettings.value("workspace/language") == "de"


class TestUtilsLogging:
    """Test logging configuration."""

    def test_logging_setup_with_settings(self) -> None:
        """Test logging setup works with settings."""
        from sins_lsp.settings import AppSettings
        from sins_lsp.utils.logging_config import get_editor_log_handler, setup_logging

        settings_obj = AppSettings("pytest")
        handler = setup_logging(settings=settings_obj)

        logger = logging.getLogger("sins_lsp")
        assert handler is get_editor_log_handler()
        assert logger.level == logging.DEBUG

    def test_editor_handler_buffers_and_replays(self) -> None:
        """Test early records are replayed once a callback is set."""
        from sins_lsp.utils.logging_config import EditorLogFormatter, EditorLogHandler

        handler = EditorLogHandler(max_lines=2)
        handler.setFormatter(EditorLogFormatter())
        logger = logging.getLogger("sins_lsp.tests.editor")
        logger.addHandler(handler)
        try:
            for i in range(3):
                logger.warning(f"message {i}")
        finally:
            logger.removeHandler(handler)

        assert [r.getMessage() for r in handler.get_buffer()] == ["message 1", "message 2"]

        received: List[str] = []
        handler.set_log_callback(lambda record, msg: received.append(msg))
        assert len(received) == 2
        assert "message 2" in received[1]

    def test_error_callback(self) -> None:
        """Test only errors reach the error callback."""
        from sins_lsp.utils.logging_config import EditorLogHandler

        handler = EditorLogHandler()
        errors: List[str] = []
        handler.set_error_callback(lambda record, msg: errors.append(record.getMessage()))

        logger = logging.getLogger("sins_lsp.tests.errors")
        logger.addHandler(handler)
        try:
            logger.warning("fine")
            logger.error("broken")
        finally:
            logger.removeHandler(handler)

        assert errors == ["broken"]
