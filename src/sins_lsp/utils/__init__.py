"""Utility helpers for sins-lsp."""

from .logging_config import (
    ColoredFormatter,
    CSVFormatter,
    EditorLogFormatter,
    EditorLogHandler,
    get_editor_log_handler,
    setup_logging,
)

__all__ = [
    "ColoredFormatter",
    "CSVFormatter",
    "EditorLogFormatter",
    "EditorLogHandler",
    "get_editor_log_handler",
    "setup_logging",
]
