"""
Settings package for sins-lsp.

Type-safe configuration management backed by Qt's QSettings for
cross-platform storage.

Usage:
    from sins_lsp.settings import AppSettings, ValidationResult

    settings = AppSettings()
    result = settings.validate()
"""

from .core import AppSettings
from .types import ConfigVersion, ConfigError, ValidationResult, WorkspaceDefaults, DEFAULTS
from .workspace import WorkspaceSettings
from .logging import LoggingSettings

__all__ = [
    "AppSettings",
    "ConfigVersion",
    "ConfigError",
    "ValidationResult",
    "WorkspaceDefaults",
    "DEFAULTS",
    "WorkspaceSettings",
    "LoggingSettings",
]
