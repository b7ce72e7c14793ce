"""
Workspace-related settings for sins-lsp.
"""

import logging
import re
from pathlib import Path
from typing import Optional, TYPE_CHECKING, cast

from .types import DEFAULTS

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)

LANGUAGE_CODE_RE = re.compile(r"^[A-Za-z0-9_\-]+$")


class WorkspaceSettings:
    """Manages workspace paths, localization language and scan limits."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def _get_str(self, key: str, default: str = "") -> str:
        """Type-safe string retrieval from settings."""
        value = self.settings.value(key, default)
        return str(value) if value is not None else default

    def _get_int(self, key: str, default: int = 0) -> int:
        """Type-safe integer retrieval from settings."""
        value = self.settings.value(key, default)
        try:
            if value is None:
                return default
            return int(cast(str | int, value))
        except (ValueError, TypeError):
            return default

    def _get_float(self, key: str, default: float = 0.0) -> float:
        """Type-safe float retrieval from settings."""
        value = self.settings.value(key, default)
        try:
            if value is None:
                return default
            return float(cast(str | float, value))
        except (ValueError, TypeError):
            return default

    @property
    def workspace_path(self) -> Optional[Path]:
        """Get the mod/game workspace root."""
        path_str = self._get_str("workspace/path", "")
        return Path(path_str) if path_str else None

    @workspace_path.setter
    def workspace_path(self, value: Optional[Path]) -> None:
        """Set the mod/game workspace root."""
        self.settings.setValue("workspace/path", str(value) if value else "")
        self.settings.sync()

    @property
    def language(self) -> str:
        """Get the active localization language code."""
        return self._get_str("workspace/language", DEFAULTS.language) or DEFAULTS.language

    @language.setter
    def language(self, value: str) -> None:
        """Set the active localization language code."""
        if not LANGUAGE_CODE_RE.match(value):
            logger.warning(
                f"Invalid language code: {value!r}, keeping current: {self.language}"
            )
            return
        self.settings.setValue("workspace/language", value)
        self.settings.sync()

    @property
    def search_max_depth(self) -> int:
        """Get the maximum directory depth for workspace scans (1-32)."""
        value = self._get_int("workspace/search_max_depth", DEFAULTS.search_max_depth)
        return max(1, min(32, value))

    @search_max_depth.setter
    def search_max_depth(self, value: int) -> None:
        """Set the maximum directory depth for workspace scans (1-32)."""
        self.settings.setValue("workspace/search_max_depth", max(1, min(32, value)))
        self.settings.sync()

    @property
    def max_preview_kb(self) -> int:
        """Get the inline image preview ceiling in kilobytes."""
        value = self._get_int("workspace/max_preview_kb", DEFAULTS.max_preview_kb)
        return max(1, value)

    @max_preview_kb.setter
    def max_preview_kb(self, value: int) -> None:
        """Set the inline image preview ceiling in kilobytes."""
        if value > 0:
            self.settings.setValue("workspace/max_preview_kb", value)
            self.settings.sync()
        else:
            logger.warning(
                f"Invalid preview size: {value}, keeping current: {self.max_preview_kb}"
            )

    @property
    def schemas_path(self) -> Optional[Path]:
        """Get the schema directory override (None = bundled schemas)."""
        path_str = self._get_str("workspace/schemas_path", "")
        return Path(path_str) if path_str else None

    @schemas_path.setter
    def schemas_path(self, value: Optional[Path]) -> None:
        """Set the schema directory override."""
        self.settings.setValue("workspace/schemas_path", str(value) if value else "")
        self.settings.sync()

    @property
    def ready_timeout(self) -> float:
        """Get seconds a request may wait for the first workspace rebuild."""
        value = self._get_float("workspace/ready_timeout", DEFAULTS.ready_timeout)
        return value if value > 0 else DEFAULTS.ready_timeout

    @ready_timeout.setter
    def ready_timeout(self, value: float) -> None:
        """Set seconds a request may wait for the first workspace rebuild."""
        if value > 0:
            self.settings.setValue("workspace/ready_timeout", value)
            self.settings.sync()
