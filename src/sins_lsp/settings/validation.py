"""
Settings validation system for sins-lsp.
"""

import logging
from typing import List, TYPE_CHECKING

from .types import ValidationResult
from .workspace import LANGUAGE_CODE_RE

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)


class SettingsValidator:
    """Validates configuration settings."""

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        errors: List[str] = []
        warnings: List[str] = []

        workspace_path = self.settings.workspace_path
        if workspace_path:
            if not workspace_path.exists():
                errors.append(f"Workspace path does not exist: {workspace_path}")
            elif not workspace_path.is_dir():
                errors.append(f"Workspace path is not a directory: {workspace_path}")
        else:
            warnings.append("Workspace path not set")

        if not LANGUAGE_CODE_RE.match(self.settings.language):
            warnings.append(f"Suspicious language code: {self.settings.language!r}")

        schemas_path = self.settings.schemas_path
        if schemas_path and not schemas_path.is_dir():
            warnings.append(
                f"Schemas directory not found, bundled schemas will be used: {schemas_path}"
            )

        return ValidationResult(
            is_valid=len(errors) == 0, errors=errors, warnings=warnings
        )
