"""
Configuration types, defaults and exceptions for sins-lsp.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class ConfigVersion(Enum):
    """Configuration version for migration support."""
    V1_0 = "1.0"
    CURRENT = V1_0


class ConfigError(Exception):
    """Raised when configuration is invalid or cannot be accessed."""
    pass


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class WorkspaceDefaults:
    """Values used when no settings store is available or a key is unset."""
    language: str = "en"
    search_max_depth: int = 5
    max_preview_kb: int = 100
    ready_timeout: float = 30.0


DEFAULTS = WorkspaceDefaults()
