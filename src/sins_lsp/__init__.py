"""
sins-lsp: reference resolution for Sins of a Solar Empire II mod data

Indexes a mod workspace, keeps typed caches of every valid identifier and
checks, previews, locates and completes cross-file references in JSON
documents.
"""

__version__ = "0.1.0"
__author__ = "sins-lsp Contributors"

# Core service imports
from .service import ReferenceService, StoreNotReadyError
from .utils.logging_config import setup_logging

# Main data models
from .cache.models import ReferenceCategory
from .references.models import (
    Diagnostic, Hover, Location, CompletionItem, CompletionList, SessionContext
)

__all__ = [
    # Services
    'ReferenceService',
    'StoreNotReadyError',

    # Logging
    'setup_logging',

    # Data models
    'ReferenceCategory',
    'Diagnostic',
    'Hover',
    'Location',
    'CompletionItem',
    'CompletionList',
    'SessionContext',
]
