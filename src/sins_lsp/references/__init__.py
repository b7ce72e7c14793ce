"""
Reference classification and its consumers.

Determines which reference category a string value names and checks,
previews, locates and completes it against the index and typed caches.
"""

from .models import (
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    Diagnostic,
    DiagnosticSeverity,
    Hover,
    Location,
    Position,
    Range,
    SessionContext,
)
from .classifier import AnalyzedDocument, analyze, classify, iter_references
from .validator import ReferenceValidator, syntax_error_diagnostic
from .hover import HoverProvider
from .definition import FILE_START, DefinitionProvider, find_key_position
from .completion import CompletionProvider

__all__ = [
    "CompletionItem",
    "CompletionItemKind",
    "CompletionList",
    "Diagnostic",
    "DiagnosticSeverity",
    "Hover",
    "Location",
    "Position",
    "Range",
    "SessionContext",
    "AnalyzedDocument",
    "analyze",
    "classify",
    "iter_references",
    "ReferenceValidator",
    "syntax_error_diagnostic",
    "HoverProvider",
    "DefinitionProvider",
    "FILE_START",
    "find_key_position",
    "CompletionProvider",
]
