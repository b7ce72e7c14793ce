"""
Result models returned to the editor protocol layer.

Plain dataclasses shaped after the Language Server Protocol types so the
transport can serialize them without knowing anything about references.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional

from ..schema.document import Position, Range


class DiagnosticSeverity(IntEnum):
    ERROR = 1
    WARNING = 2
    INFORMATION = 3
    HINT = 4


class CompletionItemKind(IntEnum):
    TEXT = 1
    VALUE = 12
    FILE = 17
    REFERENCE = 18


@dataclass(frozen=True)
class Diagnostic:
    range: Range
    message: str
    severity: DiagnosticSeverity = DiagnosticSeverity.ERROR
    source: str = "sins"
    code: Optional[str] = None


@dataclass(frozen=True)
class Hover:
    """Markdown hover contents."""
    contents: str
    range: Optional[Range] = None


@dataclass(frozen=True)
class Location:
    uri: str
    range: Range


@dataclass(frozen=True)
class CompletionItem:
    label: str
    kind: CompletionItemKind = CompletionItemKind.VALUE
    insert_text: Optional[str] = None
    detail: Optional[str] = None
    text_edit_range: Optional[Range] = None


@dataclass
class CompletionList:
    items: List[CompletionItem] = field(default_factory=list)
    is_incomplete: bool = False


@dataclass(frozen=True)
class SessionContext:
    """Per-session request context.

    Immutable: a language change from the editor replaces the context
    instead of mutating it, so a request keeps the language it started with.
    """
    language: str = "en"


__all__ = [
    "Position",
    "Range",
    "DiagnosticSeverity",
    "CompletionItemKind",
    "Diagnostic",
    "Hover",
    "Location",
    "CompletionItem",
    "CompletionList",
    "SessionContext",
]
