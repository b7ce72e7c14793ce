"""
Reference validation: every annotated value must exist in its typed cache.
"""

import logging
from typing import List

from ..cache.models import missing_message
from ..cache.store import TypedCacheStore
from ..schema.document import Range, TextDocument
from ..schema.json_ast import JsonSyntaxError
from ..schema.validation import validate as validate_schema
from .classifier import AnalyzedDocument, iter_references
from .models import Diagnostic, DiagnosticSeverity


def syntax_error_diagnostic(document: TextDocument, error: JsonSyntaxError) -> Diagnostic:
    """A single diagnostic at the offset where parsing stopped."""
    position = document.position_at(error.offset)
    end = document.position_at(min(error.offset + 1, len(document.text)))
    return Diagnostic(
        range=Range(position, end),
        message=f"Invalid JSON: {error.message}",
        severity=DiagnosticSeverity.ERROR,
        source="json",
    )


class ReferenceValidator:
    """Cross-checks string values against the typed caches.

    Diagnostics from the generic schema pass and the reference pass are
    concatenated; neither pass filters or rewrites the other's results.
    """

    def __init__(self, store: TypedCacheStore):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.store = store

    def check_references(self, analyzed: AnalyzedDocument) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = []
        for node, category in iter_references(analyzed):
            if self.store.contains(category, node.value):
                continue
            diagnostics.append(
                Diagnostic(
                    range=analyzed.document.range_of(node),
                    message=missing_message(category, node.value),
                    severity=DiagnosticSeverity.ERROR,
                    source="sins",
                    code=category.value,
                )
            )
        return diagnostics

    def check_schema(self, analyzed: AnalyzedDocument) -> List[Diagnostic]:
        if analyzed.schema is None:
            return []
        return [
            Diagnostic(
                range=analyzed.document.range_of(problem.node),
                message=problem.message,
                severity=DiagnosticSeverity.ERROR,
                source="json-schema",
                code=problem.keyword or None,
            )
            for problem in validate_schema(analyzed.schema, analyzed.root)
        ]

    def validate(self, analyzed: AnalyzedDocument) -> List[Diagnostic]:
        """Schema diagnostics followed by reference diagnostics."""
        schema_diagnostics = self.check_schema(analyzed)
        reference_diagnostics = self.check_references(analyzed)
        self.logger.debug(
            f"{analyzed.document.file_name}: {len(schema_diagnostics)} schema, "
            f"{len(reference_diagnostics)} reference diagnostics"
        )
        return schema_diagnostics + reference_diagnostics
