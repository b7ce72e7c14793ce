"""
Pointer classification: which reference category a string value names.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Set, Tuple

from ..cache.models import ReferenceCategory
from ..schema.document import TextDocument
from ..schema.json_ast import ASTNode, StringNode, find_properties, owning_property, string_values
from ..schema.matcher import SchemaMatch, get_matching_schemas
from ..schema.patches import AnnotatedSchema, annotated_properties
from ..schema.store import SchemaStore

logger = logging.getLogger(__name__)


@dataclass
class AnalyzedDocument:
    """A parsed document with its schema and schema matches."""
    document: TextDocument
    root: ASTNode
    schema: Optional[AnnotatedSchema] = None
    matches: List[SchemaMatch] = field(default_factory=list)

    def matches_for(self, node: ASTNode) -> List[SchemaMatch]:
        """Matches whose covered node is exactly `node`."""
        return [m for m in self.matches if m.node is node]


def analyze(document: TextDocument, schemas: SchemaStore) -> AnalyzedDocument:
    """Parse a document and match it against its associated schema.

    Raises `JsonSyntaxError` when the text is not JSON.
    """
    root = document.ast()
    schema = schemas.schema_for_document(document.file_name)
    if schema is None:
        logger.debug(f"No schema for {document.file_name}")
        return AnalyzedDocument(document, root)
    return AnalyzedDocument(document, root, schema, get_matching_schemas(schema, root))


def classify(analyzed: AnalyzedDocument, node: ASTNode) -> Optional[ReferenceCategory]:
    """Return the reference category of a value node, or None.

    Walks up to the owning property, then asks every schema match covering
    the node whether that property is annotated in its subschema. A match
    only counts when it governs the object that owns the property. The
    first annotated match wins.
    """
    if analyzed.schema is None:
        return None
    prop = owning_property(node)
    if prop is None:
        return None
    owner = prop.parent

    for match in analyzed.matches:
        if match.node is not owner or not match.node.covers(node):
            continue
        category = analyzed.schema.category_of(match.pointer, prop.name)
        if category is not None:
            return category
    return None


def iter_references(analyzed: AnalyzedDocument) -> Iterator[Tuple[StringNode, ReferenceCategory]]:
    """Yield every string value held by an annotated property, with its category."""
    if analyzed.schema is None:
        return
    names = annotated_properties(analyzed.schema)
    seen: Set[int] = set()
    for name in names:
        for prop in find_properties(analyzed.root, name):
            for value in string_values(prop.value_node):
                if id(value) in seen:
                    continue
                seen.add(id(value))
                category = classify(analyzed, value)
                if category is not None:
                    yield value, category
