"""
JSON documents, schemas and schema matching.

Parses document text into a syntax tree with offsets, resolves the schema
for a document, applies in-memory patches and pointer annotations, and
reports which subschemas govern which nodes.
"""

from .json_ast import (
    ASTNode,
    ArrayNode,
    BooleanNode,
    JsonSyntaxError,
    NullNode,
    NumberNode,
    ObjectNode,
    PropertyNode,
    StringNode,
    find_properties,
    is_property_key,
    is_value_node,
    node_at_offset,
    owning_property,
    parse,
    string_values,
    to_python,
)
from .document import Position, Range, TextDocument, path_to_uri, uri_to_path
from .associations import SCHEMA_ASSOCIATIONS, UNKNOWN_SCHEMA, schema_file_for
from .patches import (
    AnnotatedSchema,
    AnnotationRule,
    Annotations,
    annotate,
    patch_schema,
    prepare_schema,
)
from .store import SchemaLoadError, SchemaStore
from .matcher import SchemaMatch, SchemaMatcher, get_matching_schemas
from .validation import SchemaProblem, validate

__all__ = [
    "ASTNode",
    "ArrayNode",
    "BooleanNode",
    "JsonSyntaxError",
    "NullNode",
    "NumberNode",
    "ObjectNode",
    "PropertyNode",
    "StringNode",
    "find_properties",
    "is_property_key",
    "is_value_node",
    "node_at_offset",
    "owning_property",
    "parse",
    "string_values",
    "to_python",
    "Position",
    "Range",
    "TextDocument",
    "path_to_uri",
    "uri_to_path",
    "SCHEMA_ASSOCIATIONS",
    "UNKNOWN_SCHEMA",
    "schema_file_for",
    "AnnotatedSchema",
    "AnnotationRule",
    "Annotations",
    "annotate",
    "patch_schema",
    "prepare_schema",
    "SchemaLoadError",
    "SchemaStore",
    "SchemaMatch",
    "SchemaMatcher",
    "get_matching_schemas",
    "SchemaProblem",
    "validate",
]
