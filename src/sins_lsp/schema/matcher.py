"""
Schema matching: which subschemas govern which syntax tree nodes.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Set, Tuple

from jsonschema import Draft7Validator
from jsonschema.validators import validator_for

from .json_ast import ASTNode, ArrayNode, ObjectNode, to_python
from .patches import AnnotatedSchema, Schema, escape_pointer_token, local_ref_target, resolve_pointer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaMatch:
    """A subschema, its JSON pointer inside the root schema, and the node it governs."""
    schema: Schema
    pointer: str
    node: ASTNode


class SchemaMatcher:
    """Walks a syntax tree alongside one annotated schema.

    Every subschema applied to a node is reported, including the ones
    reached through ``$ref``, ``allOf`` and the valid branches of
    ``anyOf`` / ``oneOf`` / ``if``.
    """

    def __init__(self, annotated: AnnotatedSchema):
        self.root = annotated.schema
        cls = validator_for(self.root, default=Draft7Validator)
        self.validator = cls(self.root)
        self.matches: List[SchemaMatch] = []
        self._seen: Set[Tuple[str, int]] = set()

    def match(self, node: ASTNode) -> List[SchemaMatch]:
        self.matches = []
        self._seen = set()
        self._visit(self.root, "", node)
        return self.matches

    def _is_valid(self, schema: Any, node: ASTNode) -> bool:
        try:
            return self.validator.evolve(schema=schema).is_valid(to_python(node))
        except Exception as e:
            logger.debug(f"Could not evaluate subschema: {e}")
            return False

    def _visit(self, schema: Any, pointer: str, node: ASTNode) -> None:
        if not isinstance(schema, dict):
            return
        key = (pointer, id(node))
        if key in self._seen:
            return
        self._seen.add(key)
        self.matches.append(SchemaMatch(schema, pointer, node))

        target_pointer = local_ref_target(schema.get("$ref"))
        if target_pointer is not None:
            target = resolve_pointer(self.root, target_pointer)
            if target is not None:
                self._visit(target, target_pointer, node)

        for index, sub in enumerate(schema.get("allOf") or ()):
            self._visit(sub, f"{pointer}/allOf/{index}", node)

        for keyword in ("anyOf", "oneOf"):
            branches = schema.get(keyword)
            if not isinstance(branches, list):
                continue
            valid = [i for i, sub in enumerate(branches) if self._is_valid(sub, node)]
            # No valid branch: keep them all so completion and hover still work
            for index in valid or range(len(branches)):
                self._visit(branches[index], f"{pointer}/{keyword}/{index}", node)

        if "if" in schema:
            branch = "then" if self._is_valid(schema["if"], node) else "else"
            if branch in schema:
                self._visit(schema[branch], f"{pointer}/{branch}", node)

        if isinstance(node, ObjectNode):
            self._visit_object(schema, pointer, node)
        elif isinstance(node, ArrayNode):
            self._visit_array(schema, pointer, node)

    def _visit_object(self, schema: Schema, pointer: str, node: ObjectNode) -> None:
        properties: Dict[str, Any] = schema.get("properties") or {}
        patterns: Dict[str, Any] = schema.get("patternProperties") or {}
        additional = schema.get("additionalProperties")

        for prop in node.properties:
            value = prop.value_node
            if value is None:
                continue
            name = prop.name
            matched = False
            if name in properties:
                self._visit(properties[name], f"{pointer}/properties/{escape_pointer_token(name)}", value)
                matched = True
            for pattern, sub in patterns.items():
                try:
                    if re.search(pattern, name):
                        self._visit(sub, f"{pointer}/patternProperties/{escape_pointer_token(pattern)}", value)
                        matched = True
                except re.error:
                    continue
            if not matched and isinstance(additional, dict):
                self._visit(additional, f"{pointer}/additionalProperties", value)

    def _visit_array(self, schema: Schema, pointer: str, node: ArrayNode) -> None:
        items = schema.get("items")
        if isinstance(items, dict):
            for item in node.items:
                self._visit(items, f"{pointer}/items", item)
        elif isinstance(items, list):
            additional = schema.get("additionalItems")
            for index, item in enumerate(node.items):
                if index < len(items):
                    self._visit(items[index], f"{pointer}/items/{index}", item)
                elif isinstance(additional, dict):
                    self._visit(additional, f"{pointer}/additionalItems", item)


def get_matching_schemas(annotated: AnnotatedSchema, root: ASTNode) -> List[SchemaMatch]:
    """Return every (subschema, covered node) pair for a document."""
    return SchemaMatcher(annotated).match(root)
