"""
Generic JSON schema validation mapped back onto syntax tree nodes.
"""

import logging
from dataclasses import dataclass
from typing import List

from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError
from jsonschema.validators import validator_for

from .json_ast import ASTNode, ObjectNode, node_at_path, to_python
from .patches import AnnotatedSchema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaProblem:
    node: ASTNode
    message: str
    keyword: str = ""


def _problems_for(error: ValidationError, root: ASTNode) -> List[SchemaProblem]:
    node = node_at_path(root, error.absolute_path)
    keyword = str(error.validator)

    # Point at each offending key instead of the whole object
    if keyword == "additionalProperties" and isinstance(node, ObjectNode):
        allowed = error.schema.get("properties", {}) if isinstance(error.schema, dict) else {}
        extra = [p for p in node.properties if p.name not in allowed]
        if extra and not (isinstance(error.schema, dict) and error.schema.get("patternProperties")):
            return [
                SchemaProblem(p.key_node, f"Property {p.name} is not allowed.", keyword)
                for p in extra
            ]
    return [SchemaProblem(node, error.message, keyword)]


def validate(annotated: AnnotatedSchema, root: ASTNode) -> List[SchemaProblem]:
    """Validate a document against its schema.

    A schema that cannot be evaluated (bad ``$ref``, invalid keyword) is
    logged and contributes no problems.
    """
    cls = validator_for(annotated.schema, default=Draft7Validator)
    validator = cls(annotated.schema)
    problems: List[SchemaProblem] = []
    try:
        for error in validator.iter_errors(to_python(root)):
            problems.extend(_problems_for(error, root))
    except Exception as e:
        logger.error(f"Schema validation failed for {annotated.file_name}: {e}")
        return []
    problems.sort(key=lambda p: p.node.offset)
    return problems
