"""
JSON syntax tree with source offsets.

A small recursive-descent parser that keeps, for every node, its character
offset and length in the document text plus a parent link, which is what
position-based requests (hover, completion, diagnostics) need and what the
regular JSON decoders throw away.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Union

import orjson


class JsonSyntaxError(ValueError):
    """Raised when document text is not valid JSON."""

    def __init__(self, message: str, offset: int):
        super().__init__(f"{message} at offset {offset}")
        self.message = message
        self.offset = offset


@dataclass(eq=False)
class ASTNode:
    offset: int
    length: int = 0
    parent: Optional["ASTNode"] = field(default=None, repr=False)

    type = "node"

    @property
    def end(self) -> int:
        return self.offset + self.length

    @property
    def children(self) -> Sequence["ASTNode"]:
        return ()

    def contains(self, offset: int, include_end: bool = False) -> bool:
        if include_end:
            return self.offset <= offset <= self.end
        return self.offset <= offset < self.end

    def covers(self, other: "ASTNode") -> bool:
        """True if `other` lies entirely inside this node's source range."""
        return self.offset <= other.offset and other.end <= self.end


@dataclass(eq=False)
class StringNode(ASTNode):
    value: str = ""
    type = "string"


@dataclass(eq=False)
class NumberNode(ASTNode):
    value: Union[int, float] = 0
    type = "number"


@dataclass(eq=False)
class BooleanNode(ASTNode):
    value: bool = False
    type = "boolean"


@dataclass(eq=False)
class NullNode(ASTNode):
    value: None = None
    type = "null"


@dataclass(eq=False)
class PropertyNode(ASTNode):
    key_node: StringNode = field(default_factory=lambda: StringNode(0))
    value_node: Optional[ASTNode] = None
    colon_offset: int = -1
    type = "property"

    @property
    def name(self) -> str:
        return self.key_node.value

    @property
    def children(self) -> Sequence[ASTNode]:
        if self.value_node is None:
            return (self.key_node,)
        return (self.key_node, self.value_node)


@dataclass(eq=False)
class ObjectNode(ASTNode):
    properties: List[PropertyNode] = field(default_factory=list)
    type = "object"

    @property
    def children(self) -> Sequence[ASTNode]:
        return self.properties

    def get(self, name: str) -> Optional[PropertyNode]:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None


@dataclass(eq=False)
class ArrayNode(ASTNode):
    items: List[ASTNode] = field(default_factory=list)
    type = "array"

    @property
    def children(self) -> Sequence[ASTNode]:
        return self.items


ValueNode = Union[ObjectNode, ArrayNode, StringNode, NumberNode, BooleanNode, NullNode]

_NUMBER_RE = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?")

_WHITESPACE = " \t\r\n﻿"

# Deeper documents are rejected instead of exhausting the interpreter stack
MAX_NESTING = 64


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.depth = 0

    def parse(self) -> ASTNode:
        self._skip()
        node = self._value(None)
        self._skip()
        if self.pos != len(self.text):
            raise JsonSyntaxError("End of file expected", self.pos)
        return node

    def _skip(self) -> None:
        text, pos = self.text, self.pos
        while pos < len(text):
            ch = text[pos]
            if ch in _WHITESPACE:
                pos += 1
            elif text.startswith("//", pos):
                newline = text.find("\n", pos)
                pos = len(text) if newline < 0 else newline + 1
            elif text.startswith("/*", pos):
                close = text.find("*/", pos + 2)
                if close < 0:
                    raise JsonSyntaxError("Unterminated comment", pos)
                pos = close + 2
            else:
                break
        self.pos = pos

    def _value(self, parent: Optional[ASTNode]) -> ASTNode:
        if self.pos >= len(self.text):
            raise JsonSyntaxError("Value expected", self.pos)
        ch = self.text[self.pos]
        if ch in "{[":
            if self.depth >= MAX_NESTING:
                raise JsonSyntaxError("Nesting too deep", self.pos)
            self.depth += 1
            try:
                return self._object(parent) if ch == "{" else self._array(parent)
            finally:
                self.depth -= 1
        if ch == '"':
            return self._string(parent)
        for literal, node_type, value in (
            ("true", BooleanNode, True),
            ("false", BooleanNode, False),
            ("null", NullNode, None),
        ):
            if self.text.startswith(literal, self.pos):
                node = node_type(self.pos, len(literal), parent, value)  # type: ignore[arg-type]
                self.pos += len(literal)
                return node
        match = _NUMBER_RE.match(self.text, self.pos)
        if match and match.end() > self.pos:
            raw = match.group(0)
            try:
                number = orjson.loads(raw)
            except orjson.JSONDecodeError:
                # Outside the 64-bit range orjson accepts, e.g. 1e400
                number = float(raw) if any(c in raw for c in ".eE") else int(raw)
            node = NumberNode(self.pos, len(raw), parent, number)
            self.pos = match.end()
            return node
        raise JsonSyntaxError("Value expected", self.pos)

    def _string(self, parent: Optional[ASTNode]) -> StringNode:
        start = self.pos
        pos = start + 1
        text = self.text
        while pos < len(text):
            ch = text[pos]
            if ch == "\\":
                pos += 2
                continue
            if ch == '"':
                break
            if ch in "\r\n":
                raise JsonSyntaxError("Unterminated string", start)
            pos += 1
        else:
            raise JsonSyntaxError("Unterminated string", start)
        raw = text[start : pos + 1]
        try:
            value = orjson.loads(raw)
        except orjson.JSONDecodeError:
            raise JsonSyntaxError("Invalid string escape", start) from None
        self.pos = pos + 1
        return StringNode(start, len(raw), parent, value)

    def _object(self, parent: Optional[ASTNode]) -> ObjectNode:
        node = ObjectNode(self.pos, 0, parent)
        self.pos += 1
        self._skip()
        if self._peek() == "}":
            self.pos += 1
            node.length = self.pos - node.offset
            return node
        while True:
            self._skip()
            if self._peek() != '"':
                raise JsonSyntaxError("Property name expected", self.pos)
            prop = PropertyNode(self.pos, 0, node)
            key = self._string(prop)
            prop.key_node = key
            self._skip()
            if self._peek() != ":":
                raise JsonSyntaxError("Colon expected", self.pos)
            prop.colon_offset = self.pos
            self.pos += 1
            self._skip()
            prop.value_node = self._value(prop)
            prop.length = prop.value_node.end - prop.offset
            node.properties.append(prop)
            self._skip()
            ch = self._peek()
            if ch == ",":
                self.pos += 1
                continue
            if ch == "}":
                self.pos += 1
                break
            raise JsonSyntaxError("Expected comma or closing brace", self.pos)
        node.length = self.pos - node.offset
        return node

    def _array(self, parent: Optional[ASTNode]) -> ArrayNode:
        node = ArrayNode(self.pos, 0, parent)
        self.pos += 1
        self._skip()
        if self._peek() == "]":
            self.pos += 1
            node.length = self.pos - node.offset
            return node
        while True:
            self._skip()
            node.items.append(self._value(node))
            self._skip()
            ch = self._peek()
            if ch == ",":
                self.pos += 1
                continue
            if ch == "]":
                self.pos += 1
                break
            raise JsonSyntaxError("Expected comma or closing bracket", self.pos)
        node.length = self.pos - node.offset
        return node

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""


def parse(text: str) -> ASTNode:
    """Parse `text` into a syntax tree; raises `JsonSyntaxError`."""
    return _Parser(text).parse()


def to_python(node: Optional[ASTNode]) -> Any:
    """Convert a syntax tree back to plain Python values."""
    if node is None:
        return None
    if isinstance(node, ObjectNode):
        return {p.name: to_python(p.value_node) for p in node.properties}
    if isinstance(node, ArrayNode):
        return [to_python(item) for item in node.items]
    if isinstance(node, (StringNode, NumberNode, BooleanNode, NullNode)):
        return node.value
    if isinstance(node, PropertyNode):
        return to_python(node.value_node)
    raise TypeError(f"Unexpected node {node!r}")


def walk(node: ASTNode) -> Iterator[ASTNode]:
    """Yield `node` and all its descendants, depth first."""
    yield node
    for child in node.children:
        yield from walk(child)


def node_at_offset(root: ASTNode, offset: int, include_end: bool = False) -> Optional[ASTNode]:
    """Return the innermost node whose range contains `offset`."""
    if not root.contains(offset, include_end):
        return None
    for child in root.children:
        if child.contains(offset, include_end):
            found = node_at_offset(child, offset, include_end)
            if found is not None:
                return found
    return root


def find_properties(node: Optional[ASTNode], key: str) -> List[PropertyNode]:
    """Return every property named `key` in the subtree, in document order."""
    if node is None:
        return []
    return [n for n in walk(node) if isinstance(n, PropertyNode) and n.name == key]


def is_property_key(node: ASTNode) -> bool:
    return isinstance(node.parent, PropertyNode) and node.parent.key_node is node


def is_value_node(node: Optional[ASTNode]) -> bool:
    """True for property values, array items and the root value."""
    if node is None:
        return False
    parent = node.parent
    if parent is None:
        return True
    if isinstance(parent, PropertyNode):
        return parent.value_node is node
    return isinstance(parent, ArrayNode)


def owning_property(node: ASTNode) -> Optional[PropertyNode]:
    """Return the nearest property whose value contains `node`.

    Property keys have no owner: only values are ever classified.
    """
    if is_property_key(node):
        return None
    current = node.parent
    while current is not None:
        if isinstance(current, PropertyNode):
            return current
        if isinstance(current, ObjectNode):
            # A value nested in an object belongs to that object's property,
            # which would have been found above
            return None
        current = current.parent
    return None


def string_values(node: Optional[ASTNode]) -> List[StringNode]:
    """Return the string nodes of a value, recursing into arrays."""
    if isinstance(node, StringNode):
        return [node]
    if isinstance(node, ArrayNode):
        found: List[StringNode] = []
        for item in node.items:
            found.extend(string_values(item))
        return found
    return []


def node_at_path(root: ASTNode, path: Iterable[Union[str, int]]) -> ASTNode:
    """Follow object keys / array indices from `root`; stop at the deepest match."""
    node = root
    for step in path:
        if isinstance(node, ObjectNode) and isinstance(step, str):
            prop = node.get(step)
            if prop is None or prop.value_node is None:
                return prop or node
            node = prop.value_node
        elif isinstance(node, ArrayNode) and isinstance(step, int) and 0 <= step < len(node.items):
            node = node.items[step]
        else:
            break
    return node
