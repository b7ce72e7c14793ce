"""
Text documents and line/character positions.
"""

import bisect
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
from urllib.parse import unquote, urlparse

from .json_ast import ASTNode, parse


@dataclass(frozen=True)
class Position:
    """Zero-based line and character (code point) position."""
    line: int
    character: int


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position


def uri_to_path(uri: str) -> str:
    """``file:///mod/units/fighter.unit`` -> ``/mod/units/fighter.unit``."""
    parsed = urlparse(uri)
    if parsed.scheme != "file":
        return uri
    path = unquote(parsed.path)
    # file:///C:/mod -> C:/mod
    if len(path) > 2 and path[0] == "/" and path[2] == ":":
        path = path[1:]
    return path


def path_to_uri(path: str) -> str:
    return Path(path).absolute().as_uri()


@dataclass
class TextDocument:
    """An open document: its text, version and lazily parsed syntax tree."""

    uri: str
    text: str
    version: int = 0
    _line_offsets: Optional[List[int]] = field(default=None, init=False, repr=False)
    _root: Optional[ASTNode] = field(default=None, init=False, repr=False)

    @property
    def file_name(self) -> str:
        return Path(uri_to_path(self.uri)).name

    @property
    def line_offsets(self) -> List[int]:
        if self._line_offsets is None:
            offsets = [0]
            text = self.text
            i = 0
            while i < len(text):
                ch = text[i]
                if ch == "\r":
                    if i + 1 < len(text) and text[i + 1] == "\n":
                        i += 1
                    offsets.append(i + 1)
                elif ch == "\n":
                    offsets.append(i + 1)
                i += 1
            self._line_offsets = offsets
        return self._line_offsets

    def ast(self) -> ASTNode:
        """Parse the text once; raises `JsonSyntaxError` on invalid JSON."""
        if self._root is None:
            self._root = parse(self.text)
        return self._root

    def position_at(self, offset: int) -> Position:
        offset = max(0, min(offset, len(self.text)))
        line = bisect.bisect_right(self.line_offsets, offset) - 1
        return Position(line, offset - self.line_offsets[line])

    def offset_at(self, position: Position) -> int:
        offsets = self.line_offsets
        if position.line >= len(offsets):
            return len(self.text)
        if position.line < 0:
            return 0
        line_start = offsets[position.line]
        line_end = offsets[position.line + 1] if position.line + 1 < len(offsets) else len(self.text)
        return max(line_start, min(line_start + position.character, line_end))

    def range_of(self, node: ASTNode) -> Range:
        return Range(self.position_at(node.offset), self.position_at(node.end))
