"""
Go-to-definition for reference values.
"""

import logging
from pathlib import Path
from typing import List, Optional

from ..cache.models import LocalizedKeys, ReferenceCategory
from ..cache.store import TypedCacheStore
from ..schema.document import Position, Range, path_to_uri
from ..schema.json_ast import StringNode, is_value_node, node_at_offset
from ..workspace.index import IdentifierIndex, identifier_of
from .classifier import AnalyzedDocument, classify
from .models import Location, SessionContext

logger = logging.getLogger(__name__)

FILE_START = Range(Position(0, 0), Position(0, 0))


def find_key_position(path: str, key: str) -> Optional[Position]:
    """Return the position of the quoted `key` inside a localized text file.

    Prefers an occurrence followed by a colon (an object key) over one in a
    value. Unreadable files are logged and treated as not containing the key.
    """
    try:
        text = Path(path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to read {path}: {e}")
        return None

    needle = f'"{key}"'
    fallback: Optional[Position] = None
    for line_number, line in enumerate(text.splitlines()):
        column = line.find(needle)
        while column >= 0:
            rest = line[column + len(needle):].lstrip()
            if rest.startswith(":"):
                return Position(line_number, column)
            if fallback is None:
                fallback = Position(line_number, column)
            column = line.find(needle, column + 1)
    return fallback


class DefinitionProvider:
    """Maps a classified value to the files that define it."""

    def __init__(self, index: IdentifierIndex, store: TypedCacheStore):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.index = index
        self.store = store

    def definition(
        self, analyzed: AnalyzedDocument, offset: int, session: SessionContext
    ) -> List[Location]:
        node = node_at_offset(analyzed.root, offset)
        if not isinstance(node, StringNode) or not is_value_node(node):
            return []
        category = classify(analyzed, node)
        if category is None:
            return []
        if category == ReferenceCategory.LOCALIZED_TEXT:
            locations = self.localized_text_locations(node.value, session.language)
        else:
            locations = self.file_locations(category, node.value)
        if not locations:
            self.logger.debug(f"No definition for {category.value} '{node.value}'")
        return locations

    def localized_text_locations(self, key: str, language: str) -> List[Location]:
        """Locations of `key` inside the language's localized text files.

        Localization entries live in one file per language, so the index is
        queried with the language code rather than the key.
        """
        extension = LocalizedKeys().extension
        locations: List[Location] = []
        for path in self.index.lookup(language) or []:
            if not path.endswith(extension):
                continue
            position = find_key_position(path, key)
            if position is None:
                continue
            end = Position(position.line, position.character + len(key) + 2)
            locations.append(Location(path_to_uri(path), Range(position, end)))
        return locations

    def file_locations(self, category: ReferenceCategory, value: str) -> List[Location]:
        """Every indexed file named after `value`, pointing at its start."""
        paths = self.index.lookup(identifier_of(value)) or []
        if not paths:
            located = self.store.locate(category, value)
            paths = [located] if located else []
        return [Location(path_to_uri(path), FILE_START) for path in paths]
