"""
Completion of reference values from the typed caches.
"""

import logging
from pathlib import Path
from typing import List, Optional

import orjson

from ..cache.models import CATEGORY_LABELS, IMAGE_CATEGORIES, IMAGE_EXTENSIONS, ReferenceCategory
from ..cache.store import TypedCacheStore
from ..schema.document import Range
from ..schema.json_ast import ASTNode, ArrayNode, StringNode, is_value_node, node_at_offset
from .classifier import AnalyzedDocument, classify
from .models import CompletionItem, CompletionItemKind, CompletionList


def completion_kind(category: ReferenceCategory) -> CompletionItemKind:
    if category in IMAGE_CATEGORIES:
        return CompletionItemKind.FILE
    if category == ReferenceCategory.LOCALIZED_TEXT:
        return CompletionItemKind.TEXT
    return CompletionItemKind.REFERENCE


def candidates(category: ReferenceCategory, members: List[str]) -> List[str]:
    """Completion labels for a category's members.

    Image categories hold both ``icon.png`` and ``icon``; only the image file
    names are offered, with the extension stripped.
    """
    if category not in IMAGE_CATEGORIES:
        return sorted(members)
    return sorted({Path(m).stem for m in members if Path(m).suffix.lower() in IMAGE_EXTENSIONS})


class CompletionProvider:
    """Offers every member of the category at the cursor."""

    def __init__(self, store: TypedCacheStore):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.store = store

    def _target(self, analyzed: AnalyzedDocument, offset: int) -> Optional[ASTNode]:
        # Inside a string, or directly inside an array of strings
        node = node_at_offset(analyzed.root, offset)
        if isinstance(node, StringNode) and is_value_node(node):
            return node
        if isinstance(node, ArrayNode):
            return node
        return None

    def complete(self, analyzed: AnalyzedDocument, offset: int) -> CompletionList:
        target = self._target(analyzed, offset)
        if target is None:
            return CompletionList()
        category = classify(analyzed, target)
        if category is None:
            return CompletionList()

        document = analyzed.document
        if isinstance(target, StringNode):
            edit_range = document.range_of(target)
        else:
            cursor = document.position_at(offset)
            edit_range = Range(cursor, cursor)

        kind = completion_kind(category)
        detail = CATEGORY_LABELS[category]
        labels = candidates(category, list(self.store.get(category)))
        self.logger.debug(f"{len(labels)} {category.value} completions")
        return CompletionList(
            items=[
                CompletionItem(
                    label=label,
                    kind=kind,
                    insert_text=orjson.dumps(label).decode(),
                    detail=detail,
                    text_edit_range=edit_range,
                )
                for label in labels
            ]
        )
