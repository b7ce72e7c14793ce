"""
Hover previews for reference values.

Textures and brushes get an inline image (below a size ceiling) with a link
to the file; localization keys get their value in the session language.
Anything else falls back to the matched schema's title and description.
"""

import base64
import logging
import os
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from ..cache.localization import LocalizationTable
from ..cache.models import IMAGE_CATEGORIES, ReferenceCategory
from ..cache.store import TypedCacheStore
from ..schema.document import path_to_uri
from ..schema.json_ast import ASTNode, PropertyNode, StringNode, is_property_key, is_value_node, node_at_offset
from ..settings.types import DEFAULTS
from .classifier import AnalyzedDocument, classify
from .definition import find_key_position
from .models import Hover, SessionContext

logger = logging.getLogger(__name__)

IMAGE_MIME_TYPES = {
    ".png": "image/png",
    ".dds": "image/vnd-ms.dds",
}


def image_size(path: str) -> Optional[Tuple[int, int]]:
    """Read image dimensions from the file header, without decoding pixels.

    Returns None for files Pillow cannot open: unknown formats, DDS pixel
    formats it does not implement, and images over its decompression bomb
    limit.
    """
    try:
        with Image.open(path) as img:
            return img.size
    except (OSError, UnidentifiedImageError, NotImplementedError, Image.DecompressionBombError) as e:
        logger.debug(f"Cannot read image size of {path}: {e}")
        return None


class HoverProvider:
    """Renders hover markdown for classified string values."""

    def __init__(
        self,
        store: TypedCacheStore,
        localization: LocalizationTable,
        max_preview_kb: int = DEFAULTS.max_preview_kb,
    ):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.store = store
        self.localization = localization
        self.max_preview_kb = max_preview_kb

    def hover(
        self, analyzed: AnalyzedDocument, offset: int, session: SessionContext
    ) -> Optional[Hover]:
        node = node_at_offset(analyzed.root, offset)
        if node is None:
            return None

        contents: Optional[str] = None
        if isinstance(node, StringNode) and is_value_node(node):
            category = classify(analyzed, node)
            if category in IMAGE_CATEGORIES:
                contents = self.texture_preview(category, node.value)
            elif category == ReferenceCategory.LOCALIZED_TEXT:
                contents = self.localized_text(node.value, session.language)

        if contents is None:
            contents = self.schema_description(analyzed, node)
        if contents is None:
            return None
        return Hover(contents=contents, range=analyzed.document.range_of(node))

    # === TEXTURES ===

    def texture_preview(self, category: ReferenceCategory, key: str) -> Optional[str]:
        """Markdown preview of the image file behind `key`.

        Files above the size ceiling get a notice instead of inline data.
        The file link is always present.
        """
        path = self.store.locate(category, key)
        if path is None:
            return None

        try:
            size = os.path.getsize(path)
        except OSError as e:
            self.logger.error(f"Error reading texture file at {path}: {e}")
            return None

        markdown: List[str] = ["**Texture Preview**", f"[Open File]({path_to_uri(path)})"]

        dimensions = image_size(path)
        if dimensions is not None:
            markdown.append(f"{dimensions[0]} x {dimensions[1]} px")

        if size <= 1024 * self.max_preview_kb:
            try:
                data = Path(path).read_bytes()
            except OSError as e:
                self.logger.error(f"Error reading texture file at {path}: {e}")
                return None
            mime = IMAGE_MIME_TYPES.get(Path(path).suffix.lower(), "image/png")
            encoded = base64.b64encode(data).decode("ascii")
            markdown.append(f"![{key}](data:{mime};base64,{encoded})")
        else:
            markdown.append(f"_(Image too large for preview: {size / 1024:.1f} KB)_")
            markdown.append(f"Maximum file size is {self.max_preview_kb} KB.")

        return "\n\n".join(markdown)

    # === LOCALIZATION ===

    def localized_text(self, key: str, language: str) -> Optional[str]:
        """Value of `key` in `language`, then every loaded language, then the source line."""
        language_file = self.localization.get_file(language)
        value = self.localization.value(language, key)
        if value is None and not any(
            self.localization.value(code, key) is not None for code in self.localization.languages()
        ):
            return None

        markdown: List[str] = ["**Localized Text**", ""]
        markdown.append(f"**{language}**: {value}" if value is not None else f"**{language}**: *(missing)*")
        markdown.append("")
        markdown.append("| Language | Value |")
        markdown.append("| :--- | :--- |")
        for code in self.localization.languages():
            other = self.localization.value(code, key)
            if other is not None:
                markdown.append(f"| **{code}** | {other} |")
            else:
                markdown.append(f"| {code} | *(missing)* |")

        if language_file is not None and value is not None:
            position = find_key_position(language_file.path, key)
            if position is not None:
                line = position.line + 1
                name = Path(language_file.path).name
                markdown.append("")
                markdown.append(f"[{name}:{line}]({path_to_uri(language_file.path)}#L{line})")

        return "\n".join(markdown)

    # === SCHEMA ===

    def schema_description(self, analyzed: AnalyzedDocument, node: ASTNode) -> Optional[str]:
        """Title and description of the subschema governing `node`."""
        prop = node.parent
        if is_property_key(node) and isinstance(prop, PropertyNode) and prop.value_node is not None:
            node = prop.value_node

        for match in analyzed.matches_for(node):
            title = match.schema.get("title")
            description = match.schema.get("description")
            parts = []
            if isinstance(title, str) and title:
                parts.append(f"**{title}**")
            if isinstance(description, str) and description:
                parts.append(description)
            if parts:
                return "\n\n".join(parts)
        return None
