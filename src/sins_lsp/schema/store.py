"""
Schema store: resolves schema files and caches their annotated copies.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from ..cache.loaders import read_json
from .associations import BUNDLED_SCHEMAS, schema_file_for
from .document import path_to_uri, uri_to_path
from .patches import AnnotatedSchema, prepare_schema

BUNDLED_SCHEMAS_PATH = Path(__file__).resolve().parent.parent / "resources" / "schemas"


class SchemaLoadError(RuntimeError):
    """Raised when a schema file cannot be read or is not a JSON object."""


class SchemaStore:
    """Loads schemas by URI, patching and annotating each once.

    Game schemas are read from `schemas_path`; the bundled fallbacks
    (unknown kinds, entity manifests) from the package resources.
    """

    def __init__(self, schemas_path: Optional[Union[str, Path]] = None):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.schemas_path = BUNDLED_SCHEMAS_PATH
        if schemas_path:
            if Path(schemas_path).is_dir():
                self.schemas_path = Path(schemas_path)
            else:
                self.logger.warning(
                    f"Schemas directory not found, bundled schemas will be used: {schemas_path}"
                )
        self._schemas: Dict[str, AnnotatedSchema] = {}
        self._failed: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._schemas)

    def uri_for(self, schema_file: str) -> str:
        directory = BUNDLED_SCHEMAS_PATH if schema_file in BUNDLED_SCHEMAS else self.schemas_path
        return path_to_uri(str(directory / schema_file))

    def resolve_schema_by_uri(self, uri: str) -> AnnotatedSchema:
        """Return the annotated schema stored at `uri`, loading it on first use."""
        cached = self._schemas.get(uri)
        if cached is not None:
            return cached

        path = Path(uri_to_path(uri))
        try:
            content = read_json(path)
        except (OSError, ValueError) as e:
            raise SchemaLoadError(f"Schema request failed for {uri}: {e}") from e
        if not isinstance(content, dict):
            raise SchemaLoadError(f"Schema {uri} is not a JSON object")

        annotated = prepare_schema(path.name, content)
        self._schemas[uri] = annotated
        self.logger.debug(f"Loaded schema {path.name}")
        return annotated

    def schema_for_document(self, file_name: str) -> Optional[AnnotatedSchema]:
        """Return the annotated schema associated with a document, if any.

        A missing or broken schema file is logged and treated as no schema.
        """
        schema_file = schema_file_for(file_name)
        if schema_file is None:
            return None
        try:
            return self.resolve_schema_by_uri(self.uri_for(schema_file))
        except SchemaLoadError as e:
            if schema_file not in self._failed:
                self.logger.warning(str(e))
            self._failed[schema_file] = str(e)
            return None

    def reload(self) -> None:
        """Forget every loaded schema; the next request reads them again."""
        self._schemas.clear()
        self._failed.clear()
