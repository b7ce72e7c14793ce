"""
File loaders for typed cache sources.

Reads entity manifests and localized text files with orjson. Loaders raise
on unreadable or malformed content; the store decides how a failing
category degrades.
"""

import codecs
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple, Union

import orjson

from ..workspace.finder import FileFinder
from ..workspace.index import identifier_of
from .models import EntityManifestIds, ExtensionScan, LocalizedKeys

logger = logging.getLogger(__name__)


def read_json(path: Union[str, Path]) -> Any:
    """Read a JSON file, tolerating a UTF-8 byte order mark."""
    with open(path, "rb") as f:  # orjson works with bytes
        raw = f.read()
    if raw.startswith(codecs.BOM_UTF8):
        raw = raw[len(codecs.BOM_UTF8):]
    return orjson.loads(raw)


def read_json_object(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a JSON file that must hold an object."""
    data = read_json(path)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}, got {type(data).__name__}")
    return data


def pick_named_file(paths: List[str], file_name: str) -> Optional[str]:
    """Pick the path whose base name is exactly `file_name`, else the first one.

    The finder matches by suffix, so ``unit.entity_manifest`` may also match
    ``old_unit.entity_manifest``.
    """
    for path in paths:
        if Path(path).name == file_name:
            return path
    return paths[0] if paths else None


class CacheSourceLoader:
    """Produces the member set of one category from its source."""

    def __init__(self, finder: Optional[FileFinder] = None):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.finder = finder or FileFinder()

    def scan_extension(
        self, root: Union[str, Path], source: ExtensionScan
    ) -> Tuple[Set[str], Dict[str, str]]:
        """Return (members, member -> path) for every file with the extension."""
        items: Set[str] = set()
        paths: Dict[str, str] = {}
        for path in self.finder.find(root, source.extension):
            name = Path(path).name
            stem = name[: -len(source.extension)] if name.endswith(source.extension) else name
            items.add(stem)
            paths.setdefault(stem, path)
            if source.keep_file_name:
                items.add(name)
                paths.setdefault(name, path)
        return items, paths

    def read_manifest_ids(self, root: Union[str, Path], source: EntityManifestIds) -> Set[str]:
        """Return the ``ids`` listed by the kind's entity manifest.

        A missing manifest or one without ``ids`` yields an empty set.
        """
        manifest = pick_named_file(self.finder.find(root, source.file_name), source.file_name)
        if manifest is None:
            self.logger.debug(f"No {source.file_name} found in '{root}'")
            return set()

        content = read_json_object(manifest)
        ids = content.get("ids")
        if not isinstance(ids, list):
            self.logger.debug(f"{manifest} has no 'ids' array")
            return set()

        return {str(entry) for entry in ids if isinstance(entry, str)}

    def read_localized_keys(
        self, root: Union[str, Path], source: LocalizedKeys, language: str
    ) -> Tuple[Set[str], Optional[str]]:
        """Return (keys, path) of the language's localized text file."""
        file_name = source.file_name(language)
        path = pick_named_file(self.finder.find(root, file_name), file_name)
        if path is None:
            self.logger.debug(f"No {file_name} found in '{root}'")
            return set(), None
        return set(read_json_object(path).keys()), path

    def find_localized_text_files(self, root: Union[str, Path]) -> List[str]:
        """Return every ``*.localized_text`` file under `root`."""
        return self.finder.find(root, LocalizedKeys().extension)


def language_of(path: Union[str, Path]) -> str:
    """``/mod/localized_text/en.localized_text`` -> ``en``."""
    return identifier_of(path)
