"""
Depth-bounded workspace file enumeration.
"""

import logging
from pathlib import Path
from typing import FrozenSet, List, Union

DEFAULT_MAX_DEPTH = 5

IGNORED_DIRECTORIES: FrozenSet[str] = frozenset(
    {
        ".git",
        ".vscode",
        ".vs",
        "node_modules",
    }
)


class FileFinder:
    """Recursive finder for workspace files.

    Walks a directory tree looking for file names ending with a suffix
    (an extension like ``.unit`` or a full name like ``en.localized_text``).
    Well-known noise directories are never entered and unreadable
    directories are logged and skipped, so a walk always returns whatever
    it could see.
    """

    def __init__(
        self,
        max_depth: int = DEFAULT_MAX_DEPTH,
        ignored: FrozenSet[str] = IGNORED_DIRECTORIES,
    ):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.max_depth = max_depth
        self.ignored = ignored

    def find(self, root: Union[str, Path], suffix: str) -> List[str]:
        """Return absolute paths under `root` whose file name ends with `suffix`."""
        results: List[str] = []
        self._walk(Path(root).absolute(), suffix, 0, results)
        return results

    def _walk(self, directory: Path, suffix: str, depth: int, results: List[str]) -> None:
        if depth > self.max_depth:
            self.logger.debug(f"Search depth maximum hit (depth:{depth}): {directory}")
            return

        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            self.logger.warning(f"Failed search (depth:{depth}): {directory}: {e}")
            return

        for entry in entries:
            try:
                if entry.is_dir():
                    if entry.name not in self.ignored:
                        self._walk(entry, suffix, depth + 1, results)
                elif entry.name.endswith(suffix):
                    results.append(str(entry))
            except OSError as e:
                self.logger.warning(f"Cannot stat {entry}: {e}")
