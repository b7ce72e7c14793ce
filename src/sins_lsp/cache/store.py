"""
Typed cache store: the set of valid identifiers per reference category.
"""

import asyncio
import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple, TypeVar, Union

from .loaders import CacheSourceLoader
from .models import (
    CATEGORY_SOURCES,
    CategoryItems,
    EntityManifestIds,
    ExtensionScan,
    LocalizedKeys,
    ReferenceCategory,
    source_for,
)

T = TypeVar("T")

# member -> file path, for categories read from individual files
PathMap = Dict[str, str]


class TypedCacheStore:
    """Holds one identifier set per `ReferenceCategory`.

    `set` always replaces a category wholesale: the existing set object is
    cleared and refilled, never merged. Population runs one task per
    category; the tasks overlap in time but each writes only its own
    category, and a failing task leaves its category empty.
    """

    def __init__(self, loader: Optional[CacheSourceLoader] = None):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.loader = loader or CacheSourceLoader()
        self._cache: Dict[ReferenceCategory, CategoryItems] = {}
        self._paths: Dict[ReferenceCategory, PathMap] = {}

    # === SET OPERATIONS ===

    def get(self, category: ReferenceCategory) -> CategoryItems:
        """Return the live set for `category`, creating it empty on first access."""
        return self._cache.setdefault(category, set())

    def set(self, category: ReferenceCategory, items: Iterable[str]) -> None:
        """Replace the members of `category` with `items`."""
        members = self.get(category)
        members.clear()
        members.update(items)

    def contains(self, category: ReferenceCategory, value: str) -> bool:
        return value in self._cache.get(category, ())

    def size_total(self) -> int:
        """Sum of all category sizes."""
        return sum(len(items) for items in self._cache.values())

    def clear_all(self) -> None:
        for items in self._cache.values():
            items.clear()
        self._paths.clear()

    # === FILE LOCATIONS ===

    def set_paths(self, category: ReferenceCategory, paths: PathMap) -> None:
        self._paths[category] = dict(paths)

    def locate(self, category: ReferenceCategory, member: str) -> Optional[str]:
        """Return the file a member was read from, if the category tracks files."""
        return self._paths.get(category, {}).get(member)

    # === POPULATION ===

    def load_category(
        self, category: ReferenceCategory, root: Union[str, Path], language: str
    ) -> Tuple[Set[str], PathMap]:
        """Read the members of one category from disk (blocking)."""
        source = source_for(category)
        if isinstance(source, ExtensionScan):
            return self.loader.scan_extension(root, source)
        if isinstance(source, EntityManifestIds):
            return self.loader.read_manifest_ids(root, source), {}
        if isinstance(source, LocalizedKeys):
            keys, path = self.loader.read_localized_keys(root, source, language)
            return keys, ({language: path} if path else {})
        raise TypeError(f"Unhandled cache source {source!r} for {category.value!r}")

    async def populate(
        self,
        root: Union[str, Path],
        language: str,
        categories: Optional[Iterable[ReferenceCategory]] = None,
        executor: Optional[Executor] = None,
    ) -> None:
        """Load every category concurrently and wait for all of them.

        Blocking reads run on a thread pool; results are written back on
        the event loop, one category per task.
        """
        wanted: List[ReferenceCategory] = list(categories or CATEGORY_SOURCES)

        if executor is not None:
            await self._populate(wanted, root, language, executor)
            return

        with ThreadPoolExecutor(max_workers=4, thread_name_prefix="cache") as pool:
            await self._populate(wanted, root, language, pool)

    async def _populate(
        self,
        categories: List[ReferenceCategory],
        root: Union[str, Path],
        language: str,
        executor: Executor,
    ) -> None:
        await asyncio.gather(
            *(self._populate_one(category, root, language, executor) for category in categories)
        )
        self.logger.info(f"Cached {self.size_total()} elements in '{root}'")

    async def _populate_one(
        self,
        category: ReferenceCategory,
        root: Union[str, Path],
        language: str,
        executor: Executor,
    ) -> None:
        try:
            items, paths = await _in_executor(
                executor, lambda: self.load_category(category, root, language)
            )
        except Exception as e:
            self.logger.error(f"Failed to load '{category.value}' cache from '{root}': {e}")
            self.set(category, ())
            self._paths.pop(category, None)
            return

        self.set(category, items)
        if paths:
            self.set_paths(category, paths)
        self.logger.debug(f"Loaded {len(items)} '{category.value}' entries")


async def _in_executor(executor: Executor, func: Callable[[], T]) -> T:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(executor, func)
