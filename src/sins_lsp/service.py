"""
Main service for resolving references in Sins of a Solar Empire II data.

Owns the identifier index, typed caches, localization table and schema
store, and exposes the entry points the editor protocol layer calls:
workspace rebuild, document validation, hover, definition and completion.
"""

import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, TypeVar, Union

from .cache.loaders import CacheSourceLoader
from .cache.localization import LanguageFile, LocalizationTable
from .cache.models import CATEGORY_SOURCES
from .cache.store import TypedCacheStore
from .references.classifier import AnalyzedDocument, analyze
from .references.completion import CompletionProvider
from .references.definition import DefinitionProvider
from .references.hover import HoverProvider
from .references.models import CompletionList, Diagnostic, Hover, Location, SessionContext
from .references.validator import ReferenceValidator, syntax_error_diagnostic
from .schema.document import TextDocument
from .schema.json_ast import JsonSyntaxError
from .schema.store import SchemaStore
from .settings.types import DEFAULTS
from .workspace.finder import FileFinder
from .workspace.index import IdentifierIndex

if TYPE_CHECKING:
    from .settings import AppSettings

T = TypeVar("T")


class StoreNotReadyError(RuntimeError):
    """Raised when a request waited too long for the workspace to load."""


class ReferenceService:
    """Service for reference resolution over one workspace.

    Requests wait on a ready gate until a rebuild has completed, so they
    never read a half-populated index or cache. A rebuild closes the gate,
    clears every store, repopulates them and opens the gate again.

    Blocking file reads and schema evaluation run on a thread pool; all
    index and cache writes happen on the event loop.
    """

    def __init__(
        self,
        settings: Optional["AppSettings"] = None,
        schemas_path: Optional[Union[str, Path]] = None,
    ):
        """Initialize the service.

        Args:
            settings: App settings; when omitted the documented defaults are used.
            schemas_path: Game schema directory, overriding the configured one.
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.settings = settings

        max_depth = settings.search_max_depth if settings else DEFAULTS.search_max_depth
        max_preview_kb = settings.max_preview_kb if settings else DEFAULTS.max_preview_kb
        language = settings.language if settings else DEFAULTS.language
        self.ready_timeout = settings.ready_timeout if settings else DEFAULTS.ready_timeout

        finder = FileFinder(max_depth=max_depth)
        self.loader = CacheSourceLoader(finder)
        self.index = IdentifierIndex(finder)
        self.store = TypedCacheStore(self.loader)
        self.localization = LocalizationTable()
        if schemas_path is None and settings is not None:
            schemas_path = settings.schemas_path
        self.schemas = SchemaStore(schemas_path)

        self.validator = ReferenceValidator(self.store)
        self.hover_provider = HoverProvider(self.store, self.localization, max_preview_kb)
        self.definition_provider = DefinitionProvider(self.index, self.store)
        self.completion_provider = CompletionProvider(self.store)

        self.root: Optional[Path] = None
        self._session = SessionContext(language=language)
        self._ready = asyncio.Event()
        self._executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="sins-lsp")

        # uri -> newest version received / newest version published / times closed
        self._latest: Dict[str, int] = {}
        self._published: Dict[str, int] = {}
        self._generation: Dict[str, int] = {}

    # === SESSION ===

    @property
    def session(self) -> SessionContext:
        return self._session

    def set_language(self, language: str) -> SessionContext:
        """Replace the session context with one for `language`.

        Requests already running keep the context they started with.
        """
        self._session = SessionContext(language=language)
        self.logger.info(f"Active language set to '{language}'")
        return self._session

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    # === REBUILD ===

    async def rebuild(self, root: Union[str, Path], language: Optional[str] = None) -> None:
        """Discard all index and cache state and rebuild it from `root`.

        The index scan, the typed cache population and the localization
        load run concurrently. Failures are logged; the gate is reopened
        even after a failed rebuild so requests are answered from whatever
        was loaded.
        """
        language = language or self._session.language
        self._ready.clear()
        self.logger.info(f"Rebuilding workspace '{root}' (language: {language})")
        start = time.perf_counter()

        self.index.clear()
        self.store.clear_all()
        self.localization.clear()
        self.schemas.reload()

        try:
            paths, _, language_files = await asyncio.gather(
                self._run(self.index.collect, root),
                self.store.populate(root, language, executor=self._executor),
                self._run(self._read_localization, root),
            )
            self.index.replace(paths)
            self.localization.replace(language_files)
        except Exception as e:
            self.logger.error(f"Workspace rebuild failed for '{root}': {e}", exc_info=True)
        finally:
            self.root = Path(root)
            self._session = SessionContext(language=language)
            self._ready.set()

        self.logger.info(
            f"Workspace loaded in {time.perf_counter() - start:.2f}s: "
            f"{len(self.index)} unique IDs, {self.store.size_total()} cached elements, "
            f"{len(self.localization)} languages"
        )

    def _read_localization(self, root: Union[str, Path]) -> List[LanguageFile]:
        return LocalizationTable.read_files(self.loader.find_localized_text_files(root))

    def statistics(self) -> Dict[str, int]:
        """Counts per category plus index totals."""
        stats = {category.value: len(self.store.get(category)) for category in CATEGORY_SOURCES}
        stats["identifiers"] = len(self.index)
        stats["cached_total"] = self.store.size_total()
        return stats

    # === DOCUMENTS ===

    async def validate_document(
        self, uri: str, text: str, version: int = 0
    ) -> Optional[List[Diagnostic]]:
        """Return the merged diagnostics for one document version.

        Returns None when there is nothing to publish: the store did not
        become ready in time, the document was closed or a newer version
        arrived while this one was being validated, or validation failed
        unexpectedly (logged).
        """
        if version >= self._latest.get(uri, version):
            self._latest[uri] = version
        generation = self._generation.get(uri, 0)

        try:
            await self._wait_ready()
        except StoreNotReadyError as e:
            self.logger.warning(f"Skipping validation of {uri}: {e}")
            return None

        document = TextDocument(uri, text, version)
        try:
            analyzed = await self._run(analyze, document, self.schemas)
        except JsonSyntaxError as e:
            diagnostics = [syntax_error_diagnostic(document, e)]
        except Exception as e:
            self.logger.error(f"Failed to analyze {uri}: {e}", exc_info=True)
            return None
        else:
            try:
                diagnostics = await self._run(self.validator.check_schema, analyzed)
                diagnostics += self.validator.check_references(analyzed)
            except Exception as e:
                self.logger.error(f"Failed to validate {uri}: {e}", exc_info=True)
                return None

        if self._is_stale(uri, version, generation):
            self.logger.debug(f"Dropping stale diagnostics for {uri} v{version}")
            return None
        self._published[uri] = version
        self.logger.debug(f"Validated {uri} v{version}: {len(diagnostics)} diagnostics")
        return diagnostics

    def close_document(self, uri: str) -> List[Diagnostic]:
        """Forget a closed document; its diagnostics are cleared.

        Validations still running for the closed document are never
        published, even if it is reopened with a lower version.
        """
        self._latest.pop(uri, None)
        self._published.pop(uri, None)
        self._generation[uri] = self._generation.get(uri, 0) + 1
        return []

    def _is_stale(self, uri: str, version: int, generation: int) -> bool:
        if uri not in self._latest or generation != self._generation.get(uri, 0):
            return True
        return version < self._latest[uri] or version < self._published.get(uri, version)

    # === REQUESTS ===

    async def hover(
        self, uri: str, text: str, offset: int, session: Optional[SessionContext] = None
    ) -> Optional[Hover]:
        session = session or self._session
        analyzed = await self._prepare(uri, text)
        if analyzed is None:
            return None
        try:
            return await self._run(self.hover_provider.hover, analyzed, offset, session)
        except Exception as e:
            self.logger.error(f"Hover failed for {uri} at {offset}: {e}", exc_info=True)
            return None

    async def definition(
        self, uri: str, text: str, offset: int, session: Optional[SessionContext] = None
    ) -> List[Location]:
        session = session or self._session
        analyzed = await self._prepare(uri, text)
        if analyzed is None:
            return []
        try:
            return await self._run(self.definition_provider.definition, analyzed, offset, session)
        except Exception as e:
            self.logger.error(f"Definition failed for {uri} at {offset}: {e}", exc_info=True)
            return []

    async def completion(self, uri: str, text: str, offset: int) -> CompletionList:
        analyzed = await self._prepare(uri, text)
        if analyzed is None:
            return CompletionList()
        try:
            return self.completion_provider.complete(analyzed, offset)
        except Exception as e:
            self.logger.error(f"Completion failed for {uri} at {offset}: {e}", exc_info=True)
            return CompletionList()

    async def _prepare(self, uri: str, text: str) -> Optional[AnalyzedDocument]:
        """Wait for the store and analyze a document; None if either fails."""
        try:
            await self._wait_ready()
        except StoreNotReadyError as e:
            self.logger.warning(f"Request for {uri} not answered: {e}")
            return None
        try:
            return await self._run(analyze, TextDocument(uri, text), self.schemas)
        except JsonSyntaxError as e:
            self.logger.debug(f"{uri} is not valid JSON: {e}")
            return None
        except Exception as e:
            self.logger.error(f"Failed to analyze {uri}: {e}", exc_info=True)
            return None

    # === INTERNALS ===

    async def _wait_ready(self) -> None:
        if self._ready.is_set():
            return
        try:
            await asyncio.wait_for(self._ready.wait(), timeout=self.ready_timeout)
        except asyncio.TimeoutError:
            raise StoreNotReadyError(
                f"workspace not loaded after {self.ready_timeout:.0f}s"
            ) from None

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, func, *args)

    def shutdown(self) -> None:
        """Release the worker threads."""
        self._executor.shutdown(wait=True)
