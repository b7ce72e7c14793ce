"""
Localized text values for every language found in the workspace.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .loaders import language_of, read_json_object


@dataclass
class LanguageFile:
    """One ``<language>.localized_text`` file and its string entries."""
    language: str
    path: str
    entries: Dict[str, str] = field(default_factory=dict)


class LocalizationTable:
    """Maps language code -> key -> localized value.

    The typed cache only knows which keys exist for the rebuild language;
    this table keeps the values of every language so hover can show the
    language the editor currently asks for.
    """

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._languages: Dict[str, LanguageFile] = {}

    def __len__(self) -> int:
        return len(self._languages)

    @staticmethod
    def read_files(paths: Iterable[str]) -> List[LanguageFile]:
        """Read localized text files; unreadable ones are logged and skipped."""
        logger = logging.getLogger(f"{__name__}.LocalizationTable")
        files: List[LanguageFile] = []
        for path in paths:
            try:
                content = read_json_object(path)
            except (OSError, ValueError) as e:
                logger.error(f"Failed to load localization file {path}: {e}")
                continue
            entries = {k: v for k, v in content.items() if isinstance(v, str)}
            files.append(LanguageFile(language=language_of(path), path=path, entries=entries))
        return files

    def replace(self, files: Iterable[LanguageFile]) -> None:
        """Drop all languages and install `files` (first file per language wins)."""
        self._languages.clear()
        for language_file in files:
            if language_file.language in self._languages:
                self.logger.warning(
                    f"Duplicate localization file for '{language_file.language}' ignored: {language_file.path}"
                )
                continue
            self._languages[language_file.language] = language_file
            self.logger.debug(
                f"Loaded {len(language_file.entries)} keys for language '{language_file.language}'"
            )

    def clear(self) -> None:
        self._languages.clear()

    def languages(self) -> List[str]:
        return list(self._languages)

    def get_file(self, language: str) -> Optional[LanguageFile]:
        return self._languages.get(language)

    def value(self, language: str, key: str) -> Optional[str]:
        """Return the localized value of `key`, or None if missing."""
        language_file = self._languages.get(language)
        if language_file is None:
            return None
        return language_file.entries.get(key)
