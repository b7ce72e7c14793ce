"""
Typed caches of valid identifiers per reference category.

Categories are populated from per-file extension scans, entity manifests
and localized text keys, and are rebuilt wholesale on every workspace load.
"""

from .models import (
    ReferenceCategory,
    ExtensionScan,
    EntityManifestIds,
    LocalizedKeys,
    CategorySource,
    CATEGORY_SOURCES,
    CATEGORY_LABELS,
    IMAGE_CATEGORIES,
    IMAGE_EXTENSIONS,
    source_for,
    missing_message,
)
from .loaders import CacheSourceLoader, read_json, read_json_object
from .localization import LanguageFile, LocalizationTable
from .store import TypedCacheStore

__all__ = [
    "ReferenceCategory",
    "ExtensionScan",
    "EntityManifestIds",
    "LocalizedKeys",
    "CategorySource",
    "CATEGORY_SOURCES",
    "CATEGORY_LABELS",
    "IMAGE_CATEGORIES",
    "IMAGE_EXTENSIONS",
    "source_for",
    "missing_message",
    "CacheSourceLoader",
    "read_json",
    "read_json_object",
    "LanguageFile",
    "LocalizationTable",
    "TypedCacheStore",
]
