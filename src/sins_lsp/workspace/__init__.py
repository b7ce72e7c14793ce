"""
Workspace scanning for Sins of a Solar Empire II mod data.

Provides the depth-bounded file finder and the identifier index that maps
file base names to the files defining them.
"""

from .finder import FileFinder, IGNORED_DIRECTORIES, DEFAULT_MAX_DEPTH
from .index import IdentifierIndex, TRACKED_EXTENSIONS, identifier_of

__all__ = [
    "FileFinder",
    "IGNORED_DIRECTORIES",
    "DEFAULT_MAX_DEPTH",
    "IdentifierIndex",
    "TRACKED_EXTENSIONS",
    "identifier_of",
]
