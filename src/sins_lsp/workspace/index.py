"""
Workspace-wide identifier index.

Maps a file's identifier (its base name up to the first dot) to every file
that produced it, across all tracked game data extensions.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .finder import FileFinder

TRACKED_EXTENSIONS: Tuple[str, ...] = (
    ".mod_meta_data",
    ".localized_text",
    ".uniforms",
    ".ability",
    ".action_data_source",
    ".buff",
    ".entity_manifest",
    ".exotic",
    ".flight_pattern",
    ".formation",
    ".npc_reward",
    ".player",
    ".player_color_group",
    ".player_icon",
    ".player_portrait",
    ".research_subject",
    ".unit_item",
    ".unit_skin",
    ".unit",
    ".weapon",
    ".named_colors",
    ".death_sequence",
    ".death_sequence_group",
    ".beam_effect",
    ".exhaust_trail_effect",
    ".particle_effect",
    ".shield_effect",
    ".font",
    ".gravity_well_props",
    ".button_style",
    ".drop_box_style",
    ".gui",
    ".label_style",
    ".list_box_style",
    ".reflect_box_style",
    ".scroll_bar_style",
    ".text_entry_box_style",
    ".brush",
    ".mesh_material",
    ".skybox",
    ".sound",
    ".texture_animation",
    ".gdpr_accept_data",
    ".playtime_message",
    ".welcome_message",
    ".start_mode",
)


def identifier_of(path: Union[str, Path]) -> str:
    """Return the identifier of a file: its base name up to the first dot.

    ``/mod/entities/trader_loyalist.player`` -> ``trader_loyalist``
    """
    return Path(path).name.split(".")[0]


class IdentifierIndex:
    """Index of identifier -> list of absolute paths.

    Paths are kept in discovery order. The same identifier produced by files
    of different kinds (a unit, its uniforms and its icon) is expected and
    every path is kept.
    """

    def __init__(
        self,
        finder: Optional[FileFinder] = None,
        extensions: Iterable[str] = TRACKED_EXTENSIONS,
    ):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.finder = finder or FileFinder()
        self.extensions: Tuple[str, ...] = tuple(extensions)
        self._entries: Dict[str, List[str]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._entries

    def collect(self, root: Union[str, Path]) -> List[str]:
        """Enumerate every tracked file under `root`, extension by extension."""
        paths: List[str] = []
        for extension in self.extensions:
            paths.extend(self.finder.find(root, extension))
        return paths

    def replace(self, paths: Iterable[str]) -> None:
        """Drop all entries and index `paths` in order."""
        self._entries.clear()
        for path in paths:
            self.add(path)

    def rebuild(self, root: Union[str, Path]) -> None:
        """Clear the index and re-scan the workspace."""
        self.replace(self.collect(root))
        self.logger.info(f"Indexed {len(self._entries)} unique IDs in '{root}'")

    def add(self, path: str) -> None:
        """Append a path under its identifier."""
        self._entries.setdefault(identifier_of(path), []).append(path)

    def clear(self) -> None:
        self._entries.clear()

    def lookup(self, identifier: str) -> Optional[List[str]]:
        """Return a copy of the paths for `identifier`, or None if unknown."""
        paths = self._entries.get(identifier)
        return list(paths) if paths is not None else None

    def reverse_lookup(self, path: Union[str, Path]) -> Optional[str]:
        """Return the identifier whose entry holds `path` (linear scan)."""
        target = str(path)
        for identifier, paths in self._entries.items():
            if target in paths:
                return identifier
        return None

    def identifiers(self) -> List[str]:
        """Return all identifiers in discovery order."""
        return list(self._entries)

    def items(self) -> List[Tuple[str, List[str]]]:
        """Return (identifier, paths) pairs; lists are copies."""
        return [(k, list(v)) for k, v in self._entries.items()]
