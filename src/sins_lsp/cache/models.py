"""
Reference categories and the sources that populate them.

Every `ReferenceCategory` must have exactly one entry in `CATEGORY_SOURCES`
and one in `CATEGORY_LABELS`; the test suite checks both tables are
exhaustive, so a new category cannot be declared without wiring it up.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Set, TypeAlias, Union


class ReferenceCategory(str, Enum):
    """What kind of entity a string value is expected to name."""

    TEXTURE = "texture"
    BRUSH = "brush"
    LOCALIZED_TEXT = "localized_text"
    MESH = "mesh"
    PARTICLE_EFFECT = "particle_effect"
    BEAM_EFFECT = "beam_effect"
    SOUND = "sound"
    UNIT = "unit"
    UNIT_SKIN = "unit_skin"
    UNIT_ITEM = "unit_item"
    ABILITY = "ability"
    BUFF = "buff"
    WEAPON = "weapon"
    RESEARCH_SUBJECT = "research_subject"
    NPC_REWARD = "npc_reward"
    ACTION_DATA_SOURCE = "action_data_source"
    FORMATION = "formation"
    FLIGHT_PATTERN = "flight_pattern"
    EXOTIC = "exotic"
    PLAYER = "player"
    START_MODE = "start_mode"


@dataclass(frozen=True)
class ExtensionScan:
    """Every file with `extension` contributes its identifier.

    With `keep_file_name` the bare file name (``icon.png``) is also a valid
    member, for categories that may be referenced either way.
    """
    extension: str
    keep_file_name: bool = False


@dataclass(frozen=True)
class EntityManifestIds:
    """The ``ids`` array of ``<kind>.entity_manifest`` lists the members."""
    kind: str

    @property
    def file_name(self) -> str:
        return f"{self.kind}.entity_manifest"


@dataclass(frozen=True)
class LocalizedKeys:
    """The keys of ``<language>.localized_text`` are the members."""
    extension: str = ".localized_text"

    def file_name(self, language: str) -> str:
        return f"{language}{self.extension}"


CategorySource: TypeAlias = Union[ExtensionScan, EntityManifestIds, LocalizedKeys]

CategoryItems: TypeAlias = Set[str]
"""All currently valid identifiers for one category."""


CATEGORY_SOURCES: Dict[ReferenceCategory, CategorySource] = {
    ReferenceCategory.TEXTURE: ExtensionScan(".dds", keep_file_name=True),
    ReferenceCategory.BRUSH: ExtensionScan(".png", keep_file_name=True),
    ReferenceCategory.LOCALIZED_TEXT: LocalizedKeys(),
    ReferenceCategory.MESH: ExtensionScan(".mesh"),
    ReferenceCategory.PARTICLE_EFFECT: ExtensionScan(".particle_effect"),
    ReferenceCategory.BEAM_EFFECT: ExtensionScan(".beam_effect"),
    ReferenceCategory.SOUND: ExtensionScan(".sound"),
    ReferenceCategory.UNIT: EntityManifestIds("unit"),
    ReferenceCategory.UNIT_SKIN: EntityManifestIds("unit_skin"),
    ReferenceCategory.UNIT_ITEM: EntityManifestIds("unit_item"),
    ReferenceCategory.ABILITY: EntityManifestIds("ability"),
    ReferenceCategory.BUFF: EntityManifestIds("buff"),
    ReferenceCategory.WEAPON: EntityManifestIds("weapon"),
    ReferenceCategory.RESEARCH_SUBJECT: EntityManifestIds("research_subject"),
    ReferenceCategory.NPC_REWARD: EntityManifestIds("npc_reward"),
    ReferenceCategory.ACTION_DATA_SOURCE: EntityManifestIds("action_data_source"),
    ReferenceCategory.FORMATION: EntityManifestIds("formation"),
    ReferenceCategory.FLIGHT_PATTERN: EntityManifestIds("flight_pattern"),
    ReferenceCategory.EXOTIC: EntityManifestIds("exotic"),
    ReferenceCategory.PLAYER: EntityManifestIds("player"),
    ReferenceCategory.START_MODE: EntityManifestIds("start_mode"),
}

# Human readable names used in diagnostics ("No such unit skin: ...")
CATEGORY_LABELS: Dict[ReferenceCategory, str] = {
    ReferenceCategory.TEXTURE: "texture",
    ReferenceCategory.BRUSH: "brush",
    ReferenceCategory.LOCALIZED_TEXT: "localization key",
    ReferenceCategory.MESH: "mesh",
    ReferenceCategory.PARTICLE_EFFECT: "particle effect",
    ReferenceCategory.BEAM_EFFECT: "beam effect",
    ReferenceCategory.SOUND: "sound",
    ReferenceCategory.UNIT: "unit",
    ReferenceCategory.UNIT_SKIN: "unit skin",
    ReferenceCategory.UNIT_ITEM: "unit item",
    ReferenceCategory.ABILITY: "ability",
    ReferenceCategory.BUFF: "buff",
    ReferenceCategory.WEAPON: "weapon",
    ReferenceCategory.RESEARCH_SUBJECT: "research subject",
    ReferenceCategory.NPC_REWARD: "NPC reward",
    ReferenceCategory.ACTION_DATA_SOURCE: "action data source",
    ReferenceCategory.FORMATION: "formation",
    ReferenceCategory.FLIGHT_PATTERN: "flight pattern",
    ReferenceCategory.EXOTIC: "exotic",
    ReferenceCategory.PLAYER: "player",
    ReferenceCategory.START_MODE: "start mode",
}

IMAGE_EXTENSIONS: FrozenSet[str] = frozenset({".dds", ".png"})

# Categories whose members are image files (hover preview, completion framing)
IMAGE_CATEGORIES: FrozenSet[ReferenceCategory] = frozenset(
    {ReferenceCategory.TEXTURE, ReferenceCategory.BRUSH}
)


def source_for(category: ReferenceCategory) -> CategorySource:
    """Return the source of `category`; a missing entry is a programming error."""
    try:
        return CATEGORY_SOURCES[category]
    except KeyError:
        raise LookupError(f"No cache source wired for category {category.value!r}") from None


def missing_message(category: ReferenceCategory, value: str) -> str:
    """Diagnostic text for a value absent from its category."""
    return f"No such {CATEGORY_LABELS[category]}: '{value}'"
