"""
Schema patches and pointer annotations.

The game data is authoritative: when vanilla files do not conform to the
published schemas, the schema is corrected in memory. Patches and
annotations are pure: they work on a deep copy and never touch the schema
object they were given, so a loaded schema can be shared between requests.

Pointer annotations live in a side table keyed by
``(subschema pointer, property name)`` rather than on the schema itself.
"""

import copy
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from ..cache.models import ReferenceCategory

logger = logging.getLogger(__name__)

Schema = Dict[str, Any]
PatchFunction = Callable[[Schema], None]
AnnotationKey = Tuple[str, str]
Annotations = Dict[AnnotationKey, ReferenceCategory]

_LOCAL_REF_RE = re.compile(r"^#(/.*)?$")


@dataclass(frozen=True)
class AnnotationRule:
    """Tag property `name` with `category` in every subschema under `prefix`."""
    name: str
    category: ReferenceCategory
    prefix: str = ""


@dataclass
class AnnotatedSchema:
    """A patched schema copy and its pointer annotation side table."""
    schema: Schema
    annotations: Annotations = field(default_factory=dict)
    file_name: str = ""

    def category_of(self, pointer: str, name: str) -> Optional[ReferenceCategory]:
        return self.annotations.get((pointer, name))


# === PATCHES ===

def _properties(node: Any) -> Optional[Dict[str, Any]]:
    if isinstance(node, dict) and isinstance(node.get("properties"), dict):
        return node["properties"]
    return None


def _item_properties(node: Any) -> Optional[Dict[str, Any]]:
    if isinstance(node, dict):
        return _properties(node.get("items"))
    return None


def patch_galaxy_generator_uniforms(schema: Schema) -> None:
    schema.setdefault("properties", {})["fillings"] = {"type": "object"}


def patch_mission_uniforms(schema: Schema) -> None:
    properties = schema.setdefault("properties", {})
    properties["build_structure_tooltip_title_override"] = {"type": "string"}
    properties["build_structure_tooltip_desc_override"] = {"type": "string"}
    properties["trigger_hud_icon_structure_override"] = {"type": "string"}
    properties["trigger_hud_definition"] = {"type": "object"}
    properties["reward_hud_definition"] = {"type": "object"}

    mission_chains = _item_properties(properties.get("main_mission_chains"))
    if mission_chains is None:
        return

    chains = None
    operation_chains = _item_properties(mission_chains.get("operation_chains"))
    if operation_chains is not None:
        chains = operation_chains.get("chains")
        chain = _item_properties(chains)
        if chain is not None:
            trigger = _item_properties(chain.get("trigger"))
            if trigger is not None:
                trigger["trigger_tooltip_desc_override"] = {"type": "string"}

            reward = _item_properties(chain.get("reward"))
            spawn_unit_reward = _properties(reward.get("spawn_unit_reward")) if reward else None
            if spawn_unit_reward is not None:
                spawn_unit_reward["hyperspace_time"] = {"type": "number"}

    # Side operations share the operation chain layout
    side_operations = _properties(mission_chains.get("side_operations"))
    if side_operations is not None and chains is not None:
        side_operations["chains"] = copy.deepcopy(chains)


SCHEMA_PATCHES: Dict[str, PatchFunction] = {
    "galaxy-generator-uniforms-schema.json": patch_galaxy_generator_uniforms,
    "mission-uniforms-schema.json": patch_mission_uniforms,
}


# === ANNOTATION RULES ===

_UI = "/properties/user_interface"

# Applied to every schema
COMMON_RULES: Tuple[AnnotationRule, ...] = (
    AnnotationRule("name", ReferenceCategory.LOCALIZED_TEXT, _UI),
    AnnotationRule("description", ReferenceCategory.LOCALIZED_TEXT, _UI),
    AnnotationRule("tooltip_title", ReferenceCategory.LOCALIZED_TEXT),
    AnnotationRule("tooltip_description", ReferenceCategory.LOCALIZED_TEXT),
    AnnotationRule("icon", ReferenceCategory.BRUSH),
    AnnotationRule("hud_icon", ReferenceCategory.BRUSH),
    AnnotationRule("tooltip_icon", ReferenceCategory.BRUSH),
    AnnotationRule("tooltip_picture", ReferenceCategory.BRUSH),
)

ANNOTATION_RULES: Dict[str, Tuple[AnnotationRule, ...]] = {
    "unit-schema.json": (
        AnnotationRule("skins", ReferenceCategory.UNIT_SKIN),
        AnnotationRule("abilities", ReferenceCategory.ABILITY),
        AnnotationRule("unit_items", ReferenceCategory.UNIT_ITEM),
        AnnotationRule("weapon", ReferenceCategory.WEAPON),
        AnnotationRule("formation", ReferenceCategory.FORMATION),
        AnnotationRule("flight_pattern", ReferenceCategory.FLIGHT_PATTERN),
        AnnotationRule("exotic", ReferenceCategory.EXOTIC),
        AnnotationRule("research_subject", ReferenceCategory.RESEARCH_SUBJECT),
    ),
    "unit-skin-schema.json": (
        AnnotationRule("mesh", ReferenceCategory.MESH),
        AnnotationRule("texture", ReferenceCategory.TEXTURE),
        AnnotationRule("particle_effect", ReferenceCategory.PARTICLE_EFFECT),
        AnnotationRule("beam_effect", ReferenceCategory.BEAM_EFFECT),
        AnnotationRule("sound", ReferenceCategory.SOUND),
    ),
    "unit-item-schema.json": (
        AnnotationRule("ability", ReferenceCategory.ABILITY),
        AnnotationRule("buff", ReferenceCategory.BUFF),
        AnnotationRule("prerequisites", ReferenceCategory.RESEARCH_SUBJECT),
    ),
    "ability-schema.json": (
        AnnotationRule("buff", ReferenceCategory.BUFF),
        AnnotationRule("action_data_source", ReferenceCategory.ACTION_DATA_SOURCE),
        AnnotationRule("unit", ReferenceCategory.UNIT),
        AnnotationRule("sound", ReferenceCategory.SOUND),
    ),
    "buff-schema.json": (
        AnnotationRule("buff", ReferenceCategory.BUFF),
        AnnotationRule("action_data_source", ReferenceCategory.ACTION_DATA_SOURCE),
        AnnotationRule("particle_effect", ReferenceCategory.PARTICLE_EFFECT),
        AnnotationRule("beam_effect", ReferenceCategory.BEAM_EFFECT),
        AnnotationRule("sound", ReferenceCategory.SOUND),
        AnnotationRule("unit", ReferenceCategory.UNIT),
    ),
    "weapon-schema.json": (
        AnnotationRule("beam_effect", ReferenceCategory.BEAM_EFFECT),
        AnnotationRule("particle_effect", ReferenceCategory.PARTICLE_EFFECT),
        AnnotationRule("sound", ReferenceCategory.SOUND),
        AnnotationRule("buff", ReferenceCategory.BUFF),
    ),
    "research-subject-schema.json": (
        AnnotationRule("prerequisites", ReferenceCategory.RESEARCH_SUBJECT),
        AnnotationRule("unit_items", ReferenceCategory.UNIT_ITEM),
        AnnotationRule("units", ReferenceCategory.UNIT),
    ),
    "npc-reward-schema.json": (
        AnnotationRule("units", ReferenceCategory.UNIT),
        AnnotationRule("exotic", ReferenceCategory.EXOTIC),
    ),
    "player-schema.json": (
        AnnotationRule("units", ReferenceCategory.UNIT),
        AnnotationRule("start_mode", ReferenceCategory.START_MODE),
        AnnotationRule("research_subjects", ReferenceCategory.RESEARCH_SUBJECT),
        AnnotationRule("npc_rewards", ReferenceCategory.NPC_REWARD),
    ),
    "mission-uniforms-schema.json": (
        AnnotationRule("build_structure_tooltip_title_override", ReferenceCategory.LOCALIZED_TEXT),
        AnnotationRule("build_structure_tooltip_desc_override", ReferenceCategory.LOCALIZED_TEXT),
        AnnotationRule("trigger_tooltip_desc_override", ReferenceCategory.LOCALIZED_TEXT),
        AnnotationRule("trigger_hud_icon_structure_override", ReferenceCategory.BRUSH),
        AnnotationRule("player", ReferenceCategory.PLAYER),
    ),
    "exotic-uniforms-schema.json": (
        AnnotationRule("exotics", ReferenceCategory.EXOTIC),
    ),
    "formation-uniforms-schema.json": (
        AnnotationRule("formations", ReferenceCategory.FORMATION),
    ),
}


def rules_for(file_name: str) -> Tuple[AnnotationRule, ...]:
    return COMMON_RULES + ANNOTATION_RULES.get(file_name, ())


# === TRANSFORM ===

def escape_pointer_token(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def iter_subschemas(node: Any, pointer: str = "") -> Iterator[Tuple[str, Dict[str, Any]]]:
    """Yield (JSON pointer, subschema) for every object inside a schema."""
    if isinstance(node, dict):
        yield pointer, node
        for key, value in node.items():
            if key in ("enum", "const", "default", "examples"):
                continue
            yield from iter_subschemas(value, f"{pointer}/{escape_pointer_token(str(key))}")
    elif isinstance(node, list):
        for index, value in enumerate(node):
            yield from iter_subschemas(value, f"{pointer}/{index}")


def local_ref_target(ref: Any) -> Optional[str]:
    """The JSON pointer a local ``$ref`` such as ``#/definitions/ui`` points at."""
    if isinstance(ref, str) and _LOCAL_REF_RE.match(ref):
        return ref[1:]
    return None


def resolve_pointer(root: Schema, pointer: str) -> Optional[Any]:
    """Resolve a local JSON pointer such as ``/definitions/weapon``."""
    node: Any = root
    if not pointer:
        return node
    for raw in pointer.lstrip("/").split("/"):
        token = raw.replace("~1", "/").replace("~0", "~")
        if isinstance(node, dict) and token in node:
            node = node[token]
        elif isinstance(node, list) and token.isdigit() and int(token) < len(node):
            node = node[int(token)]
        else:
            return None
    return node


def _within(pointer: str, root: str) -> bool:
    return not root or pointer == root or pointer.startswith(root + "/")


def scope_roots(schema: Schema, prefix: str) -> List[str]:
    """Pointers of every subtree reachable from `prefix`, following local ``$ref``.

    A factored schema keeps the definition of ``user_interface`` under
    ``/definitions``; that definition is in scope for a
    ``/properties/user_interface`` rule as much as an inline one.
    """
    if not prefix:
        return [prefix]
    roots = [prefix]
    pending = [prefix]
    while pending:
        root = pending.pop()
        for _, subschema in iter_subschemas(resolve_pointer(schema, root), root):
            target = local_ref_target(subschema.get("$ref"))
            if target is None or any(_within(target, known) for known in roots):
                continue
            roots.append(target)
            pending.append(target)
    return roots


def annotate(schema: Schema, rules: Tuple[AnnotationRule, ...]) -> Annotations:
    """Build the pointer side table for `schema`."""
    annotations: Annotations = {}
    scopes = {rule.prefix: scope_roots(schema, rule.prefix) for rule in rules}
    for pointer, subschema in iter_subschemas(schema):
        properties = _properties(subschema)
        if properties is None:
            continue
        for rule in rules:
            if rule.name not in properties:
                continue
            if any(_within(pointer, root) for root in scopes[rule.prefix]):
                annotations.setdefault((pointer, rule.name), rule.category)
    return annotations


def patch_schema(file_name: str, schema: Schema) -> Schema:
    """Return a patched copy of `schema`; the argument is left untouched."""
    patched = copy.deepcopy(schema)
    patch = SCHEMA_PATCHES.get(file_name)
    if patch is not None:
        patch(patched)
        logger.debug(f"Applied schema patch for {file_name}")
    return patched


def prepare_schema(file_name: str, schema: Schema) -> AnnotatedSchema:
    """Patch and annotate a freshly loaded schema."""
    patched = patch_schema(file_name, schema)
    annotations = annotate(patched, rules_for(file_name))
    logger.debug(f"{file_name}: {len(annotations)} pointer annotations")
    return AnnotatedSchema(schema=patched, annotations=annotations, file_name=file_name)


def annotated_properties(annotated: AnnotatedSchema) -> List[str]:
    """Names of every property that carries a pointer annotation."""
    return sorted({name for _, name in annotated.annotations})
