"""
File name -> schema file associations.

Uniform documents are matched by their exact file name; entities and the
other data kinds by ``*.<extension>`` pattern. Kinds without a published
schema use the permissive bundled ``unknown-schema.json``.
"""

from fnmatch import fnmatchcase
from typing import Dict, List, Optional, Tuple

UNKNOWN_SCHEMA = "unknown-schema.json"
ENTITY_MANIFEST_SCHEMA = "entity-manifest-schema.json"

# Schemas shipped inside the package rather than with the game
BUNDLED_SCHEMAS = frozenset({UNKNOWN_SCHEMA, ENTITY_MANIFEST_SCHEMA})

UNIFORMS_SCHEMAS: Dict[str, str] = {
    "action.uniforms": "action-uniforms-schema.json",
    "attack_target_type.uniforms": "attack-target-type-uniforms-schema.json",
    "attack_target_type_group.uniforms": "attack-target-type-group-uniforms-schema.json",
    "culture.uniforms": "culture-uniforms-schema.json",
    "debris.uniforms": "debris-uniforms-schema.json",
    "diplomatic_tag.uniforms": "diplomatic-tags-schema.json",
    "exotic.uniforms": "exotic-uniforms-schema.json",
    "formation.uniforms": "formation-uniforms-schema.json",
    "front_end.uniforms": "front-end-uniforms-schema.json",
    "future_orbit.uniforms": "future-orbit-uniforms-schema.json",
    "galaxy_generator.uniforms": "galaxy-generator-uniforms-schema.json",
    "game_renderer.uniforms": "game-renderer-uniforms-schema.json",
    "gui.uniforms": "gui-uniforms-schema.json",
    "hud_skin.uniforms": "hud-skin-uniforms-schema.json",
    "loot.uniforms": "loot-uniforms-schema.json",
    "main_view.uniforms": "main-view-uniforms-schema.json",
    "missions.uniforms": "mission-uniforms-schema.json",
    "music.uniforms": "music-uniforms-schema.json",
    "notification.uniforms": "notification-uniforms-schema.json",
    "objective_based_structure.uniforms": UNKNOWN_SCHEMA,
    "planet.uniforms": "planet-uniforms-schema.json",
    "planet_track.uniforms": "planet-track-uniforms-schema.json",
    "player.uniforms": "player-uniforms-schema.json",
    "player_ai.uniforms": "player-ai-uniforms-schema.json",
    "player_ai_diplomacy.uniforms": "player-ai-diplomacy-schema.json",
    "player_color.uniforms": "player-color-uniforms-schema.json",
    "player_race.uniforms": "player-race-uniforms-schema.json",
    "random_skybox_filling.uniforms": "random-skybox-fillings-uniforms-schema.json",
    "research.uniforms": "research-uniforms-schema.json",
    "scenario.uniforms": "scenario-uniforms-schema.json",
    "special_operation_unit.uniforms": "special-operation-unit-uniforms-schema.json",
    "start_mode.uniforms": "start-mode-uniforms-schema.json",
    "strikecraft.uniforms": "strikecraft-uniforms-schema.json",
    "target_filter.uniforms": "target-filter-uniforms-schema.json",
    "tutorial.uniforms": "tutorial-uniforms-schema.json",
    "unit.uniforms": "unit-uniforms-schema.json",
    "unit_bar.uniforms": "unit-bar-uniforms-schema.json",
    "unit_build.uniforms": "unit-build-uniforms-schema.json",
    "unit_mutation.uniforms": "unit-mutation-uniforms-schema.json",
    "unit_tag.uniforms": "unit-tag-uniforms-schema.json",
    "user_interface.uniforms": "user-interface-uniforms-schema.json",
    "weapon.uniforms": "weapon-uniforms-schema.json",
}

ENTITY_SCHEMAS: Dict[str, str] = {
    "*.ability": "ability-schema.json",
    "*.action_data_source": "action-data-source-schema.json",
    "*.buff": "buff-schema.json",
    "*.entity_manifest": ENTITY_MANIFEST_SCHEMA,
    "*.exotic": "exotic-schema.json",
    "*.flight_pattern": "flight-pattern-schema.json",
    "*.formation": "formation-schema.json",
    "*.npc_reward": "npc-reward-schema.json",
    "*.player": "player-schema.json",
    "*.research_subject": "research-subject-schema.json",
    "*.start_mode": UNKNOWN_SCHEMA,
    "*.unit": "unit-schema.json",
    "*.unit_item": "unit-item-schema.json",
    "*.unit_skin": "unit-skin-schema.json",
    "*.weapon": "weapon-schema.json",
    "*.brush": "brush-schema.json",
}

UNKNOWN_PATTERNS: Tuple[str, ...] = (
    "*.named_colors",
    "*.cursor",
    "*.death_sequence",
    "*.beam_effect",
    "*.exhaust_trail_effect",
    "*.particle_effect",
    "*.shield_effect",
    "*.font",
    "*.gdpr_accept_data",
    "*.gravity_well_props",
    "*.gui",
    "*.button_style",
    "*.drop_box_style",
    "*.label_style",
    "*.list_box_style",
    "*.reflect_box_style",
    "*.scroll_bar_style",
    "*.text_entry_box_style",
    "*.localized_text",
    "*.mesh_materials",
    "*.player_color_group",
    "*.player_icon",
    "*.player_portrait",
    "*.scenario",
    "*.skybox",
    "*.sound",
    "*.texture_animation",
    "*.welcome_message",
    "*.playtime_message",
    ".mod_meta_data",
    "settings_override.json",
)


def _build_associations() -> List[Tuple[str, str]]:
    associations: List[Tuple[str, str]] = list(UNIFORMS_SCHEMAS.items())
    associations.extend(ENTITY_SCHEMAS.items())
    associations.extend((pattern, UNKNOWN_SCHEMA) for pattern in UNKNOWN_PATTERNS)
    return associations


# (file pattern, schema file), first match wins
SCHEMA_ASSOCIATIONS: List[Tuple[str, str]] = _build_associations()


def schema_file_for(file_name: str) -> Optional[str]:
    """Return the schema file name associated with a document file name."""
    for pattern, schema_file in SCHEMA_ASSOCIATIONS:
        if fnmatchcase(file_name, pattern):
            return schema_file
    return None
