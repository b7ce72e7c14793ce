"""Tests for the JSON syntax tree, documents, schema patches and matching."""

import copy
from pathlib import Path

import pytest

from conftest import UNIT_SCHEMA, write_json


class TestJsonAst:
    """Test parsing with offsets."""

    def test_offsets(self) -> None:
        """Test nodes carry the offsets of their source text."""
        from sins_lsp.schema import ObjectNode, StringNode, parse

        text = '{"skins": ["a", "bb"]}'
        root = parse(text)
        assert isinstance(root, ObjectNode)
        assert (root.offset, root.length) == (0, len(text))

        items = root.properties[0].value_node.items  # type: ignore[union-attr]
        second = items[1]
        assert isinstance(second, StringNode)
        assert second.value == "bb"
        assert text[second.offset:second.end] == '"bb"'

    def test_to_python(self) -> None:
        """Test the tree converts back to plain values."""
        from sins_lsp.schema import parse, to_python

        text = '{"a": [1, 2.5, true, null], "b": {"c": "\\u00e9"}}'
        assert to_python(parse(text)) == {"a": [1, 2.5, True, None], "b": {"c": "é"}}

    def test_comments_are_skipped(self) -> None:
        """Test line and block comments are treated as whitespace."""
        from sins_lsp.schema import parse, to_python

        text = '// header\n{"a": /* inline */ 1}'
        assert to_python(parse(text)) == {"a": 1}

    @pytest.mark.parametrize(
        "text, offset",
        [
            ('{"a": }', 6),
            ('{"a": 1,, }', 8),
            ('{"a" 1}', 5),
            ('[1, 2', 5),
            ('{"a": "open', 6),
            ('{} {}', 3),
        ],
    )
    def test_syntax_errors_carry_offset(self, text: str, offset: int) -> None:
        """Test syntax errors report where parsing stopped."""
        from sins_lsp.schema import JsonSyntaxError, parse

        with pytest.raises(JsonSyntaxError) as info:
            parse(text)
        assert info.value.offset == offset

    def test_numbers_beyond_64_bits(self) -> None:
        """Test out-of-range literals parse instead of failing the document."""
        from sins_lsp.schema import parse

        assert parse("1e400").value == float("inf")  # type: ignore[attr-defined]

    def test_nesting_limit(self) -> None:
        """Test deep nesting is a syntax error and shallow nesting is not."""
        from sins_lsp.schema import JsonSyntaxError, parse
        from sins_lsp.schema.json_ast import MAX_NESTING

        parse("[" * MAX_NESTING + "]" * MAX_NESTING)
        with pytest.raises(JsonSyntaxError, match="Nesting too deep") as info:
            parse('{"skins": ' + "[" * 3000 + "]" * 3000 + "}")
        assert info.value.offset == 10 + MAX_NESTING - 1

    def test_node_at_offset(self) -> None:
        """Test the innermost node is found."""
        from sins_lsp.schema import StringNode, node_at_offset, parse

        text = '{"name": "ship_name"}'
        root = parse(text)
        node = node_at_offset(root, text.index("ship_name"))
        assert isinstance(node, StringNode)
        assert node.value == "ship_name"

    def test_owning_property(self) -> None:
        """Test values find their property and keys have none."""
        from sins_lsp.schema import node_at_offset, owning_property, parse

        text = '{"skins": ["a"], "ui": {"name": "n"}}'
        root = parse(text)

        in_array = node_at_offset(root, text.index('"a"') + 1)
        assert owning_property(in_array).name == "skins"  # type: ignore[union-attr]

        key = node_at_offset(root, text.index('"name"') + 1)
        assert owning_property(key) is None  # type: ignore[arg-type]

        nested = node_at_offset(root, text.index('"n"') + 1)
        assert owning_property(nested).name == "name"  # type: ignore[union-attr]

    def test_find_properties(self) -> None:
        """Test name search covers the whole tree."""
        from sins_lsp.schema import find_properties, parse

        root = parse('{"icon": "a", "list": [{"icon": "b"}], "x": {"icon": "c"}}')
        values = [p.value_node.value for p in find_properties(root, "icon")]  # type: ignore[union-attr]
        assert values == ["a", "b", "c"]


class TestTextDocument:
    """Test offset <-> position conversion."""

    def test_position_at(self) -> None:
        """Test lines and characters are zero based."""
        from sins_lsp.schema import Position, TextDocument

        document = TextDocument("file:///mod/a.unit", '{\n  "a": 1\r\n}')
        assert document.position_at(0) == Position(0, 0)
        assert document.position_at(4) == Position(1, 2)
        assert document.position_at(len(document.text)) == Position(2, 1)

    def test_offset_at(self) -> None:
        """Test positions map back to offsets and are clamped to the line."""
        from sins_lsp.schema import Position, TextDocument

        document = TextDocument("file:///mod/a.unit", '{\n  "a": 1\n}')
        assert document.offset_at(Position(1, 2)) == 4
        assert document.offset_at(Position(1, 99)) == document.text.index("}")
        assert document.offset_at(Position(9, 0)) == len(document.text)

    def test_file_name(self) -> None:
        """Test the file name is taken from the URI."""
        from sins_lsp.schema import TextDocument

        assert TextDocument("file:///mod/entities/fighter.unit", "{}").file_name == "fighter.unit"


class TestAssociations:
    """Test document -> schema file associations."""

    @pytest.mark.parametrize(
        "file_name, schema_file",
        [
            ("unit.uniforms", "unit-uniforms-schema.json"),
            ("missions.uniforms", "mission-uniforms-schema.json"),
            ("fighter.unit", "unit-schema.json"),
            ("fighter_skin.unit_skin", "unit-skin-schema.json"),
            ("unit.entity_manifest", "entity-manifest-schema.json"),
            ("en.localized_text", "unknown-schema.json"),
            ("objective_based_structure.uniforms", "unknown-schema.json"),
            ("readme.txt", None),
        ],
    )
    def test_schema_file_for(self, file_name: str, schema_file: str) -> None:
        """Test uniforms match by name and other kinds by extension."""
        from sins_lsp.schema import schema_file_for

        assert schema_file_for(file_name) == schema_file


class TestPatches:
    """Test schema patches and pointer annotations."""

    def test_patch_does_not_mutate_input(self) -> None:
        """Test the loaded schema is left untouched."""
        from sins_lsp.schema import prepare_schema

        schema = {"type": "object", "properties": {"galaxy": {"type": "object"}}}
        original = copy.deepcopy(schema)

        annotated = prepare_schema("galaxy-generator-uniforms-schema.json", schema)
        assert schema == original
        assert "fillings" in annotated.schema["properties"]

    def test_mission_patch(self) -> None:
        """Test mission chains gain the fields the game data uses."""
        from sins_lsp.schema import patch_schema

        chain = {
            "type": "object",
            "properties": {
                "trigger": {"type": "array", "items": {"type": "object", "properties": {}}},
                "reward": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {"spawn_unit_reward": {"type": "object", "properties": {}}},
                    },
                },
            },
        }
        schema = {
            "type": "object",
            "properties": {
                "main_mission_chains": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "operation_chains": {
                                "type": "array",
                                "items": {
                                    "type": "object",
                                    "properties": {"chains": {"type": "array", "items": chain}},
                                },
                            },
                            "side_operations": {"type": "object", "properties": {}},
                        },
                    },
                }
            },
        }
        original = copy.deepcopy(schema)
        patched = patch_schema("mission-uniforms-schema.json", schema)
        assert schema == original

        props = patched["properties"]
        assert props["trigger_hud_definition"] == {"type": "object"}
        mission = props["main_mission_chains"]["items"]["properties"]
        chains = mission["operation_chains"]["items"]["properties"]["chains"]
        chain_props = chains["items"]["properties"]
        assert "trigger_tooltip_desc_override" in chain_props["trigger"]["items"]["properties"]
        spawn = chain_props["reward"]["items"]["properties"]["spawn_unit_reward"]
        assert spawn["properties"]["hyperspace_time"] == {"type": "number"}
        assert mission["side_operations"]["properties"]["chains"] == chains

    def test_unpatched_schema_is_copied(self) -> None:
        """Test schemas without a patch still come back as a copy."""
        from sins_lsp.schema import patch_schema

        schema = {"type": "object"}
        assert patch_schema("unit-schema.json", schema) is not schema

    def test_annotation_side_table(self) -> None:
        """Test annotations are keyed by subschema pointer and property name."""
        from sins_lsp.cache import ReferenceCategory
        from sins_lsp.schema import prepare_schema

        annotated = prepare_schema("unit-schema.json", UNIT_SCHEMA)
        assert annotated.category_of("", "skins") == ReferenceCategory.UNIT_SKIN
        assert annotated.category_of("/properties/user_interface", "name") == ReferenceCategory.LOCALIZED_TEXT
        assert annotated.category_of("/properties/user_interface", "icon") == ReferenceCategory.BRUSH
        assert annotated.category_of("", "max_speed") is None

    def test_prefix_limits_rule(self) -> None:
        """Test prefixed rules ignore same-named properties elsewhere."""
        from sins_lsp.schema import prepare_schema

        schema = {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "user_interface": {"type": "object", "properties": {"name": {"type": "string"}}},
            },
        }
        annotated = prepare_schema("unit-schema.json", schema)
        assert annotated.category_of("", "name") is None
        assert annotated.category_of("/properties/user_interface", "name") is not None

    def test_prefix_follows_refs(self) -> None:
        """Test a prefixed rule reaches a definition referenced from the prefix."""
        from sins_lsp.cache import ReferenceCategory
        from sins_lsp.schema import prepare_schema

        schema = {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "user_interface": {"$ref": "#/definitions/ui"},
            },
            "definitions": {
                "ui": {
                    "type": "object",
                    "properties": {"name": {"type": "string"}, "panel": {"$ref": "#/definitions/panel"}},
                },
                "panel": {"type": "object", "properties": {"description": {"type": "string"}}},
                "other": {"type": "object", "properties": {"name": {"type": "string"}}},
            },
        }
        annotated = prepare_schema("unit-schema.json", schema)
        assert annotated.category_of("/definitions/ui", "name") == ReferenceCategory.LOCALIZED_TEXT
        assert annotated.category_of("/definitions/panel", "description") == ReferenceCategory.LOCALIZED_TEXT
        assert annotated.category_of("/definitions/other", "name") is None
        assert annotated.category_of("", "name") is None

    def test_prefix_is_a_whole_token(self) -> None:
        """Test a prefix does not match a sibling that merely starts with it."""
        from sins_lsp.schema import prepare_schema

        schema = {
            "type": "object",
            "properties": {
                "user_interface_extra": {"type": "object", "properties": {"name": {"type": "string"}}},
            },
        }
        annotated = prepare_schema("unit-schema.json", schema)
        assert annotated.category_of("/properties/user_interface_extra", "name") is None


class TestSchemaStore:
    """Test schema resolution by URI."""

    def test_resolve_caches_annotated_copy(self, schemas_dir: Path) -> None:
        """Test a schema is loaded once and reused."""
        from sins_lsp.schema import SchemaStore

        store = SchemaStore(schemas_dir)
        uri = store.uri_for("unit-schema.json")
        first = store.resolve_schema_by_uri(uri)
        assert store.resolve_schema_by_uri(uri) is first
        assert len(store) == 1

    def test_missing_schema_raises(self, tmp_path: Path) -> None:
        """Test an unreadable schema raises SchemaLoadError."""
        from sins_lsp.schema import SchemaLoadError, SchemaStore

        store = SchemaStore(tmp_path)
        with pytest.raises(SchemaLoadError):
            store.resolve_schema_by_uri(store.uri_for("weapon-schema.json"))

    def test_schema_for_document(self, schemas_dir: Path) -> None:
        """Test documents resolve through associations; missing schemas give None."""
        from sins_lsp.schema import SchemaStore

        store = SchemaStore(schemas_dir)
        assert store.schema_for_document("fighter.unit") is not None
        assert store.schema_for_document("laser.weapon") is None
        assert store.schema_for_document("notes.txt") is None

    def test_bundled_schemas(self, tmp_path: Path) -> None:
        """Test unknown kinds and manifests use the packaged schemas."""
        from sins_lsp.schema import SchemaStore

        store = SchemaStore(tmp_path)
        assert store.schema_for_document("en.localized_text") is not None
        assert store.schema_for_document("unit.entity_manifest") is not None

    def test_missing_directory_uses_bundled(self, tmp_path: Path) -> None:
        """Test a schemas path that is not a directory falls back to the packaged schemas."""
        from sins_lsp.schema.store import BUNDLED_SCHEMAS_PATH, SchemaStore

        missing = SchemaStore(tmp_path / "missing")
        assert missing.schemas_path == BUNDLED_SCHEMAS_PATH
        assert missing.schema_for_document("en.localized_text") is not None

        a_file = tmp_path / "schemas.json"
        a_file.write_text("{}", encoding="utf-8")
        assert SchemaStore(a_file).schemas_path == BUNDLED_SCHEMAS_PATH
        assert SchemaStore(tmp_path).schemas_path == tmp_path


class TestMatcher:
    """Test subschema matching."""

    def test_matches_follow_properties_and_refs(self) -> None:
        """Test pointers of matched subschemas, through $ref."""
        from sins_lsp.schema import get_matching_schemas, parse, prepare_schema

        schema = {
            "type": "object",
            "properties": {"ui": {"$ref": "#/definitions/ui"}},
            "definitions": {"ui": {"type": "object", "properties": {"name": {"type": "string"}}}},
        }
        text = '{"ui": {"name": "x"}}'
        root = parse(text)
        matches = get_matching_schemas(prepare_schema("t.json", schema), root)
        pointers = {m.pointer for m in matches}
        assert {"", "/properties/ui", "/definitions/ui", "/definitions/ui/properties/name"} <= pointers

    def test_one_of_picks_valid_branch(self) -> None:
        """Test only valid oneOf branches are followed when one exists."""
        from sins_lsp.schema import get_matching_schemas, parse, prepare_schema

        schema = {
            "oneOf": [
                {"type": "object", "required": ["a"], "properties": {"a": {"type": "string"}}},
                {"type": "object", "required": ["b"], "properties": {"b": {"type": "string"}}},
            ]
        }
        matches = get_matching_schemas(prepare_schema("t.json", schema), parse('{"b": "x"}'))
        pointers = {m.pointer for m in matches}
        assert "/oneOf/1" in pointers
        assert "/oneOf/0" not in pointers


class TestSchemaValidation:
    """Test generic validation mapped to nodes."""

    def test_errors_point_at_nodes(self) -> None:
        """Test a type error is placed on the offending value."""
        from sins_lsp.schema import parse, prepare_schema, validate

        text = '{"max_speed": "fast"}'
        problems = validate(prepare_schema("unit-schema.json", UNIT_SCHEMA), parse(text))
        assert len(problems) == 1
        assert text[problems[0].node.offset:problems[0].node.end] == '"fast"'

    def test_additional_property_points_at_key(self) -> None:
        """Test unexpected properties are reported on their keys."""
        from sins_lsp.schema import parse, prepare_schema, validate

        text = '{"skins": [], "speed": 1}'
        problems = validate(prepare_schema("unit-schema.json", UNIT_SCHEMA), parse(text))
        assert [p.message for p in problems] == ["Property speed is not allowed."]
        assert text[problems[0].node.offset:problems[0].node.end] == '"speed"'

    def test_valid_document(self, tmp_path: Path) -> None:
        """Test a conforming document has no problems."""
        from sins_lsp.schema import parse, prepare_schema, validate

        path = write_json(tmp_path / "fighter.unit", {"skins": ["a"], "max_speed": 3})
        text = path.read_text(encoding="utf-8")
        assert validate(prepare_schema("unit-schema.json", UNIT_SCHEMA), parse(text)) == []
