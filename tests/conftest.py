"""Shared fixtures: a small mod workspace and test schemas."""

import struct
from pathlib import Path
from typing import Any, Iterator

import orjson
import pytest


def write_json(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(orjson.dumps(data, option=orjson.OPT_INDENT_2))
    return path


def dds_with_fourcc(fourcc: bytes) -> bytes:
    """A 4x4 DDS header declaring a compressed pixel format, without pixel data."""
    header = struct.pack("<7I", 124, 0x1007, 4, 4, 0, 0, 0) + bytes(44)
    pixel_format = struct.pack("<2I", 32, 0x4) + fourcc + struct.pack("<5I", 0, 0, 0, 0, 0)
    return b"DDS " + header + pixel_format + bytes(20)


UNIT_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Unit",
    "type": "object",
    "properties": {
        "skins": {"type": "array", "items": {"type": "string"}},
        "abilities": {"type": "array", "items": {"type": "string"}},
        "max_speed": {"type": "number", "description": "Top speed in units per second."},
        "user_interface": {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "description": {"type": "string"},
                "icon": {"type": "string"},
            },
        },
    },
    "additionalProperties": False,
}

UNIT_SKIN_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "texture": {"type": "string"},
        "mesh": {"type": "string"},
    },
}


@pytest.fixture
def schemas_dir(tmp_path: Path) -> Path:
    """Directory holding the unit and unit skin schemas."""
    directory = tmp_path / "schemas"
    write_json(directory / "unit-schema.json", UNIT_SCHEMA)
    write_json(directory / "unit-skin-schema.json", UNIT_SKIN_SCHEMA)
    return directory


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A mod folder with a unit, its skin, manifests, localization and images."""
    from PIL import Image

    root = tmp_path / "mod"
    write_json(
        root / "entities" / "fighter.unit",
        {
            "skins": ["fighter_skin"],
            "user_interface": {"name": "ship_name", "icon": "fighter_icon"},
        },
    )
    write_json(root / "entities" / "fighter_skin.unit_skin", {"texture": "fighter_diffuse"})
    write_json(root / "entities" / "unit.entity_manifest", {"ids": ["fighter"]})
    write_json(root / "entities" / "unit_skin.entity_manifest", {"ids": ["fighter_skin"]})
    write_json(root / "localized_text" / "en.localized_text", {"ship_name": "Falcon"})
    write_json(root / "localized_text" / "fr.localized_text", {"ship_name": "Faucon"})

    textures = root / "textures"
    textures.mkdir(parents=True)
    (textures / "fighter_diffuse.dds").write_bytes(b"DDS " + bytes(124))
    Image.new("RGBA", (4, 2), (255, 0, 0, 255)).save(textures / "fighter_icon.png")

    # Noise that must never be indexed
    write_json(root / ".git" / "fighter.unit", {})
    return root


@pytest.fixture
def service(schemas_dir: Path) -> Iterator[Any]:
    """A ReferenceService reading schemas from `schemas_dir`."""
    from sins_lsp.service import ReferenceService

    svc = ReferenceService(schemas_path=schemas_dir)
    yield svc
    svc.shutdown()
