import asyncio
import os
from pathlib import Path

import pytest

from sins_lsp.cache import ReferenceCategory
from sins_lsp.service import ReferenceService

SINS_PATH = os.environ.get("SINS_PATH") or "D:/Games/Sins2"


@pytest.mark.skipif(not Path(SINS_PATH).exists(), reason="Sins II data not found")
def test_game_data_rebuild():
    service = ReferenceService()
    try:
        asyncio.run(service.rebuild(SINS_PATH))
        stats = service.statistics()
        print(f"✓ workspace loaded: {stats}")
        assert stats["identifiers"] > 0
        assert service.store.get(ReferenceCategory.UNIT), "no units cached"
        assert service.localization.get_file("en") is not None, "en.localized_text not found"
    finally:
        service.shutdown()


@pytest.mark.skipif(not Path(SINS_PATH).exists(), reason="Sins II data not found")
def test_every_unit_manifest_id_is_indexed():
    service = ReferenceService()
    try:
        asyncio.run(service.rebuild(SINS_PATH))
        missing = [
            unit for unit in service.store.get(ReferenceCategory.UNIT) if service.index.lookup(unit) is None
        ]
        print(f"[units without a .unit file] {missing[:10]}")
        assert not missing
    finally:
        service.shutdown()
