"""Tests for file enumeration and the identifier index."""

from pathlib import Path

from conftest import write_json


class TestFileFinder:
    """Test depth-bounded file enumeration."""

    def test_find_returns_absolute_paths(self, workspace: Path) -> None:
        """Test found paths are absolute and match the suffix."""
        from sins_lsp.workspace import FileFinder

        found = FileFinder().find(workspace, ".unit")
        assert found
        assert all(Path(p).is_absolute() for p in found)
        assert all(p.endswith(".unit") for p in found)

    def test_git_directory_is_never_entered(self, workspace: Path) -> None:
        """Test nothing under .git is returned, whatever the suffix."""
        from sins_lsp.workspace import FileFinder

        finder = FileFinder()
        for suffix in (".unit", ".json", "", "fighter.unit"):
            for path in finder.find(workspace, suffix):
                assert ".git" not in Path(path).parts

    def test_depth_limit(self, tmp_path: Path) -> None:
        """Test directories deeper than max_depth are skipped."""
        from sins_lsp.workspace import FileFinder

        write_json(tmp_path / "a" / "shallow.unit", {})
        write_json(tmp_path / "a" / "b" / "c" / "deep.unit", {})

        names = [Path(p).name for p in FileFinder(max_depth=1).find(tmp_path, ".unit")]
        assert names == ["shallow.unit"]

    def test_missing_root_yields_nothing(self, tmp_path: Path) -> None:
        """Test a missing root is logged, not raised."""
        from sins_lsp.workspace import FileFinder

        assert FileFinder().find(tmp_path / "nope", ".unit") == []


class TestIdentifierIndex:
    """Test the identifier -> paths index."""

    def test_identifier_of(self) -> None:
        """Test identifiers stop at the first dot of the base name."""
        from sins_lsp.workspace import identifier_of

        assert identifier_of("/mod/entities/fighter.unit") == "fighter"
        assert identifier_of("/mod/uniforms/unit.uniforms") == "unit"
        assert identifier_of("/mod/textures/icon.dds.bak") == "icon"

    def test_fighter_lookup(self, workspace: Path) -> None:
        """Test lookup of a unit returns only its .unit file."""
        from sins_lsp.workspace import IdentifierIndex

        index = IdentifierIndex()
        index.rebuild(workspace)

        paths = index.lookup("fighter")
        assert paths is not None
        assert len(paths) == 1
        assert paths[0].endswith("fighter.unit")

    def test_lookup_unknown(self, workspace: Path) -> None:
        """Test unknown identifiers are not found."""
        from sins_lsp.workspace import IdentifierIndex

        index = IdentifierIndex()
        index.rebuild(workspace)
        assert index.lookup("bomber") is None

    def test_every_key_derives_from_its_paths(self, workspace: Path) -> None:
        """Test every identifier has a path whose identifier equals it."""
        from sins_lsp.workspace import IdentifierIndex, identifier_of

        index = IdentifierIndex()
        index.rebuild(workspace)
        assert len(index) > 0
        for identifier, paths in index.items():
            assert any(identifier_of(p) == identifier for p in paths)

    def test_shared_identifier_keeps_all_paths(self, tmp_path: Path) -> None:
        """Test files of different kinds with the same identifier are all kept."""
        from sins_lsp.workspace import IdentifierIndex

        write_json(tmp_path / "fighter.unit", {})
        write_json(tmp_path / "fighter.weapon", {})

        index = IdentifierIndex()
        index.rebuild(tmp_path)
        paths = index.lookup("fighter") or []
        assert sorted(Path(p).suffix for p in paths) == [".unit", ".weapon"]

    def test_reverse_lookup(self, workspace: Path) -> None:
        """Test reverse lookup finds the identifier of an indexed path."""
        from sins_lsp.workspace import IdentifierIndex

        index = IdentifierIndex()
        index.rebuild(workspace)
        path = (index.lookup("fighter_skin") or [])[0]
        assert index.reverse_lookup(path) == "fighter_skin"
        assert index.reverse_lookup("/not/indexed.unit") is None

    def test_rebuild_replaces_entries(self, workspace: Path, tmp_path: Path) -> None:
        """Test a rebuild drops identifiers of the previous workspace."""
        from sins_lsp.workspace import IdentifierIndex

        other = tmp_path / "other"
        write_json(other / "bomber.unit", {})

        index = IdentifierIndex()
        index.rebuild(workspace)
        index.rebuild(other)
        assert "fighter" not in index
        assert "bomber" in index

    def test_lookup_returns_copy(self, workspace: Path) -> None:
        """Test callers cannot mutate index entries."""
        from sins_lsp.workspace import IdentifierIndex

        index = IdentifierIndex()
        index.rebuild(workspace)
        (index.lookup("fighter") or []).append("/tmp/x.unit")
        assert len(index.lookup("fighter") or []) == 1
