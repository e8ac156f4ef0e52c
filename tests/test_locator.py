"""Tests for the package/file locator (locator.py)."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest

from goatcov.errors import FileResolutionError
from goatcov.locator import PackageLocator, is_excluded, read_module_path

if TYPE_CHECKING:
    from collections.abc import Iterator


def _write_file(root: Path, rel: str, content: str = "package x\n") -> Path:
    f = root / rel
    f.parent.mkdir(parents=True, exist_ok=True)
    f.write_text(content, encoding="utf-8")
    return f


@pytest.fixture
def module_tree(tmp_path: Path) -> Path:
    _write_file(tmp_path, "go.mod", "module example.com/mod\n\ngo 1.21\n")
    _write_file(tmp_path, "main.go", "package main\n")
    _write_file(tmp_path, "pkg/util/util.go", "package util\n")
    _write_file(tmp_path, "sub/go.mod", "module example.com/sub\n")
    _write_file(tmp_path, "sub/inner/c.go", "package inner\n")
    _write_file(tmp_path, "vendor/dep/dep.go", "package dep\n")
    _write_file(tmp_path, "pkg/testdata/fixture.go", "package fixture\n")
    _write_file(tmp_path, ".cache/hidden.go", "package hidden\n")
    return tmp_path


class TestIndex:
    def test_module_qualified_identifiers(self, module_tree: Path) -> None:
        locator = PackageLocator(module_tree)
        assert set(locator.index) == {
            "example.com/mod/main.go",
            "example.com/mod/pkg/util/util.go",
            "example.com/sub/inner/c.go",
        }

    def test_without_go_mod_uses_relative_paths(self, tmp_path: Path) -> None:
        _write_file(tmp_path, "a.go")
        _write_file(tmp_path, "pkg/b.go")
        locator = PackageLocator(tmp_path)
        assert set(locator.index) == {"a.go", "pkg/b.go"}

    def test_non_go_files_ignored(self, tmp_path: Path) -> None:
        _write_file(tmp_path, "README.md", "# hi\n")
        _write_file(tmp_path, "a.go")
        assert list(PackageLocator(tmp_path).index) == ["a.go"]

    def test_tree_walked_once(self, module_tree: Path) -> None:
        locator = PackageLocator(module_tree)
        with patch.object(
            PackageLocator,
            "_build_index",
            autospec=True,
            side_effect=PackageLocator._build_index,
        ) as build:
            locator.locate("example.com/mod/main.go")
            locator.locate("example.com/mod/pkg/util/util.go")
            locator.locate("example.com/sub/inner/c.go")
        assert build.call_count == 1


class TestLocate:
    def test_returns_path_and_source(self, module_tree: Path) -> None:
        located = PackageLocator(module_tree).locate("example.com/mod/pkg/util/util.go")
        assert located.path == (module_tree / "pkg/util/util.go").resolve()
        assert located.source == b"package util\n"
        assert located.relative_path(module_tree.resolve()) == "pkg/util/util.go"

    def test_nested_module(self, module_tree: Path) -> None:
        located = PackageLocator(module_tree).locate("example.com/sub/inner/c.go")
        assert located.source == b"package inner\n"

    def test_not_found(self, module_tree: Path) -> None:
        with pytest.raises(FileResolutionError, match="missing.go"):
            PackageLocator(module_tree).locate("example.com/mod/missing.go")

    def test_vendor_not_resolved(self, module_tree: Path) -> None:
        with pytest.raises(FileResolutionError):
            PackageLocator(module_tree).locate("example.com/mod/vendor/dep/dep.go")

    def test_absolute_identifier(self, tmp_path: Path) -> None:
        outside = _write_file(tmp_path, "elsewhere/x.go", "package x\n")
        (tmp_path / "empty").mkdir()
        locator = PackageLocator(tmp_path / "empty")
        assert locator.locate(str(outside)).path == outside

    def test_underscore_absolute_identifier(self, tmp_path: Path) -> None:
        outside = _write_file(tmp_path, "elsewhere/x.go", "package x\n")
        (tmp_path / "empty").mkdir()
        locator = PackageLocator(tmp_path / "empty")
        assert locator.locate(f"_{outside}").path == outside


class TestExclusion:
    def test_prefix_match(self) -> None:
        assert is_excluded("example.com/mod/gen/a.go", ["example.com/mod/gen"])

    def test_prefix_is_plain_string(self) -> None:
        # "gen" also matches "generated"; this is not a path-aware match.
        assert is_excluded("example.com/mod/generated.go", ["example.com/mod/gen"])

    def test_no_match(self) -> None:
        assert not is_excluded("example.com/mod/a.go", ["example.com/other", "mod/"])

    def test_empty_prefix_never_matches(self) -> None:
        assert not is_excluded("example.com/mod/a.go", [""])

    def test_odd_prefixes_never_error(self) -> None:
        assert not is_excluded("a.go", ["../..", "*", "\\", "a.go/extra"])


class TestReadModulePath:
    def test_plain(self, tmp_path: Path) -> None:
        go_mod = _write_file(tmp_path, "go.mod", "// comment\nmodule example.com/x\n")
        assert read_module_path(go_mod) == "example.com/x"

    def test_quoted(self, tmp_path: Path) -> None:
        go_mod = _write_file(tmp_path, "go.mod", 'module "example.com/quoted"\n')
        assert read_module_path(go_mod) == "example.com/quoted"

    def test_missing_directive(self, tmp_path: Path) -> None:
        go_mod = _write_file(tmp_path, "go.mod", "go 1.21\n")
        assert read_module_path(go_mod) is None


class TestSourceRootInsideModule:
    def test_identifiers_use_enclosing_go_mod(self, module_tree: Path) -> None:
        locator = PackageLocator(module_tree / "pkg")
        assert set(locator.index) == {"example.com/mod/pkg/util/util.go"}

    def test_locate_from_subdirectory(self, module_tree: Path) -> None:
        located = PackageLocator(module_tree / "pkg").locate("example.com/mod/pkg/util/util.go")
        assert located.source == b"package util\n"
        assert located.relative_path(module_tree.resolve() / "pkg") == "util/util.go"


class TestWalkPruning:
    def test_skipped_directories_never_entered(self, module_tree: Path) -> None:
        visited: list[Path] = []
        real_walk = os.walk

        def recording_walk(top: Path) -> Iterator[tuple[str, list[str], list[str]]]:
            for entry in real_walk(top):
                visited.append(Path(entry[0]))
                yield entry

        with patch("goatcov.locator.os.walk", side_effect=recording_walk):
            index = PackageLocator(module_tree).index

        root = module_tree.resolve()
        names = {part for path in visited for part in path.relative_to(root).parts}
        assert "vendor" not in names
        assert "testdata" not in names
        assert ".cache" not in names
        assert "util" in names
        assert "example.com/mod/pkg/util/util.go" in index
