"""Tests for the coverage calculator and overview builder (analyzers/coverage.py)."""

from __future__ import annotations

from pathlib import Path

import pytest

from goatcov.analyzers.coverage import (
    CoverageAnalyzer,
    build_overview,
    function_coverage,
    report,
)
from goatcov.errors import FileResolutionError, ProfileParseError, SourceParseError
from goatcov.models.coverage import FileCoverage, FunctionCoverage, Overview, percent
from goatcov.parsing import SourceFunction
from goatcov.profile import CoverageBlock, parse_profiles_text


def _write_file(root: Path, rel: str, content: str) -> Path:
    f = root / rel
    f.parent.mkdir(parents=True, exist_ok=True)
    f.write_text(content, encoding="utf-8")
    return f


def _block(start: int, end: int, stmts: int, count: int) -> CoverageBlock:
    return CoverageBlock(start, 1, end, 2, num_statements=stmts, count=count)


_MATH_GO = """\
package mod

func Add(a, b int) int {
\treturn a + b
}

func Sub(a, b int) int {
\tif a > b {
\t\treturn a - b
\t}
\treturn b - a
}
"""

_UTIL_GO = """\
package util

func Noop() {
}

func Twice(x int) int {
\treturn 2 * x
}
"""

_PROFILE = """\
mode: set
example.com/mod/math.go:3.24,5.2 1 1
example.com/mod/math.go:7.24,8.11 1 1
example.com/mod/math.go:8.11,10.3 1 1
example.com/mod/math.go:11.2,11.14 1 0
example.com/mod/util/util.go:6.22,8.2 1 0
"""


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    root = tmp_path / "src"
    _write_file(root, "go.mod", "module example.com/mod\n")
    _write_file(root, "math.go", _MATH_GO)
    _write_file(root, "util/util.go", _UTIL_GO)
    return root


# ── percent ──────────────────────────────────────────────────────


class TestPercent:
    def test_zero_total_is_zero(self) -> None:
        assert percent(0, 0) == 0.0

    def test_ratio(self) -> None:
        assert percent(1, 4) == 25.0
        assert percent(2, 3) == pytest.approx(66.6667, rel=1e-4)


# ── Coverage calculator ──────────────────────────────────────────


class TestFunctionCoverage:
    def test_spec_scenario_two_of_three(self) -> None:
        fn = SourceFunction(name="f", start_line=1, end_line=6)
        blocks = [_block(1, 3, 2, 1), _block(4, 6, 1, 0)]
        assert function_coverage(fn, blocks) == (2, 3)
        assert f"{percent(2, 3):.0f}" == "67"

    def test_blocks_outside_span_ignored(self) -> None:
        fn = SourceFunction(name="f", start_line=10, end_line=20)
        blocks = [_block(2, 4, 5, 1), _block(12, 13, 2, 1), _block(25, 26, 3, 1)]
        assert function_coverage(fn, blocks) == (2, 2)

    def test_straddling_block_attributed_by_start_line(self) -> None:
        first = SourceFunction(name="first", start_line=1, end_line=5)
        second = SourceFunction(name="second", start_line=6, end_line=10)
        blocks = [_block(4, 7, 3, 1)]
        assert function_coverage(first, blocks) == (3, 3)
        assert function_coverage(second, blocks) == (0, 0)

    def test_span_bounds_inclusive(self) -> None:
        fn = SourceFunction(name="f", start_line=5, end_line=9)
        blocks = [_block(5, 5, 1, 1), _block(9, 9, 1, 0)]
        assert function_coverage(fn, blocks) == (1, 2)

    def test_no_blocks(self) -> None:
        fn = SourceFunction(name="f", start_line=1, end_line=3)
        covered, total = function_coverage(fn, [])
        assert (covered, total) == (0, 0)
        assert percent(covered, total) == 0.0


# ── Overview builder ─────────────────────────────────────────────


class TestBuildOverview:
    def test_function_and_file_coverage(self, source_root: Path) -> None:
        overview = build_overview(parse_profiles_text(_PROFILE), source_root)

        assert [f.name for f in overview.files] == [
            "example.com/mod/math.go",
            "example.com/mod/util/util.go",
        ]
        math, util = overview.files
        assert math.path == "math.go"
        assert math.functions == [
            FunctionCoverage(name="Add", covered=1, total=1),
            FunctionCoverage(name="Sub", covered=2, total=3),
        ]
        assert math.percentage == 75.0
        assert util.functions == [
            FunctionCoverage(name="Noop", covered=0, total=0),
            FunctionCoverage(name="Twice", covered=0, total=1),
        ]
        assert util.percentage == 0.0

    def test_total_is_statement_weighted(self, source_root: Path) -> None:
        overview = build_overview(parse_profiles_text(_PROFILE), source_root)

        assert overview.covered == sum(f.covered for f in overview.files) == 3
        assert overview.total == sum(f.total for f in overview.files) == 5
        assert overview.percentage == 60.0
        mean = sum(f.percentage for f in overview.files) / len(overview.files)
        assert overview.percentage != mean

    def test_idempotent(self, source_root: Path) -> None:
        profiles = parse_profiles_text(_PROFILE)
        assert build_overview(profiles, source_root) == build_overview(profiles, source_root)

    def test_excluded_file_contributes_nothing(self, source_root: Path) -> None:
        overview = build_overview(
            parse_profiles_text(_PROFILE), source_root, exclude=["example.com/mod/util"]
        )
        assert [f.name for f in overview.files] == ["example.com/mod/math.go"]
        assert overview.total == 4

    def test_excluded_file_is_never_resolved(self, source_root: Path) -> None:
        profile = _PROFILE + "example.com/mod/gen/missing.go:1.1,2.2 1 1\n"
        overview = build_overview(
            parse_profiles_text(profile), source_root, exclude=["example.com/mod/gen/"]
        )
        assert len(overview.files) == 2

    def test_empty_profile(self, source_root: Path) -> None:
        overview = build_overview([], source_root)
        assert overview == Overview()
        assert overview.percentage == 0.0

    def test_unresolvable_file_aborts(self, source_root: Path) -> None:
        profile = _PROFILE + "example.com/mod/missing.go:1.1,2.2 1 1\n"
        with pytest.raises(FileResolutionError):
            build_overview(parse_profiles_text(profile), source_root)

    def test_unparsable_file_aborts(self, source_root: Path) -> None:
        _write_file(source_root, "broken.go", "package mod\n\nfunc broken( {\n")
        profile = _PROFILE + "example.com/mod/broken.go:3.1,3.5 1 1\n"
        with pytest.raises(SourceParseError):
            build_overview(parse_profiles_text(profile), source_root)

    def test_analyzer_reuses_locator_across_files(self, source_root: Path) -> None:
        analyzer = CoverageAnalyzer(source_root)
        profiles = parse_profiles_text(_PROFILE)
        analyzer.build_overview(profiles)
        index = analyzer._locator.index
        analyzer.build_overview(profiles)
        assert analyzer._locator.index is index


class TestReport:
    def test_report_from_profile_file(self, source_root: Path, tmp_path: Path) -> None:
        profile = _write_file(tmp_path, "coverage", _PROFILE)
        overview = report(profile, source_root)
        assert overview.percentage == 60.0

    def test_malformed_profile(self, source_root: Path, tmp_path: Path) -> None:
        profile = _write_file(tmp_path, "coverage", "mode: set\ngarbage\n")
        with pytest.raises(ProfileParseError):
            report(profile, source_root)


class TestModels:
    def test_file_percentage_over_functions(self) -> None:
        file_cov = FileCoverage(
            name="a.go",
            functions=[
                FunctionCoverage(name="f", covered=1, total=1),
                FunctionCoverage(name="g", covered=0, total=3),
            ],
        )
        assert file_cov.percentage == 25.0

    def test_empty_file_is_zero(self) -> None:
        assert FileCoverage(name="a.go").percentage == 0.0
