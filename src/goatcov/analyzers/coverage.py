"""Coverage analysis: map profile blocks onto Go functions.

1. Parse the cover profile into per-file blocks
2. Drop files matching an exclude prefix
3. Resolve each remaining file under the source root
4. Extract its function declarations
5. Attribute blocks to functions and aggregate file and total coverage

Any resolution or parse failure aborts the whole report.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from goatcov.locator import PackageLocator, is_excluded
from goatcov.models.coverage import FileCoverage, FunctionCoverage, Overview
from goatcov.parsing.go import GoExtractor
from goatcov.profile import parse_profiles

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from goatcov.parsing.go import SourceFunction
    from goatcov.profile import CoverageBlock, Profile

logger = logging.getLogger(__name__)


def function_coverage(
    function: SourceFunction, blocks: Sequence[CoverageBlock]
) -> tuple[int, int]:
    """Return ``(covered, total)`` statements for *function*.

    A block belongs to the function whose line span contains the block's
    start line. *blocks* must be sorted by start position.
    """
    covered = total = 0
    for block in blocks:
        if block.start_line > function.end_line:
            break
        if block.start_line < function.start_line:
            continue
        total += block.num_statements
        if block.is_covered:
            covered += block.num_statements
    return covered, total


class CoverageAnalyzer:
    """Build an Overview from parsed profiles.

    Each analyzer owns one PackageLocator, so the source tree is walked at
    most once per analyzer.
    """

    def __init__(self, source_root: str | Path = ".", exclude: Iterable[str] = ()) -> None:
        self._locator = PackageLocator(source_root)
        self._exclude = tuple(exclude)
        self._extractor = GoExtractor()

    def build_overview(self, profiles: Iterable[Profile]) -> Overview:
        overview = Overview()
        for profile in profiles:
            if is_excluded(profile.file_name, self._exclude):
                logger.debug("Excluding %s", profile.file_name)
                continue
            overview.files.append(self.analyze_file(profile))

        logger.info(
            "Coverage %.1f%% (%d/%d statements) across %d file(s)",
            overview.percentage,
            overview.covered,
            overview.total,
            len(overview.files),
        )
        return overview

    def analyze_file(self, profile: Profile) -> FileCoverage:
        located = self._locator.locate(profile.file_name)
        functions = self._extractor.extract(located.source, filename=str(located.path))

        file_cov = FileCoverage(
            name=profile.file_name,
            path=located.relative_path(self._locator.root),
        )
        for fn in functions:
            covered, total = function_coverage(fn, profile.blocks)
            file_cov.functions.append(FunctionCoverage(name=fn.name, covered=covered, total=total))
        return file_cov


def build_overview(
    profiles: Iterable[Profile],
    source_root: str | Path = ".",
    exclude: Iterable[str] = (),
) -> Overview:
    """Build an Overview from already-parsed profiles."""
    return CoverageAnalyzer(source_root, exclude).build_overview(profiles)


def report(
    profile_path: str | Path,
    source_root: str | Path = ".",
    exclude: Iterable[str] = (),
) -> Overview:
    """Parse the profile at *profile_path* and build its Overview.

    Raises:
        ProfileParseError: If the profile is unreadable or malformed.
        FileResolutionError: If a profiled file is not under *source_root*.
        SourceParseError: If a profiled file has syntax errors.
    """
    profiles = parse_profiles(Path(profile_path))
    return build_overview(profiles, source_root, exclude)
