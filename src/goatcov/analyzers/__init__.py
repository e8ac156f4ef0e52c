"""Coverage and diff analysis."""

from goatcov.analyzers.coverage import (
    CoverageAnalyzer,
    build_overview,
    function_coverage,
    report,
)
from goatcov.analyzers.diff import diff_file, diff_overviews

__all__ = [
    "CoverageAnalyzer",
    "build_overview",
    "diff_file",
    "diff_overviews",
    "function_coverage",
    "report",
]
