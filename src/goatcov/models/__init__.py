"""Data models for goatcov."""

from goatcov.models.coverage import FileCoverage, FunctionCoverage, Overview, percent
from goatcov.models.diff import Diff, DiffEntry, DiffFile

__all__ = [
    "Diff",
    "DiffEntry",
    "DiffFile",
    "FileCoverage",
    "FunctionCoverage",
    "Overview",
    "percent",
]
