"""Coverage report models."""

from __future__ import annotations

from dataclasses import dataclass, field


def percent(covered: int, total: int) -> float:
    """Return ``covered`` as a percentage of ``total``; 0.0 when there is nothing to cover."""
    if total == 0:
        return 0.0
    return 100.0 * covered / total


@dataclass
class FunctionCoverage:
    """Statement coverage for a single function."""

    name: str
    """Function name; methods are qualified by receiver (``(*T).Name``)."""

    covered: int = 0
    """Statements executed at least once."""

    total: int = 0
    """Statements attributed to this function."""

    @property
    def percentage(self) -> float:
        return percent(self.covered, self.total)


@dataclass
class FileCoverage:
    """Statement coverage for a single source file."""

    name: str
    """File identifier as it appears in the profile."""

    functions: list[FunctionCoverage] = field(default_factory=list)
    """Per-function coverage in declaration order."""

    path: str = ""
    """Source path relative to the source root."""

    @property
    def covered(self) -> int:
        return sum(fn.covered for fn in self.functions)

    @property
    def total(self) -> int:
        return sum(fn.total for fn in self.functions)

    @property
    def percentage(self) -> float:
        """Covered/total over all functions in the file (not a mean of function percentages)."""
        return percent(self.covered, self.total)


@dataclass
class Overview:
    """Aggregated coverage for one profile run."""

    files: list[FileCoverage] = field(default_factory=list)
    """Per-file coverage in profile order."""

    @property
    def covered(self) -> int:
        return sum(f.covered for f in self.files)

    @property
    def total(self) -> int:
        return sum(f.total for f in self.files)

    @property
    def percentage(self) -> float:
        """Covered/total over every file's statements."""
        return percent(self.covered, self.total)
