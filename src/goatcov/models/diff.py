"""Coverage diff models."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class DiffEntry:
    """A function whose coverage changed between two reports."""

    name: str
    baseline: float
    current: float

    @property
    def delta(self) -> float:
        return self.current - self.baseline


@dataclass
class DiffFile:
    """A file with at least one changed function."""

    name: str
    baseline: float
    current: float
    entries: list[DiffEntry] = field(default_factory=list)
    is_new: bool = False
    """True when the file is absent from the baseline report."""

    @property
    def delta(self) -> float:
        return self.current - self.baseline


@dataclass
class Diff:
    """Change-only comparison of a baseline and a current report."""

    baseline: float
    """Baseline total percentage."""

    current: float
    """Current total percentage."""

    files: list[DiffFile] = field(default_factory=list)

    @property
    def delta(self) -> float:
        return self.current - self.baseline

    @property
    def total_changed(self) -> bool:
        return self.baseline != self.current

    @property
    def is_empty(self) -> bool:
        """True when nothing changed at all."""
        return not self.total_changed and not self.files
