"""Go cover profile parsing.

Parses the standard Go cover profile format (mode header, then one
``file:startLine.startCol,endLine.endCol numStmts count`` block per line)
as written by ``go test -coverprofile``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from goatcov.errors import ProfileParseError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

# ── Constants ────────────────────────────────────────────────────

_MODE_PREFIX = "mode: "
_COUNTING_MODES = frozenset({"count", "atomic"})
_SUPPORTED_MODES = frozenset({"set"}) | _COUNTING_MODES

# Cover profile: "file:startLine.startCol,endLine.endCol numStmts count"
_COVER_LINE_REGEX = re.compile(r"^(.+):(\d+)\.(\d+),(\d+)\.(\d+) (\d+) (\d+)$")


# ── Data models ──────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class CoverageBlock:
    """A single statement block of a cover profile."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int
    num_statements: int
    count: int

    @property
    def is_covered(self) -> bool:
        """Return True if this block was executed at least once."""
        return self.count > 0


@dataclass(frozen=True, slots=True)
class Profile:
    """All blocks recorded for one source file."""

    file_name: str
    """Import-path-qualified file identifier, e.g. ``example.com/pkg/foo.go``."""

    mode: str
    """Profile mode: ``set``, ``count`` or ``atomic``."""

    blocks: tuple[CoverageBlock, ...] = ()
    """Blocks sorted by start position, duplicates merged."""


# ── Parsing ──────────────────────────────────────────────────────


def parse_profiles(path: Path) -> list[Profile]:
    """Read and parse a cover profile file."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ProfileParseError(f"cannot read profile {path}: {e}") from e
    profiles = parse_profiles_text(text, source=str(path))
    logger.debug("Parsed %d file(s) from profile %s", len(profiles), path)
    return profiles


def parse_profiles_text(text: str, *, source: str = "<profile>") -> list[Profile]:
    """Parse cover profile text into one Profile per file.

    Files are returned in order of their first appearance. Any line that
    does not match the block format fails the whole profile.
    """
    mode = ""
    blocks_by_file: dict[str, list[CoverageBlock]] = {}

    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue
        if not mode:
            mode = _parse_mode(line, source, lineno)
            continue
        match = _COVER_LINE_REGEX.match(line)
        if not match:
            raise ProfileParseError(
                f"{source}:{lineno}: line does not match expected format: {line!r}"
            )
        file_name, *numbers = match.groups()
        start_line, start_col, end_line, end_col, num_stmts, count = (int(n) for n in numbers)
        blocks_by_file.setdefault(file_name, []).append(
            CoverageBlock(
                start_line=start_line,
                start_col=start_col,
                end_line=end_line,
                end_col=end_col,
                num_statements=num_stmts,
                count=count,
            )
        )

    return [
        Profile(file_name=name, mode=mode, blocks=_sort_and_merge(name, mode, blocks))
        for name, blocks in blocks_by_file.items()
    ]


def _parse_mode(line: str, source: str, lineno: int) -> str:
    if not line.startswith(_MODE_PREFIX):
        raise ProfileParseError(f"{source}:{lineno}: bad mode line: {line!r}")
    mode = line[len(_MODE_PREFIX) :].strip()
    if mode not in _SUPPORTED_MODES:
        raise ProfileParseError(f"{source}:{lineno}: unknown profile mode: {mode!r}")
    return mode


def _sort_and_merge(
    file_name: str, mode: str, blocks: list[CoverageBlock]
) -> tuple[CoverageBlock, ...]:
    """Sort blocks by start position and merge blocks covering the same range.

    The same block shows up several times when a package is tested by
    more than one test binary.
    """
    blocks.sort(key=lambda b: (b.start_line, b.start_col))
    merged: list[CoverageBlock] = []
    for block in blocks:
        last = merged[-1] if merged else None
        if last is None or _span(last) != _span(block):
            merged.append(block)
            continue
        if last.num_statements != block.num_statements:
            raise ProfileParseError(
                f"{file_name}:{block.start_line}.{block.start_col}: inconsistent statement "
                f"count: changed from {last.num_statements} to {block.num_statements}"
            )
        if mode in _COUNTING_MODES:
            count = last.count + block.count
        else:
            count = last.count | block.count
        merged[-1] = CoverageBlock(
            start_line=last.start_line,
            start_col=last.start_col,
            end_line=last.end_line,
            end_col=last.end_col,
            num_statements=last.num_statements,
            count=count,
        )
    return tuple(merged)


def _span(block: CoverageBlock) -> tuple[int, int, int, int]:
    return (block.start_line, block.start_col, block.end_line, block.end_col)
