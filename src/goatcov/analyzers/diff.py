"""Compare two coverage reports and keep only what changed."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from goatcov.models.coverage import FileCoverage, FunctionCoverage
from goatcov.models.diff import Diff, DiffEntry, DiffFile

if TYPE_CHECKING:
    from goatcov.models.coverage import Overview

logger = logging.getLogger(__name__)


def diff_overviews(baseline: Overview, current: Overview) -> Diff:
    """Return the changes from *baseline* to *current*.

    Files and functions are walked in *current*'s order. Anything missing
    from the baseline counts as 0%. Files that only exist in the baseline
    are not reported, and a file appears only if at least one of its
    functions changed.
    """
    result = Diff(baseline=baseline.percentage, current=current.percentage)
    baseline_files = {f.name: f for f in baseline.files}

    for file2 in current.files:
        file1 = baseline_files.get(file2.name)
        is_new = file1 is None
        if file1 is None:
            file1 = FileCoverage(name=file2.name)

        changed = diff_file(file1, file2)
        if changed is not None:
            changed.is_new = is_new
            result.files.append(changed)

    logger.debug(
        "Diff: total %.1f%% -> %.1f%%, %d changed file(s)",
        result.baseline,
        result.current,
        len(result.files),
    )
    return result


def diff_file(baseline: FileCoverage, current: FileCoverage) -> DiffFile | None:
    """Return the changed functions of one file, or None if none changed."""
    baseline_funcs = {fn.name: fn for fn in baseline.functions}
    changed: DiffFile | None = None

    for fn2 in current.functions:
        fn1 = baseline_funcs.get(fn2.name) or FunctionCoverage(name=fn2.name)
        if fn1.percentage == fn2.percentage:
            continue
        if changed is None:
            changed = DiffFile(
                name=current.name,
                baseline=baseline.percentage,
                current=current.percentage,
            )
        changed.entries.append(
            DiffEntry(name=fn2.name, baseline=fn1.percentage, current=fn2.percentage)
        )
    return changed
