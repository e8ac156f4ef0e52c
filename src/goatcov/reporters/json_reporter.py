"""JSON reporter — machine-readable coverage reports for downstream tooling."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from goatcov.models.coverage import Overview
    from goatcov.models.diff import Diff


class JSONReporter:
    """Serialize Overview and Diff models to JSON."""

    def render_overview(self, overview: Overview) -> str:
        report = _build_report(overview=_serialize_overview(overview))
        return json.dumps(report, indent=2, ensure_ascii=False)

    def render_diff(self, diff: Diff) -> str:
        report = _build_report(diff=_serialize_diff(diff))
        return json.dumps(report, indent=2, ensure_ascii=False)


def _build_report(**sections: dict[str, Any]) -> dict[str, Any]:
    report: dict[str, Any] = {
        "tool": "goatcov",
        "timestamp": datetime.now(tz=UTC).isoformat(),
    }
    report.update(sections)
    return report


def _serialize_overview(overview: Overview) -> dict[str, Any]:
    return {
        "coverage": overview.percentage,
        "covered": overview.covered,
        "total": overview.total,
        "files": [
            {
                "name": f.name,
                "path": f.path,
                "coverage": f.percentage,
                "covered": f.covered,
                "total": f.total,
                "functions": [
                    {
                        "name": fn.name,
                        "coverage": fn.percentage,
                        "covered": fn.covered,
                        "total": fn.total,
                    }
                    for fn in f.functions
                ],
            }
            for f in overview.files
        ],
    }


def _serialize_diff(diff: Diff) -> dict[str, Any]:
    return {
        "baseline": diff.baseline,
        "current": diff.current,
        "delta": diff.delta,
        "total_changed": diff.total_changed,
        "files": [
            {
                "name": f.name,
                "baseline": f.baseline,
                "current": f.current,
                "delta": f.delta,
                "is_new": f.is_new,
                "functions": [
                    {
                        "name": e.name,
                        "baseline": e.baseline,
                        "current": e.current,
                        "delta": e.delta,
                    }
                    for e in f.entries
                ],
            }
            for f in diff.files
        ],
    }
