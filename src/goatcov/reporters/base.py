"""Interface shared by the report renderers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from goatcov.models.coverage import Overview
    from goatcov.models.diff import Diff


class Reporter(Protocol):
    """Renders an overview or a diff as one output document."""

    def render_overview(self, overview: Overview) -> str: ...

    def render_diff(self, diff: Diff) -> str: ...
