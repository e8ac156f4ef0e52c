"""HTML reporter — renders coverage reports as a static page."""

from __future__ import annotations

import html
from typing import TYPE_CHECKING

from goatcov.reporters.terminal import format_change, format_percentage

if TYPE_CHECKING:
    from goatcov.models.coverage import FileCoverage, Overview
    from goatcov.models.diff import Diff

_GITHUB_PREFIX = "github:"
_GITHUB_TEMPLATE = "https://github.com/{repo}/blob/master/{{path}}"

_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
	<meta http-equiv="Content-Type" content="text/html; charset=utf-8">
	<meta name="viewport" content="width=device-width, initial-scale=1">
	<title>{title}</title>
	<style>
		table   {{ border-collapse: collapse; margin-bottom: 1em; }}
		caption {{ white-space: nowrap; font-weight: bold; }}
		td      {{ padding: .2em; border: 1px solid #666; }}
	</style>
</head>

<body>
{body}
</body>
</html>
"""


def expand_link_template(template: str) -> str:
    """Expand ``github:owner/repo`` shorthand into a URL template with ``{path}``."""
    if template.startswith(_GITHUB_PREFIX):
        repo = template[len(_GITHUB_PREFIX) :].strip("/")
        return _GITHUB_TEMPLATE.format(repo=repo)
    return template


def link_for(template: str, path: str) -> str:
    """Return the URL for *path*, or an empty string without a template."""
    if not template or not path:
        return ""
    return expand_link_template(template).replace("{path}", path)


class HTMLReporter:
    """Render Overview and Diff models as HTML pages."""

    def __init__(self, *, link_template: str = "") -> None:
        self._link_template = link_template

    def render_overview(self, overview: Overview) -> str:
        body = [f"\t<p>Total: {format_percentage(overview.percentage)}</p>"]
        for file_cov in overview.files:
            rows = [
                _row(fn.name, format_percentage(fn.percentage)) for fn in file_cov.functions
            ]
            percentage = format_percentage(file_cov.percentage)
            caption = f"{self._file_name(file_cov)} <span>{percentage}</span>"
            body.append(_table(caption, rows))
        return _PAGE.format(title="Coverage", body="\n".join(body))

    def render_diff(self, diff: Diff) -> str:
        if diff.is_empty:
            return _PAGE.format(title="Coverage diff", body="\t<p>No coverage changes.</p>")
        body = []
        if diff.total_changed:
            body.append(
                f"\t<p>Total: {html.escape(format_change(diff.baseline, diff.current))}</p>"
            )
        for diff_file in diff.files:
            rows = [
                _row(entry.name, format_change(entry.baseline, entry.current))
                for entry in diff_file.entries
            ]
            change = format_change(diff_file.baseline, diff_file.current)
            caption = f"{html.escape(diff_file.name)} <span>{html.escape(change)}</span>"
            body.append(_table(caption, rows))
        return _PAGE.format(title="Coverage diff", body="\n".join(body))

    def _file_name(self, file_cov: FileCoverage) -> str:
        name = html.escape(file_cov.name)
        url = link_for(self._link_template, file_cov.path)
        if not url:
            return name
        return f'<a href="{html.escape(url, quote=True)}">{name}</a>'


def _row(name: str, value: str) -> str:
    return (
        "\t\t<tr>\n"
        f"\t\t\t<td>{html.escape(name)}</td>\n"
        f"\t\t\t<td>{html.escape(value)}</td>\n"
        "\t\t</tr>"
    )


def _table(caption: str, rows: list[str]) -> str:
    return "\n".join(["\t<table>", f"\t\t<caption>{caption}</caption>", *rows, "\t</table>"])
