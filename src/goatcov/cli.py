"""goatcov CLI — create and compare per-function coverage reports for Go programs."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, TypedDict, Unpack

import click

from goatcov import __version__
from goatcov.analyzers.coverage import report
from goatcov.analyzers.diff import diff_overviews
from goatcov.config import DEFAULT_CONFIG_FILE, load_config
from goatcov.errors import GoatcovError
from goatcov.reporters import HTMLReporter, JSONReporter, TextReporter
from goatcov.reporters.terminal import print_error, print_usage

if TYPE_CHECKING:
    from goatcov.config import ReportConfig
    from goatcov.reporters import Reporter

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


class _CliKwargs(TypedDict):
    """Keyword arguments for the goatcov command."""

    profile: str | None
    diff: str | None
    src: str | None
    exclude: str | None
    html: bool
    as_json: bool
    link: str | None
    config_path: str
    verbose: bool


class _Command(click.Command):
    """Command that exits with status 1 on bad arguments, like every other failure."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = 1
            raise


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=_LOG_FORMAT,
        stream=sys.stderr,
    )


def _get_reporter(config: ReportConfig) -> Reporter:
    if config.output_format == "html":
        return HTMLReporter(link_template=config.link_template)
    if config.output_format == "json":
        return JSONReporter()
    return TextReporter()


def run(config: ReportConfig) -> str:
    """Build the report (or diff) described by *config* and render it."""
    reporter = _get_reporter(config)
    if config.is_diff:
        logger.debug("Diffing %s against %s", config.profile_path, config.diff_path)
        baseline = report(config.diff_path, config.source_root, config.exclude_prefixes)
        current = report(config.profile_path, config.source_root, config.exclude_prefixes)
        return reporter.render_diff(diff_overviews(baseline, current))

    overview = report(config.profile_path, config.source_root, config.exclude_prefixes)
    return reporter.render_overview(overview)


@click.command(cls=_Command, context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "-profile",
    "--profile",
    "profile",
    default=None,
    help='Coverage profile, as created by "go test -coverprofile" (default: coverage).',
)
@click.option(
    "-diff",
    "--diff",
    "diff",
    default=None,
    help="Diff against a previously generated profile.",
)
@click.option(
    "-src",
    "--src",
    "src",
    default=None,
    help="Source directory (default: current directory).",
)
@click.option(
    "-exclude",
    "--exclude",
    "exclude",
    default=None,
    help="Comma-separated prefixes of package path + filename to exclude.",
)
@click.option("-html", "--html", "html", is_flag=True, help="Output as HTML.")
@click.option("-json", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option(
    "-link",
    "--link",
    "link",
    default=None,
    help="Link to files in HTML output, e.g. github:owner/repo.",
)
@click.option(
    "-config",
    "--config",
    "config_path",
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    help="YAML file with default option values.",
)
@click.option("-v", "--verbose", "verbose", is_flag=True, help="Log progress to stderr.")
@click.version_option(version=__version__, prog_name="goatcov")
@click.pass_context
def cli(ctx: click.Context, **kwargs: Unpack[_CliKwargs]) -> None:
    """goatcov creates and compares coverage reports for Go programs.

    Exclude prefixes are matched as plain string prefixes of the full
    package path with the filename.
    """
    _configure_logging(verbose=kwargs["verbose"])

    try:
        config = load_config(
            kwargs["config_path"],
            profile=kwargs["profile"],
            diff=kwargs["diff"],
            src=kwargs["src"],
            exclude=kwargs["exclude"],
            html=kwargs["html"],
            as_json=kwargs["as_json"],
            link=kwargs["link"],
        )
        output = run(config)
    except GoatcovError as e:
        print_error(str(e))
        print_usage(ctx.get_usage())
        raise SystemExit(1) from e

    click.echo(output, nl=not output.endswith("\n"))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
