import logging
from dataclasses import replace
from pathlib import Path

import click
from rich.console import Console

from gbo import git_ops
from gbo.models import BranchSelection
from gbo.reporter import SORT_KEYS, build_reports, sort_reports
from gbo.settings import SettingsError, load_settings
from gbo.ui import format_porcelain_line, print_table

log = logging.getLogger(__name__)

EXAMPLES = """\b
Examples:

\b
    # Compare all branches with development
    git-branches-overview -a development

\b
    # Compare local branches with their upstreams
    git-branches-overview -u
"""


def _configure_logging(debug: bool, quiet: bool) -> None:
    if debug and quiet:
        raise click.UsageError("-d/--debug and -q/--quiet are mutually exclusive")
    if debug:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(levelname)s - %(message)s")


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=EXAMPLES,
)
@click.argument("base_revision", required=False)
@click.option("-l", "local_branches", is_flag=True, help="Show local branches (default).")
@click.option("-r", "remote_branches", is_flag=True, help="Show remote branches.")
@click.option("-a", "all_branches", is_flag=True, help="Show all branches.")
@click.option(
    "-u",
    "--upstreams",
    "compare_with_upstreams",
    is_flag=True,
    help="Compare branches with their respective upstream instead of the base revision.",
)
@click.option(
    "--remote",
    "remotes",
    metavar="REMOTE_NAME",
    multiple=True,
    help="Only list branches from this remote; can be given multiple times; implies -r.",
)
@click.option(
    "--repo-dir",
    type=click.Path(path_type=Path),
    default=Path("."),
    show_default=True,
    help="Repository path.",
)
@click.option(
    "--sort",
    type=click.Choice(SORT_KEYS),
    default=None,
    help="Order within local branches and each remote (default: date).",
)
@click.option(
    "--chart-width", type=click.IntRange(min=1), default=None, help="Width of each half of the chart."
)
@click.option("--porcelain", is_flag=True, help="Print tab-separated lines for scripts.")
@click.option("--color/--no-color", default=None, help="Force or disable colors (default: auto).")
@click.option("-d", "--debug", is_flag=True, help="Activate DEBUG output.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress INFO output.")
def main(
    base_revision: str | None,
    local_branches: bool,
    remote_branches: bool,
    all_branches: bool,
    compare_with_upstreams: bool,
    remotes: tuple[str, ...],
    repo_dir: Path,
    sort: str | None,
    chart_width: int | None,
    porcelain: bool,
    color: bool | None,
    debug: bool,
    quiet: bool,
) -> None:
    """Visualize branches 'ahead' and 'behind' commits compared to a base revision or their upstream.

    BASE_REVISION defaults to HEAD and is ignored with --upstreams.
    """
    _configure_logging(debug, quiet)

    selection = BranchSelection.from_flags(local_branches, remote_branches, all_branches, remotes)
    try:
        repo = git_ops.open_repository(repo_dir)
        settings = load_settings(repo)
        if selection.remote and not selection.remotes and settings.remotes:
            selection = replace(selection, remotes=settings.remotes)
        if compare_with_upstreams and base_revision:
            log.debug("ignoring base revision %s, comparing with upstreams", base_revision)
        reports = build_reports(
            repo,
            selection,
            base_revision or settings.base_revision,
            compare_with_upstreams,
        )
    except (git_ops.GitError, SettingsError) as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)

    reports = sort_reports(reports, sort or settings.sort)

    if porcelain:
        for report in reports:
            click.echo(format_porcelain_line(report))
        return

    console = Console(
        force_terminal=True if color else None,
        color_system=None if color is False else "auto",
        highlight=False,
    )
    print_table(
        console,
        reports,
        show_remote=selection.remote,
        chart_width=chart_width or settings.chart_width,
    )


if __name__ == "__main__":
    main()
