from __future__ import annotations

import math
from collections.abc import Iterable

from rich.cells import cell_len
from rich.console import Console
from rich.text import Text

from .models import BranchReport

DEFAULT_CHART_WIDTH = 16
BAR = "━"
BEHIND_HALF_BAR = "╺"
AHEAD_HALF_BAR = "╸"
COLUMN_SEPARATOR = " · "
NO_UPSTREAM = "no upstream"
LOCAL_LABEL = "local"
LOCAL_STYLE = "bold green"
REMOTE_STYLE = "bold red"
NO_UPSTREAM_STYLE = "dim"


def _number_width(n: int) -> int:
    return len(str(n))


def bar_size(count: int, max_count: int, width: int = DEFAULT_CHART_WIDTH) -> tuple[int, bool]:
    """Return the bar length for count and whether its outer cell is a half bar."""
    ratio = count / max_count
    floating_size = math.sqrt(math.sin(ratio * math.pi / 2)) * width
    floating_part = floating_size - math.floor(floating_size)
    return math.ceil(floating_size), 0 < floating_part <= 0.5


def _middle_glyph(ahead: int, behind: int) -> str:
    if ahead == 0 and behind == 0:
        return "│"
    if behind == 0:
        return "┝"
    if ahead == 0:
        return "┥"
    return "┿"


def format_chart_line(
    ahead: int, behind: int, max_count: int, width: int = DEFAULT_CHART_WIDTH
) -> str:
    """Draw behind growing left and ahead growing right of a middle glyph."""
    max_width = _number_width(max_count)

    behind_size, behind_half = bar_size(behind, max_count, width)
    left = " " * (width + max_width - _number_width(behind) - behind_size) + f"{behind} "
    if behind_half:
        left += BEHIND_HALF_BAR + BAR * (behind_size - 1)
    else:
        left += BAR * behind_size

    ahead_size, ahead_half = bar_size(ahead, max_count, width)
    if ahead_half:
        right = BAR * (ahead_size - 1) + AHEAD_HALF_BAR
    else:
        right = BAR * ahead_size
    right += f" {ahead}" + " " * (max_width - _number_width(ahead) + width - ahead_size)

    return left + _middle_glyph(ahead, behind) + right


def max_count(reports: Iterable[BranchReport]) -> int:
    """Largest ahead or behind count, at least 1."""
    counts = [max(r.counts.ahead, r.counts.behind) for r in reports if r.counts is not None]
    return max(counts, default=0) or 1


def _remote_label(report: BranchReport) -> str:
    return report.branch.remote or LOCAL_LABEL


def _pad(text: str, width: int) -> str:
    return text + " " * (width - cell_len(text))


def render_table_lines(
    reports: list[BranchReport],
    show_remote: bool = False,
    chart_width: int = DEFAULT_CHART_WIDTH,
) -> list[Text]:
    """Render one line per report: [remote ·] branch · chart."""
    if not reports:
        return []
    top = max_count(reports)
    remote_width = max(cell_len(_remote_label(r)) for r in reports)
    name_width = max(cell_len(r.branch.name) for r in reports)

    lines: list[Text] = []
    for report in reports:
        line = Text()
        if show_remote:
            style = REMOTE_STYLE if report.branch.is_remote else LOCAL_STYLE
            line.append(_pad(_remote_label(report), remote_width), style=style)
            line.append(COLUMN_SEPARATOR)
        line.append(_pad(report.branch.name, name_width))
        line.append(COLUMN_SEPARATOR)
        if report.counts is None:
            line.append(NO_UPSTREAM, style=NO_UPSTREAM_STYLE)
        else:
            line.append(
                format_chart_line(report.counts.ahead, report.counts.behind, top, chart_width)
            )
        line.rstrip()
        lines.append(line)
    return lines


def format_porcelain_line(report: BranchReport) -> str:
    ahead = str(report.ahead) if report.ahead is not None else "-"
    behind = str(report.behind) if report.behind is not None else "-"
    return "\t".join([_remote_label(report), report.branch.name, ahead, behind])


def print_table(
    console: Console,
    reports: list[BranchReport],
    show_remote: bool = False,
    chart_width: int = DEFAULT_CHART_WIDTH,
) -> None:
    for line in render_table_lines(reports, show_remote, chart_width):
        console.print(line, soft_wrap=True)
