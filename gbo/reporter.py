"""Ahead/behind reports for branches."""

import logging
from pathlib import Path

from gbo import git_ops
from gbo.models import BranchRef, BranchReport, BranchSelection

log = logging.getLogger(__name__)

SORT_KEYS = ("date", "name")


def _upstream_target(repo: Path, branch: BranchRef) -> str | None:
    if branch.upstream is None:
        return None
    if not git_ops.ref_exists(repo, branch.upstream):
        log.debug("upstream %s of %s is gone", branch.upstream, branch.refname)
        return None
    return branch.upstream


def build_reports(
    repo: Path,
    selection: BranchSelection,
    base_revision: str = "HEAD",
    compare_with_upstreams: bool = False,
) -> list[BranchReport]:
    """Compute ahead/behind counts for every selected branch."""
    base = None if compare_with_upstreams else git_ops.resolve_revision(repo, base_revision)
    branches = [
        branch
        for branch in git_ops.list_branches(repo, selection.ref_patterns())
        if selection.includes(branch)
    ]
    log.debug("%d branches selected", len(branches))

    reports: list[BranchReport] = []
    for branch in branches:
        target = base if base is not None else _upstream_target(repo, branch)
        if target is None:
            log.debug("%s has no upstream", branch.refname)
            reports.append(BranchReport(branch=branch, counts=None))
            continue

        counts = git_ops.count_ahead_behind(repo, branch.refname, target)
        log.debug("%s: +%d -%d", branch.refname, counts.ahead, counts.behind)
        reports.append(BranchReport(branch=branch, counts=counts))

    return reports


def _group_key(report: BranchReport) -> tuple[bool, str]:
    remote = report.branch.remote
    return remote is not None, remote or ""


def sort_reports(reports: list[BranchReport], key: str = "date") -> list[BranchReport]:
    """Sort reports, keeping local branches first and remote branches grouped by remote."""
    if key not in SORT_KEYS:
        raise ValueError(f"unknown sort key: {key}")
    if key == "name":
        return sorted(reports, key=lambda report: (_group_key(report), report.branch.name))
    return sorted(
        reports,
        key=lambda report: (
            _group_key(report),
            -report.branch.last_commit_ts,
            report.branch.name,
        ),
    )
