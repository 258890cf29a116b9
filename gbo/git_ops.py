"""Git subprocess operations."""

import logging
import subprocess
from pathlib import Path
from typing import Sequence

from gbo.models import AheadBehind, BranchRef

log = logging.getLogger(__name__)

_BRANCH_FORMAT = "%(refname)%09%(symref)%09%(upstream)%09%(authordate:unix)"


class GitError(Exception):
    """Git command failed."""

    def __init__(self, cmd: Sequence[str], stderr: str) -> None:
        self.cmd = cmd
        self.stderr = stderr
        super().__init__(f"git {' '.join(cmd)}: {stderr}")


class RepositoryError(GitError):
    """The path is not a usable git repository."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(["rev-parse", "--git-dir"], reason)

    def __str__(self) -> str:
        return f"{self.path}: {self.stderr}"


class RevisionError(GitError):
    """A revision does not resolve to a commit."""

    def __init__(self, revision: str, stderr: str) -> None:
        self.revision = revision
        super().__init__(["rev-parse", "--verify", revision], stderr)

    def __str__(self) -> str:
        return f"revision '{self.revision}' not found"


def run(args: Sequence[str], cwd: Path | None = None) -> str:
    """Run a git command and return stdout."""
    log.debug("git %s", " ".join(args))
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            check=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
    except subprocess.CalledProcessError as exc:
        raise GitError(args, (exc.stderr or "").strip()) from exc
    except FileNotFoundError as exc:
        raise GitError(args, "git executable not found") from exc
    return result.stdout.strip()


def try_run(args: Sequence[str], cwd: Path | None = None) -> str | None:
    """Run a git command, returning None on failure."""
    try:
        return run(args, cwd=cwd)
    except GitError:
        return None


def open_repository(path: Path) -> Path:
    """Check that path is inside a git repository and return its root.

    The root is the top of the working tree, or the given directory itself
    for bare repositories.
    """
    repo = path.expanduser().resolve()
    if not repo.exists():
        raise RepositoryError(path, "no such directory")
    if not repo.is_dir():
        raise RepositoryError(path, "not a directory")
    try:
        run(["rev-parse", "--git-dir"], cwd=repo)
    except GitError as exc:
        raise RepositoryError(path, exc.stderr) from exc
    toplevel = try_run(["rev-parse", "--show-toplevel"], cwd=repo)
    return Path(toplevel).resolve() if toplevel else repo


def resolve_revision(repo: Path, revision: str) -> str:
    """Resolve a revision to a commit id."""
    if not revision or revision.startswith("-"):
        raise RevisionError(revision, "invalid revision")
    try:
        return run(["rev-parse", "--verify", "--quiet", f"{revision}^{{commit}}"], cwd=repo)
    except GitError as exc:
        raise RevisionError(revision, exc.stderr) from exc


def ref_exists(repo: Path, ref: str) -> bool:
    """Check if a ref exists."""
    return try_run(["rev-parse", "--verify", "--quiet", ref], cwd=repo) is not None


def _parse_refname(refname: str) -> tuple[str, str | None] | None:
    if refname.startswith("refs/heads/"):
        return refname.removeprefix("refs/heads/"), None
    if refname.startswith("refs/remotes/"):
        remote, _, name = refname.removeprefix("refs/remotes/").partition("/")
        if not remote or not name:
            return None
        return name, remote
    return None


def list_branches(repo: Path, patterns: Sequence[str]) -> list[BranchRef]:
    """List branches under the given ref prefixes, in git's enumeration order."""
    if not patterns:
        return []
    output = run(["for-each-ref", f"--format={_BRANCH_FORMAT}", *patterns], cwd=repo)
    branches: list[BranchRef] = []
    seen: set[str] = set()

    for line in output.splitlines():
        parts = line.split("\t")
        if len(parts) != 4:
            continue
        refname, symref, upstream, authordate = parts
        if symref or refname in seen:
            continue
        parsed = _parse_refname(refname)
        if parsed is None:
            continue
        seen.add(refname)
        name, remote = parsed
        branches.append(
            BranchRef(
                refname=refname,
                name=name,
                remote=remote,
                upstream=upstream or None,
                last_commit_ts=int(authordate) if authordate.isdigit() else 0,
            )
        )

    return branches


def count_ahead_behind(repo: Path, left: str, right: str) -> AheadBehind:
    """Count commits ahead and behind between two refs."""
    args = ["rev-list", "--left-right", "--count", f"{left}...{right}", "--"]
    out = run(args, cwd=repo)
    parts = out.split()
    if len(parts) != 2:
        raise GitError(args, f"unexpected output: {out!r}")
    return AheadBehind(ahead=int(parts[0]), behind=int(parts[1]))
