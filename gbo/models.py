"""Data models for git-branches-overview."""

from dataclasses import dataclass


@dataclass(frozen=True)
class BranchRef:
    """A local or remote-tracking branch as enumerated by git."""

    refname: str
    name: str
    remote: str | None
    upstream: str | None
    last_commit_ts: int

    @property
    def is_remote(self) -> bool:
        """Check if this is a remote-tracking branch."""
        return self.remote is not None


@dataclass(frozen=True)
class AheadBehind:
    """Commit counts ahead/behind a reference."""

    ahead: int
    behind: int


@dataclass(frozen=True)
class BranchReport:
    """A branch together with its counts; counts is None when there is no upstream."""

    branch: BranchRef
    counts: AheadBehind | None

    @property
    def ahead(self) -> int | None:
        return self.counts.ahead if self.counts else None

    @property
    def behind(self) -> int | None:
        return self.counts.behind if self.counts else None


@dataclass(frozen=True)
class BranchSelection:
    """Which branches to list."""

    local: bool = True
    remote: bool = False
    remotes: tuple[str, ...] = ()

    @classmethod
    def from_flags(
        cls,
        local: bool = False,
        remote: bool = False,
        all_branches: bool = False,
        remotes: tuple[str, ...] = (),
    ) -> "BranchSelection":
        """Build a selection from the -l/-r/-a/--remote command line flags."""
        if remotes:
            remote = True
        if all_branches or (local and remote):
            return cls(local=True, remote=True, remotes=remotes)
        if remote:
            return cls(local=False, remote=True, remotes=remotes)
        return cls(local=True, remote=False, remotes=())

    def ref_patterns(self) -> list[str]:
        """Ref prefixes to hand to git for-each-ref."""
        patterns: list[str] = []
        if self.local:
            patterns.append("refs/heads")
        if self.remote:
            if self.remotes:
                patterns.extend(f"refs/remotes/{name}" for name in dict.fromkeys(self.remotes))
            else:
                patterns.append("refs/remotes")
        return patterns

    def includes(self, branch: BranchRef) -> bool:
        """Check if a branch matches this selection."""
        if branch.remote is None:
            return self.local
        if not self.remote:
            return False
        return not self.remotes or branch.remote in self.remotes
