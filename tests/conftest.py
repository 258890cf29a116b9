from __future__ import annotations

import os
import subprocess
from pathlib import Path

import pytest

GIT_AVAILABLE = subprocess.run(["git", "--version"], capture_output=True).returncode == 0

requires_git = pytest.mark.skipif(not GIT_AVAILABLE, reason="git missing")


def git(repo: Path, *args: str, date: str | None = None) -> str:
    env = None
    if date:
        env = {**os.environ, "GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date}
    result = subprocess.run(
        ["git", *args],
        cwd=str(repo),
        check=True,
        capture_output=True,
        text=True,
        env=env,
    )
    return result.stdout.strip()


def commit(repo: Path, message: str, date: str | None = None) -> None:
    git(repo, "commit", "-q", "--allow-empty", "-m", message, date=date)


def init_repo(root: Path) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    git(root, "init", "-q")
    git(root, "symbolic-ref", "HEAD", "refs/heads/main")
    git(root, "config", "user.email", "test@example.com")
    git(root, "config", "user.name", "Test")
    git(root, "config", "commit.gpgsign", "false")
    commit(root, "init")
    return root


def add_remote(repo: Path, name: str) -> None:
    git(repo, "remote", "add", name, f"https://example.invalid/{name}.git")


def set_remote_branch(repo: Path, remote: str, branch: str, rev: str = "HEAD") -> None:
    git(repo, "update-ref", f"refs/remotes/{remote}/{branch}", rev)


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    if not GIT_AVAILABLE:
        pytest.skip("git missing")
    return init_repo(tmp_path / "repo")
