from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from conftest import add_remote, commit, git, requires_git, set_remote_branch
from gbo.cli import main


def _invoke(*args: str):
    return CliRunner().invoke(main, list(args))


def _porcelain(repo: Path, *args: str) -> list[str]:
    result = _invoke("--repo-dir", str(repo), "--porcelain", *args)
    assert result.exit_code == 0, result.output
    return result.output.splitlines()


@requires_git
def test_not_a_repository(tmp_path: Path) -> None:
    result = _invoke("--repo-dir", str(tmp_path / "missing"))
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_unknown_base_revision(repo: Path) -> None:
    result = _invoke("--repo-dir", str(repo), "nope")
    assert result.exit_code == 1
    assert "Error: revision 'nope' not found" in result.output


def test_local_branches_by_default(repo: Path) -> None:
    git(repo, "checkout", "-q", "-b", "feature")
    commit(repo, "feature")
    git(repo, "checkout", "-q", "main")
    add_remote(repo, "origin")
    set_remote_branch(repo, "origin", "main")

    assert sorted(_porcelain(repo)) == ["local\tfeature\t1\t0", "local\tmain\t0\t0"]
    assert sorted(_porcelain(repo, "feature")) == ["local\tfeature\t0\t0", "local\tmain\t0\t1"]


def test_remote_option_implies_remote_branches(repo: Path) -> None:
    add_remote(repo, "origin")
    add_remote(repo, "origin2")
    set_remote_branch(repo, "origin", "main")
    set_remote_branch(repo, "origin2", "main")

    assert _porcelain(repo, "--remote", "origin") == ["origin\tmain\t0\t0"]
    assert sorted(_porcelain(repo, "-r")) == ["origin\tmain\t0\t0", "origin2\tmain\t0\t0"]
    assert _porcelain(repo, "-a") == [
        "local\tmain\t0\t0",
        "origin\tmain\t0\t0",
        "origin2\tmain\t0\t0",
    ]
    assert _porcelain(repo, "-l", "-r") == _porcelain(repo, "-a")


def test_upstreams_without_upstream(repo: Path) -> None:
    git(repo, "branch", "lonely")
    result = _invoke("--repo-dir", str(repo), "-u", "--no-color", "ignored-base")
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert len(lines) == 2
    assert all(line.endswith("· no upstream") for line in lines)


def test_table_output(repo: Path) -> None:
    git(repo, "branch", "old")
    commit(repo, "main 1")
    result = _invoke("--repo-dir", str(repo), "--sort", "name", "--chart-width", "4", "--no-color")
    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        "main ·     0 │ 0",
        "old  · 1 ━━━━┥ 0",
    ]


def test_settings_apply_defaults(repo: Path) -> None:
    git(repo, "branch", "old")
    commit(repo, "main 1")
    add_remote(repo, "origin")
    add_remote(repo, "upstream")
    set_remote_branch(repo, "origin", "main")
    set_remote_branch(repo, "upstream", "main")
    settings = repo / ".gbo" / "settings.json"
    settings.parent.mkdir()
    settings.write_text(json.dumps({"base_revision": "old", "remotes": ["upstream"]}))

    assert sorted(_porcelain(repo)) == ["local\tmain\t1\t0", "local\told\t0\t0"]
    assert _porcelain(repo, "-r") == ["upstream\tmain\t1\t0"]
    assert _porcelain(repo, "--remote", "origin", "HEAD") == ["origin\tmain\t0\t0"]


def test_invalid_settings_are_fatal(repo: Path) -> None:
    settings = repo / ".gbo" / "settings.json"
    settings.parent.mkdir()
    settings.write_text("{")
    result = _invoke("--repo-dir", str(repo))
    assert result.exit_code == 1
    assert "Invalid JSON" in result.output


def test_debug_and_quiet_conflict(repo: Path) -> None:
    result = _invoke("--repo-dir", str(repo), "-d", "-q")
    assert result.exit_code == 2


def test_undecodable_settings_are_fatal(repo: Path) -> None:
    settings = repo / ".gbo" / "settings.json"
    settings.parent.mkdir()
    settings.write_bytes(b'{"sort": "\xff"}')
    result = _invoke("--repo-dir", str(repo))
    assert result.exit_code == 1
    assert "Error: Invalid JSON in" in result.output
    assert not isinstance(result.exception, UnicodeDecodeError)
