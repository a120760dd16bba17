"""Tests for the structured git runner."""

from __future__ import annotations

from pathlib import Path

import pytest

from actionsync.git.exec import ExecError, ExecResult, run_git
from tests.repo_utils import commit_all


def test_lines_keep_path_whitespace() -> None:
    result = ExecResult(
        argv=("git", "diff"),
        cwd=Path("/repo"),
        returncode=0,
        stdout="actions/a/ lead.py\n\nactions/a/trail.py \r\nactions/b/main.py",
        stderr="",
    )

    assert result.lines() == ["actions/a/ lead.py", "actions/a/trail.py ", "actions/b/main.py"]


def test_run_git_lists_spaced_paths_verbatim(git_repo: Path) -> None:
    folder = git_repo / "actions" / "spaced"
    folder.mkdir(parents=True)
    (folder / " main.py").write_text("print()\n", encoding="utf-8")
    sha = commit_all(git_repo, "add spaced file")

    result = run_git(["show", "--name-only", "--pretty=format:", sha], repo_root=git_repo)

    assert result.ok
    assert result.lines() == ["actions/spaced/ main.py"]


def test_run_git_check_raises_exec_error(git_repo: Path) -> None:
    with pytest.raises(ExecError, match="command failed") as excinfo:
        run_git(["cat-file", "-e", "0" * 40], repo_root=git_repo)

    assert excinfo.value.result.returncode != 0
    assert run_git(["cat-file", "-e", "0" * 40], repo_root=git_repo, check=False).ok is False
