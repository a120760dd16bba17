"""Shared helpers for building task folders and git repositories in tests."""

from __future__ import annotations

import subprocess
from pathlib import Path

VALID_CONFIG = """\
description: Resize uploaded images
memory: 512
interpreter: python3.11
time_limit: 5
concurrency: 2
requirements:
  - pillow==10.4.0
"""

SCRIPT = "print('hello from the task')\n"


def git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


def init_repo(repo: Path) -> Path:
    """Initialise ``repo`` with a test identity and one initial commit."""
    repo.mkdir(parents=True, exist_ok=True)
    git(repo, "init")
    git(repo, "config", "user.email", "test@example.com")
    git(repo, "config", "user.name", "Test User")
    (repo / "README.md").write_text("# Test Repo\n", encoding="utf-8")
    commit_all(repo, "Initial commit")
    return repo


def commit_all(repo: Path, message: str) -> str:
    """Stage everything, commit, and return the new HEAD sha."""
    git(repo, "add", "-A")
    git(repo, "commit", "-m", message)
    return git(repo, "rev-parse", "HEAD")


def write_task_folder(
    root: Path,
    name: str,
    *,
    config: str | None = VALID_CONFIG,
    script: str | None = SCRIPT,
    config_name: str = "config.yaml",
) -> Path:
    """Create ``actions/<name>`` under ``root`` with optional config and script."""
    folder = root / "actions" / name
    folder.mkdir(parents=True, exist_ok=True)
    if config is not None:
        (folder / config_name).write_text(config, encoding="utf-8")
    if script is not None:
        (folder / "main.py").write_text(script, encoding="utf-8")
    return folder
