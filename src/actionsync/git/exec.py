"""Git command runner for change detection."""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ExecResult:
    """Result envelope for one git invocation."""

    argv: tuple[str, ...]
    cwd: Path
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def lines(self) -> list[str]:
        """Return non-empty stdout lines, otherwise unchanged."""
        return [line for line in self.stdout.splitlines() if line]


class ExecError(RuntimeError):
    """Raised when git returns non-zero in check mode."""

    def __init__(self, result: ExecResult):
        rendered = " ".join(result.argv)
        detail = (result.stderr or result.stdout).strip()
        super().__init__(f"command failed ({result.returncode}): {rendered}\n{detail}")
        self.result = result


GitRunner = Callable[..., ExecResult]


def run_git(
    args: list[str],
    *,
    repo_root: Path,
    check: bool = True,
) -> ExecResult:
    """Run git rooted at ``repo_root`` and return a structured result."""
    argv = ["git", *args]
    completed = subprocess.run(argv, cwd=repo_root, capture_output=True, text=True, check=False)
    result = ExecResult(
        argv=tuple(argv),
        cwd=repo_root.resolve(),
        returncode=completed.returncode,
        stdout=completed.stdout,
        stderr=completed.stderr,
    )
    if check and not result.ok:
        raise ExecError(result)
    return result
