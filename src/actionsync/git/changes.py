"""Changed-file detection for a commit range.

CI checkouts are often shallow, so a commit from the range may be missing
from the local object store. Missing commits are recovered by walking
:data:`HISTORY_STRATEGIES` in order; when that still fails the resolver falls
back to the files touched by the ``after`` commit alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from actionsync.git.commit_range import CommitRange, is_null_commit
from actionsync.git.exec import ExecError, GitRunner, run_git
from actionsync.settings import SyncSettings
from actionsync.ui import Reporter

SHALLOW_FETCH_DEPTH = 200

# Added, copied, modified, renamed, type-changed. Deletions are never synced.
DIFF_FILTER = "ACMRT"


@dataclass(frozen=True)
class HistoryFetch:
    """One history retrieval attempt used to recover a missing commit."""

    name: str
    args: tuple[str, ...]

    def apply(self, runner: GitRunner, repo_root: Path) -> bool:
        """Run the fetch; return True when git reports success."""
        try:
            result = runner(list(self.args), repo_root=repo_root, check=False)
        except OSError:
            return False
        return result.ok


HISTORY_STRATEGIES: tuple[HistoryFetch, ...] = (
    HistoryFetch("shallow", ("fetch", "--no-tags", "--prune", f"--depth={SHALLOW_FETCH_DEPTH}", "origin")),
    HistoryFetch("unshallow", ("fetch", "--no-tags", "--prune", "--unshallow", "origin")),
)


class ChangeSetResolver:
    """Produce the list of changed repository paths for a commit range."""

    def __init__(
        self,
        settings: SyncSettings,
        reporter: Reporter | None = None,
        *,
        runner: GitRunner | None = None,
        strategies: tuple[HistoryFetch, ...] = HISTORY_STRATEGIES,
    ) -> None:
        self.settings = settings
        self.repo_root = settings.repo_root
        self.reporter = reporter or Reporter(emoji=settings.emoji)
        self.runner = runner or run_git
        self.strategies = strategies

    def _git(self, args: list[str]) -> list[str]:
        return self.runner(args, repo_root=self.repo_root).lines()

    def mark_safe_directory(self) -> None:
        """Register the checkout as a git safe.directory; failures are ignored."""
        try:
            self.runner(
                ["config", "--global", "--add", "safe.directory", str(self.repo_root.resolve())],
                repo_root=self.repo_root,
                check=False,
            )
        except OSError:
            pass

    def commit_present(self, sha: str) -> bool:
        """Check whether ``sha`` resolves to a commit in the local object store."""
        try:
            result = self.runner(["cat-file", "-e", f"{sha}^{{commit}}"], repo_root=self.repo_root, check=False)
        except OSError:
            return False
        return result.ok

    def ensure_commit_exists(self, sha: str | None) -> bool:
        """Make ``sha`` available locally, fetching more history when needed.

        Returns:
            True if the commit is present after zero or more fetch strategies,
            False for the null-commit sentinel or when every strategy failed
        """
        if sha is None or is_null_commit(sha):
            return False
        if self.commit_present(sha):
            return True
        for strategy in self.strategies:
            if strategy.apply(self.runner, self.repo_root) and self.commit_present(sha):
                return True
        return False

    def last_commit_files(self, sha: str) -> list[str]:
        """List every file touched by the single commit ``sha``."""
        return self._git(["show", "--name-only", "--pretty=format:", sha])

    def diff_files(self, before: str, after: str) -> list[str]:
        """List files added or modified between two commits."""
        return self._git(["diff", "--name-only", f"--diff-filter={DIFF_FILTER}", f"{before}..{after}"])

    def resolve(self, commit_range: CommitRange) -> list[str]:
        """Return changed paths for ``commit_range`` in diff output order.

        Git failures are reported and produce an empty list so a broken
        change scan never aborts the run.
        """
        try:
            if self.settings.mark_safe_directory:
                self.mark_safe_directory()

            before = commit_range.before
            if before is None or not commit_range.has_base:
                return self.last_commit_files(commit_range.after)

            before_ok = self.ensure_commit_exists(before)
            after_ok = self.ensure_commit_exists(commit_range.after)
            if not (before_ok and after_ok):
                self.reporter.warn(
                    f"Cannot find commit(s) locally. before_ok={before_ok} after_ok={after_ok}. "
                    "Falling back to last commit."
                )
                return self.last_commit_files(commit_range.after)

            return self.diff_files(before, commit_range.after)
        except (ExecError, OSError) as exc:
            self.reporter.error(f"Error getting changed files: {exc}")
            return []
