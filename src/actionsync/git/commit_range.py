"""Commit range resolution from CI variables and event payloads."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from actionsync.settings import SyncSettings

NULL_COMMIT = "0" * 40
CURRENT_CHECKOUT = "HEAD"


def is_null_commit(sha: str | None) -> bool:
    """Return True for an absent commit or the all-zero sentinel."""
    return not sha or sha == NULL_COMMIT


@dataclass(frozen=True)
class CommitRange:
    """Pair of commits bounding the change set of a run."""

    before: str | None
    after: str

    @property
    def has_base(self) -> bool:
        """Whether ``before`` can be used as a diff base."""
        return not is_null_commit(self.before)


def load_event_range(event_path: Path | None) -> CommitRange | None:
    """Derive a commit range from a GitHub event payload file.

    Push events carry top-level ``before``/``after``; pull request events
    carry ``pull_request.base.sha`` and ``pull_request.head.sha``.

    Args:
        event_path: Path to the event JSON (``GITHUB_EVENT_PATH``)

    Returns:
        CommitRange, or None when the file is missing, unreadable, malformed
        or of an unrecognised shape
    """
    if event_path is None or not event_path.is_file():
        return None

    try:
        event = json.loads(event_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return None
    if not isinstance(event, dict):
        return None

    if event.get("before") and event.get("after"):
        return CommitRange(before=str(event["before"]), after=str(event["after"]))

    pull_request = event.get("pull_request")
    if isinstance(pull_request, dict):
        base = pull_request.get("base")
        head = pull_request.get("head")
        base_sha = base.get("sha") if isinstance(base, dict) else None
        head_sha = head.get("sha") if isinstance(head, dict) else None
        if base_sha and head_sha:
            return CommitRange(before=str(base_sha), after=str(head_sha))

    return None


def resolve_commit_range(settings: SyncSettings) -> CommitRange:
    """Resolve the run's commit range; the first non-empty source wins.

    before: GIT_BEFORE, CI_COMMIT_BEFORE_SHA, event before, None.
    after: GIT_AFTER, CI_COMMIT_SHA, event after, GITHUB_SHA, HEAD.
    """
    event_range = load_event_range(settings.github_event_path)

    before = (
        settings.git_before
        or settings.ci_commit_before_sha
        or (event_range.before if event_range else None)
        or None
    )
    after = (
        settings.git_after
        or settings.ci_commit_sha
        or (event_range.after if event_range else None)
        or settings.github_sha
        or CURRENT_CHECKOUT
    )
    return CommitRange(before=before, after=after)
