"""Git change detection for actionsync runs."""

from actionsync.git.changes import HISTORY_STRATEGIES, ChangeSetResolver, HistoryFetch
from actionsync.git.commit_range import NULL_COMMIT, CommitRange, load_event_range, resolve_commit_range

__all__ = [
    "HISTORY_STRATEGIES",
    "NULL_COMMIT",
    "ChangeSetResolver",
    "CommitRange",
    "HistoryFetch",
    "load_event_range",
    "resolve_commit_range",
]
