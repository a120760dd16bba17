"""Run settings resolved once from the process environment.

Every component receives a :class:`SyncSettings` instance instead of reading
``os.environ`` on its own.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

DEFAULT_API_URL = "https://zimmer.superannotate.com"
TASK_ENDPOINT = "/api/v1.1/custom_task"
DEFAULT_ACTIONS_ROOT = "actions"


def _env(environ: Mapping[str, str], name: str) -> str | None:
    """Return an environment value, treating empty strings as unset."""
    value = environ.get(name)
    if value is None or value == "":
        return None
    return value


@dataclass(frozen=True)
class SyncSettings:
    """Immutable configuration for one sync run."""

    token: str | None = None
    api_url: str = DEFAULT_API_URL
    repo_root: Path = Path(".")
    actions_root: str = DEFAULT_ACTIONS_ROOT

    # Commit range sources, highest precedence first
    git_before: str | None = None
    git_after: str | None = None
    ci_commit_before_sha: str | None = None
    ci_commit_sha: str | None = None
    github_sha: str | None = None
    github_event_path: Path | None = None

    mark_safe_directory: bool = True
    emoji: bool = True

    @property
    def task_endpoint(self) -> str:
        return f"{self.api_url.rstrip('/')}{TASK_ENDPOINT}"

    @classmethod
    def from_env(cls, environ: Mapping[str, str], **overrides: Any) -> "SyncSettings":
        """Build settings from an environment mapping.

        Args:
            environ: Environment mapping (usually ``os.environ``)
            **overrides: Field values taking precedence over the environment;
                ``None`` values are ignored

        Returns:
            Resolved settings
        """
        event_path = _env(environ, "GITHUB_EVENT_PATH")
        settings = cls(
            token=_env(environ, "SA_TOKEN"),
            api_url=_env(environ, "SA_URL") or DEFAULT_API_URL,
            actions_root=_env(environ, "ACTIONSYNC_ROOT") or DEFAULT_ACTIONS_ROOT,
            git_before=_env(environ, "GIT_BEFORE"),
            git_after=_env(environ, "GIT_AFTER"),
            ci_commit_before_sha=_env(environ, "CI_COMMIT_BEFORE_SHA"),
            ci_commit_sha=_env(environ, "CI_COMMIT_SHA"),
            github_sha=_env(environ, "GITHUB_SHA"),
            github_event_path=Path(event_path) if event_path else None,
            emoji=environ.get("ACTIONSYNC_EMOJI", "1") != "0",
        )
        explicit = {key: value for key, value in overrides.items() if value is not None}
        if explicit:
            settings = replace(settings, **explicit)
        return settings
