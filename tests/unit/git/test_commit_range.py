"""Tests for commit range resolution."""

from __future__ import annotations

import json
from pathlib import Path

from actionsync.git.commit_range import NULL_COMMIT, CommitRange, load_event_range, resolve_commit_range
from actionsync.settings import SyncSettings


def _event(tmp_path: Path, payload: object) -> Path:
    path = tmp_path / "event.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_push_event_range(tmp_path: Path) -> None:
    path = _event(tmp_path, {"before": "aaa", "after": "bbb", "ref": "refs/heads/main"})
    assert load_event_range(path) == CommitRange(before="aaa", after="bbb")


def test_pull_request_event_range(tmp_path: Path) -> None:
    path = _event(
        tmp_path,
        {"action": "synchronize", "pull_request": {"base": {"sha": "base1"}, "head": {"sha": "head1"}}},
    )
    assert load_event_range(path) == CommitRange(before="base1", after="head1")


def test_event_range_missing_or_malformed(tmp_path: Path) -> None:
    assert load_event_range(None) is None
    assert load_event_range(tmp_path / "missing.json") is None

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert load_event_range(broken) is None

    assert load_event_range(_event(tmp_path, {"before": "aaa"})) is None
    assert load_event_range(_event(tmp_path, ["before", "after"])) is None
    assert load_event_range(_event(tmp_path, {"pull_request": {"base": {"sha": "x"}}})) is None


def test_defaults_to_head_without_any_source() -> None:
    assert resolve_commit_range(SyncSettings()) == CommitRange(before=None, after="HEAD")


def test_explicit_overrides_win(tmp_path: Path) -> None:
    settings = SyncSettings(
        git_before="b0",
        git_after="a0",
        ci_commit_before_sha="b1",
        ci_commit_sha="a1",
        github_sha="a3",
        github_event_path=_event(tmp_path, {"before": "b2", "after": "a2"}),
    )
    assert resolve_commit_range(settings) == CommitRange(before="b0", after="a0")


def test_gitlab_variables_precede_event(tmp_path: Path) -> None:
    settings = SyncSettings(
        ci_commit_before_sha="b1",
        ci_commit_sha="a1",
        github_event_path=_event(tmp_path, {"before": "b2", "after": "a2"}),
    )
    assert resolve_commit_range(settings) == CommitRange(before="b1", after="a1")


def test_event_precedes_github_sha(tmp_path: Path) -> None:
    settings = SyncSettings(
        github_sha="a3",
        github_event_path=_event(tmp_path, {"before": "b2", "after": "a2"}),
    )
    assert resolve_commit_range(settings) == CommitRange(before="b2", after="a2")


def test_github_sha_used_when_event_unusable(tmp_path: Path) -> None:
    settings = SyncSettings(github_sha="a3", github_event_path=tmp_path / "missing.json")
    assert resolve_commit_range(settings) == CommitRange(before=None, after="a3")


def test_has_base_rejects_null_sentinel() -> None:
    assert not CommitRange(before=NULL_COMMIT, after="abc").has_base
    assert not CommitRange(before=None, after="abc").has_base
    assert CommitRange(before="def", after="abc").has_base


def test_settings_from_env_treats_empty_as_unset(tmp_path: Path) -> None:
    event = _event(tmp_path, {"before": "b2", "after": "a2"})
    settings = SyncSettings.from_env(
        {
            "SA_TOKEN": "tok",
            "SA_URL": "",
            "GIT_BEFORE": "",
            "CI_COMMIT_SHA": "a1",
            "GITHUB_EVENT_PATH": str(event),
        },
        repo_root=tmp_path,
        actions_root=None,
    )
    assert settings.token == "tok"
    assert settings.api_url == "https://zimmer.superannotate.com"
    assert settings.task_endpoint == "https://zimmer.superannotate.com/api/v1.1/custom_task"
    assert settings.git_before is None
    assert settings.actions_root == "actions"
    assert settings.repo_root == tmp_path
    assert resolve_commit_range(settings) == CommitRange(before="b2", after="a1")
