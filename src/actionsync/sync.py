"""Per-folder create/update orchestration against the custom task API.

Each changed task folder goes through config and script checks, payload
building, a lookup by task name and then either a create or an update.
Folders are processed sequentially. Only a config missing required keys
aborts the run (:class:`ConfigValidationError` propagates); every other
problem is reported and the next folder is processed.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import httpx

from actionsync.api.client import CustomTaskClient
from actionsync.folders import classify_folders, files_changed_in
from actionsync.git.changes import ChangeSetResolver
from actionsync.git.commit_range import CommitRange, resolve_commit_range
from actionsync.git.exec import GitRunner
from actionsync.payload import (
    FullPayload,
    PayloadError,
    TaskPayload,
    build_file_only_payload,
    build_full_payload,
)
from actionsync.settings import SyncSettings
from actionsync.task_config import (
    CONFIG_FILENAMES,
    SCRIPT_FILENAME,
    ConfigValidationError,
    find_config_file,
    script_path,
)
from actionsync.ui import Reporter

REPORT_SCHEMA_VERSION = "1.0"


class SyncStatus(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class FolderResult:
    """Outcome of syncing one task folder."""

    folder: str
    status: SyncStatus
    task_name: str | None = None
    task_id: str | None = None
    payload_kind: str | None = None
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "folder": self.folder,
            "status": self.status.value,
            "task_name": self.task_name,
            "task_id": self.task_id,
            "payload_kind": self.payload_kind,
            "message": self.message,
        }


@dataclass
class SyncReport:
    """Summary of a full sync run."""

    commit_range: CommitRange
    changed_files: list[str] = field(default_factory=list)
    folders: list[str] = field(default_factory=list)
    results: list[FolderResult] = field(default_factory=list)

    def count(self, status: SyncStatus) -> int:
        return sum(1 for result in self.results if result.status is status)

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": REPORT_SCHEMA_VERSION,
            "range": {"before": self.commit_range.before, "after": self.commit_range.after},
            "changed_files": list(self.changed_files),
            "folders": list(self.folders),
            "summary": {status.value: self.count(status) for status in SyncStatus},
            "results": [result.to_dict() for result in self.results],
        }

    def write(self, path: Path) -> Path:
        """Write the report as JSON and return its path."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"{json.dumps(self.to_dict(), indent=2, sort_keys=True)}\n", encoding="utf-8")
        return path


def only_script_changed(changed_files: list[str]) -> bool:
    """True when the folder change set is non-empty and touches only the script."""
    if not changed_files:
        return False
    if any(name in CONFIG_FILENAMES for name in changed_files):
        return False
    return all(name == SCRIPT_FILENAME for name in changed_files)


class TaskSyncer:
    """Create or update the remote task for each changed folder."""

    def __init__(
        self,
        client: CustomTaskClient,
        changed_paths: list[str],
        *,
        repo_root: Path = Path("."),
        reporter: Reporter | None = None,
    ) -> None:
        self.client = client
        self.changed_paths = list(changed_paths)
        self.repo_root = repo_root
        self.reporter = reporter or Reporter()

    def sync_all(self, folders: list[str]) -> list[FolderResult]:
        """Sync folders one after another, in the given order."""
        return [self.sync_folder(folder) for folder in folders]

    def sync_folder(self, folder: str) -> FolderResult:
        """Sync one task folder.

        Raises:
            ConfigValidationError: If the folder's config misses required keys
        """
        folder = folder.rstrip("/")
        folder_path = self.repo_root / folder

        config_path = find_config_file(folder_path)
        if config_path is None:
            message = "No config.yaml or config.yml found."
            self.reporter.warn(f"Skipping {folder}: {message}")
            return FolderResult(folder, SyncStatus.SKIPPED, message=message)

        if not script_path(folder_path).is_file():
            message = f"No {SCRIPT_FILENAME} found."
            self.reporter.warn(f"Skipping {folder}: {message}")
            return FolderResult(folder, SyncStatus.SKIPPED, message=message)

        self.reporter.info(f"Processing folder: {folder}", icon="folder")
        self.reporter.info(f"Found {config_path.name}", icon="file")
        self.reporter.info(f"Found {SCRIPT_FILENAME}", icon="file")

        try:
            full_payload = build_full_payload(folder_path, label=folder)
        except ConfigValidationError as exc:
            self.reporter.error(f"Error processing {folder}: {exc}")
            raise
        except PayloadError as exc:
            self.reporter.error(f"Error processing {folder}: {exc}")
            return FolderResult(folder, SyncStatus.SKIPPED, message=str(exc))

        task_name = full_payload.name
        try:
            self.reporter.info("Checking existence", icon="search")
            task_id = self.client.find_task_id(task_name)
            if task_id is None:
                return self._create(folder, full_payload)
            return self._update(folder, folder_path, task_id, full_payload)
        except Exception as exc:
            self.reporter.error(f"Error syncing task {task_name}: {exc}")
            return FolderResult(folder, SyncStatus.FAILED, task_name=task_name, message=str(exc))
        finally:
            self.reporter.divider()

    def _create(self, folder: str, payload: FullPayload) -> FolderResult:
        self.reporter.info(f"Creating new action: {payload.name}", icon="create")
        response = self.client.create_task(payload)
        if not response.ok:
            self.reporter.error(f"Failed to create task: {response.describe()}")
            return FolderResult(
                folder,
                SyncStatus.FAILED,
                task_name=payload.name,
                payload_kind=payload.kind,
                message=response.describe(),
            )

        created_id = response.data.get("id") if isinstance(response.data, dict) else None
        self.reporter.success(f"Created successfully ({created_id})")
        return FolderResult(
            folder,
            SyncStatus.CREATED,
            task_name=payload.name,
            task_id=str(created_id) if created_id is not None else None,
            payload_kind=payload.kind,
        )

    def choose_update_payload(self, folder: str, folder_path: Path, full_payload: FullPayload) -> TaskPayload:
        """Pick the file-only payload when only the script changed, else the full one."""
        changed_files = files_changed_in(folder, self.changed_paths)
        if not only_script_changed(changed_files):
            return full_payload
        try:
            return build_file_only_payload(folder_path)
        except PayloadError as exc:
            self.reporter.warn(f"Error generating file-only payload, using full payload: {exc}")
            return full_payload

    def _update(self, folder: str, folder_path: Path, task_id: str, full_payload: FullPayload) -> FolderResult:
        self.reporter.success(f"Existing task found (id={task_id})")
        payload = self.choose_update_payload(folder, folder_path, full_payload)

        self.reporter.info(f"Updating action: {full_payload.name}", icon="update")
        response = self.client.update_task(task_id, payload)
        if not response.ok:
            self.reporter.error(f"Failed to update task: {response.describe()}")
            return FolderResult(
                folder,
                SyncStatus.FAILED,
                task_name=full_payload.name,
                task_id=task_id,
                payload_kind=payload.kind,
                message=response.describe(),
            )

        self.reporter.success("Update successful")
        return FolderResult(
            folder,
            SyncStatus.UPDATED,
            task_name=full_payload.name,
            task_id=task_id,
            payload_kind=payload.kind,
        )


def detect_changes(
    settings: SyncSettings,
    reporter: Reporter,
    *,
    runner: GitRunner | None = None,
) -> SyncReport:
    """Resolve the commit range, changed files and changed task folders."""
    commit_range = resolve_commit_range(settings)
    changed_files = ChangeSetResolver(settings, reporter, runner=runner).resolve(commit_range)
    return SyncReport(
        commit_range=commit_range,
        changed_files=changed_files,
        folders=classify_folders(changed_files, settings.actions_root),
    )


def run_sync(
    settings: SyncSettings,
    token: str,
    reporter: Reporter,
    *,
    runner: GitRunner | None = None,
    transport: httpx.BaseTransport | None = None,
) -> SyncReport:
    """Run change detection and sync every changed task folder.

    Raises:
        ConfigValidationError: If any processed folder misses required keys
    """
    report = detect_changes(settings, reporter, runner=runner)
    with CustomTaskClient(settings, token, reporter=reporter, transport=transport) as client:
        syncer = TaskSyncer(
            client,
            report.changed_files,
            repo_root=settings.repo_root,
            reporter=reporter,
        )
        report.results.extend(syncer.sync_all(report.folders))
    return report
