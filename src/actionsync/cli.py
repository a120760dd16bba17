"""actionsync CLI - sync changed task folders to remote custom tasks."""

import json
import os
from pathlib import Path

import typer

from actionsync import __version__
from actionsync.api.client import sanitize_token
from actionsync.folders import files_changed_in
from actionsync.settings import SyncSettings
from actionsync.sync import SyncStatus, detect_changes, run_sync
from actionsync.task_config import ConfigValidationError
from actionsync.ui import Reporter

cli = typer.Typer(
    name="actionsync",
    help="Sync changed actions/ task folders to remote custom tasks.",
    no_args_is_help=True,
)


def _version_option_callback(value: bool) -> None:
    """Handle eager --version option."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@cli.callback()
def _cli_callback(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show actionsync version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
) -> None:
    """Sync changed actions/ task folders to remote custom tasks."""
    _ = version


def _load_settings(**overrides: object) -> SyncSettings:
    return SyncSettings.from_env(os.environ, **overrides)


@cli.command()
def sync(
    repo: Path | None = typer.Option(
        None,
        "--repo",
        help="Repository path (defaults to current working directory).",
    ),
    actions_root: str | None = typer.Option(
        None,
        "--actions-root",
        help="Top-level directory holding task folders (default: actions).",
    ),
    api_url: str | None = typer.Option(
        None,
        "--api-url",
        help="API base URL (overrides SA_URL).",
    ),
    report: Path | None = typer.Option(
        None,
        "--report",
        help="Write a JSON run report to this path.",
    ),
    mark_safe_directory: bool = typer.Option(
        True,
        "--mark-safe-directory/--no-mark-safe-directory",
        help="Register the repository as a git safe.directory before diffing.",
    ),
) -> None:
    """Create or update a custom task for every changed task folder."""
    settings = _load_settings(
        repo_root=repo,
        actions_root=actions_root,
        api_url=api_url,
        mark_safe_directory=mark_safe_directory,
    )
    reporter = Reporter(emoji=settings.emoji)

    token = sanitize_token(settings.token)
    if not token:
        reporter.error("Please check environment variables.")
        reporter.error("Ensure SA_TOKEN is defined.")
        raise typer.Exit(1)

    try:
        result = run_sync(settings, token, reporter)
    except ConfigValidationError as exc:
        raise typer.Exit(1) from exc

    if report is not None:
        written = result.write(report)
        reporter.info(f"Report written to {written}")

    summary = ", ".join(f"{status.value}={result.count(status)}" for status in SyncStatus)
    reporter.info(f"Processed {len(result.folders)} folder(s): {summary}")


@cli.command()
def changes(
    repo: Path | None = typer.Option(
        None,
        "--repo",
        help="Repository path (defaults to current working directory).",
    ),
    actions_root: str | None = typer.Option(
        None,
        "--actions-root",
        help="Top-level directory holding task folders (default: actions).",
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit machine-readable JSON."),
    mark_safe_directory: bool = typer.Option(
        True,
        "--mark-safe-directory/--no-mark-safe-directory",
        help="Register the repository as a git safe.directory before diffing.",
    ),
) -> None:
    """Show the resolved commit range and the changed task folders."""
    settings = _load_settings(
        repo_root=repo,
        actions_root=actions_root,
        mark_safe_directory=mark_safe_directory,
    )
    reporter = Reporter(emoji=settings.emoji)
    result = detect_changes(settings, reporter)
    per_folder = {folder: files_changed_in(folder, result.changed_files) for folder in result.folders}

    if as_json:
        payload = {
            "before": result.commit_range.before,
            "after": result.commit_range.after,
            "folders": per_folder,
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    typer.echo(f"before={result.commit_range.before or '(none)'}")
    typer.echo(f"after={result.commit_range.after}")
    if not per_folder:
        typer.echo("No changed task folders.")
        return
    for folder, files in per_folder.items():
        typer.echo(f"{folder}: {', '.join(files)}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
