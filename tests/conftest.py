"""Pytest configuration and fixtures for actionsync tests."""
import io
from pathlib import Path

import pytest
from rich.console import Console

from actionsync.settings import SyncSettings
from actionsync.ui import Reporter
from tests.repo_utils import init_repo


def pytest_sessionfinish(session, exitstatus):
    """Check that coverage data was collected if --cov was requested.

    This prevents silent "no data collected" scenarios that produce 0% coverage
    without failing the test run.
    """
    cov_enabled = any("--cov" in str(arg) for arg in session.config.args)
    if not cov_enabled:
        return

    coverage_files = list(Path.cwd().glob(".coverage*"))
    if not coverage_files:
        pytest.exit(
            "Coverage was enabled but no data was collected. "
            "Check that tests import from 'actionsync' (the package) not 'src/actionsync' (filesystem path).",
            returncode=1
        )


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository with one initial commit."""
    return init_repo(tmp_path / "repo")


@pytest.fixture
def console_buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def reporter(console_buffer: io.StringIO) -> Reporter:
    """Reporter writing both streams into one in-memory buffer."""
    console = Console(file=console_buffer, width=200, color_system=None)
    return Reporter(console, console, emoji=False)


@pytest.fixture
def make_settings(git_repo: Path):
    """Factory for settings rooted at the temporary repository."""

    def _make(**overrides) -> SyncSettings:
        values = {"repo_root": git_repo, "mark_safe_directory": False, "emoji": False}
        values.update(overrides)
        return SyncSettings(**values)

    return _make
