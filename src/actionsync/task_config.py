"""Per-folder task configuration: discovery, loading and validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

CONFIG_FILENAMES = ("config.yaml", "config.yml")
SCRIPT_FILENAME = "main.py"

REQUIRED_KEYS = (
    "description",
    "memory",
    "interpreter",
    "time_limit",
    "concurrency",
)


class TaskConfigError(RuntimeError):
    """Raised when a task config cannot be read; the folder is skipped."""


class ConfigValidationError(RuntimeError):
    """Raised when a task config lacks required keys; the run is aborted."""

    def __init__(self, config_name: str, folder: str, missing_keys: list[str]):
        details = "\n  - ".join(f"'{key}' is required" for key in missing_keys)
        super().__init__(f"Invalid {config_name} in {folder}:\n  - {details}")
        self.config_name = config_name
        self.folder = folder
        self.missing_keys = missing_keys


def find_config_file(folder: Path) -> Path | None:
    """Return ``config.yaml``, else ``config.yml``, else None."""
    for name in CONFIG_FILENAMES:
        candidate = folder / name
        if candidate.is_file():
            return candidate
    return None


def config_file_label(folder: Path) -> str:
    """Config filename used in diagnostics."""
    found = find_config_file(folder)
    return found.name if found else " or ".join(CONFIG_FILENAMES)


def script_path(folder: Path) -> Path:
    return folder / SCRIPT_FILENAME


def load_task_config(path: Path) -> dict[str, Any]:
    """Parse a task config file into a mapping.

    Raises:
        TaskConfigError: If the file is unreadable, is not valid YAML, or does
            not hold a mapping at top level
    """
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise TaskConfigError(f"Invalid YAML: {exc}") from exc
    if not isinstance(raw, dict):
        raise TaskConfigError("Invalid YAML: expected mapping at top level")
    return raw


def validate_config(
    config: dict[str, Any],
    folder: Path | str,
    *,
    label: str | None = None,
) -> ConfigValidationError | None:
    """Check that every required key is present.

    Values are not type-checked. All missing keys are reported together, in
    :data:`REQUIRED_KEYS` order.

    Args:
        config: Loaded task config mapping
        folder: Task folder holding the config file
        label: Folder name used in the message (defaults to ``folder``)
    """
    missing = [key for key in REQUIRED_KEYS if key not in config]
    if not missing:
        return None
    folder_path = Path(folder)
    return ConfigValidationError(config_file_label(folder_path), label or str(folder), missing)
