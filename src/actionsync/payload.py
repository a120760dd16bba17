"""Request payloads for the custom task API.

A payload is either a :class:`FullPayload` (complete task definition) or a
:class:`FileOnlyPayload` (just the encoded script, used for updates that
only touch ``main.py``).
"""

from __future__ import annotations

import base64
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar, Literal

from actionsync.task_config import (
    SCRIPT_FILENAME,
    TaskConfigError,
    find_config_file,
    load_task_config,
    script_path,
    validate_config,
)

PayloadKind = Literal["full", "file"]


class PayloadError(RuntimeError):
    """Raised when a payload cannot be built; the folder is skipped."""


@dataclass(frozen=True)
class FullPayload:
    """Complete task definition sent on create and on config updates."""

    kind: ClassVar[PayloadKind] = "full"

    name: str
    description: Any
    memory: Any
    time_limit: Any
    concurrency: Any
    file: str
    config: dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "memory": self.memory,
            "time_limit": self.time_limit,
            "concurrency": self.concurrency,
            "config": dict(self.config),
            "file": self.file,
        }


@dataclass(frozen=True)
class FileOnlyPayload:
    """Script-only update payload."""

    kind: ClassVar[PayloadKind] = "file"

    file: str

    def to_json(self) -> dict[str, Any]:
        return {"file": self.file}


TaskPayload = FullPayload | FileOnlyPayload


def encode_script(path: Path) -> str:
    """Return the raw bytes of ``path`` as base64 text."""
    return base64.b64encode(path.read_bytes()).decode("ascii")


def _parse_number(text: str) -> int | float | None:
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return None


def minutes_to_seconds(value: Any) -> Any:
    """Convert a ``time_limit`` in minutes to seconds.

    Falsy values (absent, ``0``, ``None``) are returned unchanged. Numbers and
    numeric strings are multiplied by 60. Anything else, including NaN and
    infinities, becomes ``None`` (sent as JSON ``null``).
    """
    if not value:
        return value
    if isinstance(value, str):
        value = _parse_number(value)
    if not isinstance(value, (int, float)):
        return None
    seconds = value * 60
    if isinstance(seconds, float) and not math.isfinite(seconds):
        return None
    return seconds


def _read_script(folder: Path) -> str:
    path = script_path(folder)
    if not path.is_file():
        raise PayloadError(f"No {SCRIPT_FILENAME} file found")
    try:
        return encode_script(path)
    except OSError as exc:
        raise PayloadError(f"Failed to read {path}: {exc}") from exc


def build_full_payload(folder: Path, *, label: str | None = None) -> FullPayload:
    """Assemble the full task definition for a task folder.

    Args:
        folder: Task folder on disk
        label: Folder name used in diagnostics (defaults to ``folder``)

    Returns:
        FullPayload named after the folder

    Raises:
        PayloadError: Missing config or script, or unparsable YAML
        ConfigValidationError: Required config keys are missing
    """
    config_path = find_config_file(folder)
    if config_path is None:
        raise PayloadError("No config.yaml or config.yml found")

    try:
        config = load_task_config(config_path)
    except TaskConfigError as exc:
        raise PayloadError(str(exc)) from exc

    validation_error = validate_config(config, folder, label=label)
    if validation_error is not None:
        raise validation_error

    encoded = _read_script(folder)
    time_limit = minutes_to_seconds(config.get("time_limit"))

    return FullPayload(
        name=folder.name,
        description=config.get("description"),
        memory=config.get("memory"),
        time_limit=time_limit,
        concurrency=config.get("concurrency"),
        config={**config, "time_limit": time_limit},
        file=encoded,
    )


def build_file_only_payload(folder: Path) -> FileOnlyPayload:
    """Build a script-only payload for ``folder``.

    Raises:
        PayloadError: If ``main.py`` is missing or unreadable
    """
    return FileOnlyPayload(file=_read_script(folder))
