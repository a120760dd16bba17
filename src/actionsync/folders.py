"""Group changed paths into task folders under the watched root."""

from __future__ import annotations

from collections.abc import Iterable

from actionsync.settings import DEFAULT_ACTIONS_ROOT


def classify_folders(changed: Iterable[str], root: str = DEFAULT_ACTIONS_ROOT) -> list[str]:
    """Return distinct ``<root>/<name>`` task folders touched by ``changed``.

    ``root`` may span several segments (``ci/actions``). Folders keep
    first-seen order. Paths sitting directly under ``root`` (e.g.
    ``actions/README.md``) do not name a task folder and are ignored.
    """
    root = root.strip("/")
    root_parts = root.split("/")
    depth = len(root_parts)
    folders: dict[str, None] = {}
    for path in changed:
        parts = path.split("/")
        if len(parts) < depth + 2 or parts[:depth] != root_parts or not parts[depth]:
            continue
        folders.setdefault(f"{root}/{parts[depth]}", None)
    return list(folders)


def files_changed_in(folder: str, changed: Iterable[str]) -> list[str]:
    """Return the changed paths inside ``folder``, relative to it."""
    prefix = folder.rstrip("/") + "/"
    return [path[len(prefix):] for path in changed if path.startswith(prefix)]
