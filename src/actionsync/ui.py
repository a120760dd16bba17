"""Console reporting for sync runs."""

from __future__ import annotations

from rich.console import Console

console = Console()
err_console = Console(stderr=True)

ICONS: dict[str, str] = {
    "warn": "⚠️ ",
    "error": "❌",
    "success": "✔",
    "folder": "🔧",
    "file": " 📄",
    "search": "🔍",
    "create": "🆕",
    "update": "♻",
}

DIVIDER = "----------------------------------"


class Reporter:
    """Thin wrapper over rich consoles used by every sync component.

    Progress goes to stdout; warnings and errors go to stderr. Messages are
    printed verbatim: markup, highlighting and wrapping are disabled so API
    response bodies and YAML errors reach CI logs unchanged.
    """

    def __init__(
        self,
        out: Console | None = None,
        err: Console | None = None,
        *,
        emoji: bool = True,
    ) -> None:
        self.out = out or console
        self.err = err or err_console
        self.emoji = emoji

    def _emit(self, target: Console, icon: str | None, message: str, style: str | None = None) -> None:
        if icon and self.emoji:
            message = f"{ICONS[icon]} {message}"
        target.print(message, style=style, markup=False, highlight=False, soft_wrap=True)

    def info(self, message: str, icon: str | None = None) -> None:
        self._emit(self.out, icon, message)

    def success(self, message: str) -> None:
        self._emit(self.out, "success", message, "green")

    def warn(self, message: str) -> None:
        self._emit(self.err, "warn", message, "yellow")

    def error(self, message: str) -> None:
        self._emit(self.err, "error", message, "red")

    def divider(self) -> None:
        self._emit(self.out, None, DIVIDER)
