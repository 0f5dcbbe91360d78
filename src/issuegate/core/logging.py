# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing status lines rendered through Rich.

Library code logs degradations through :mod:`logging`; these helpers are
reserved for workflows a user invokes explicitly, such as baseline
generation.
"""

from __future__ import annotations

from typing import Final

from rich.rule import Rule
from rich.text import Text

from ..runtime.console import detect_tty, get_console_manager

_PREFIXES: Final[dict[str, str]] = {
    "info": "ℹ️ ",
    "ok": "✅ ",
    "warn": "⚠️ ",
    "fail": "❌ ",
}
_STYLES: Final[dict[str, str]] = {
    "info": "cyan",
    "ok": "green",
    "warn": "yellow",
    "fail": "red",
}


def _print_line(kind: str, msg: str, *, use_emoji: bool, use_color: bool | None) -> None:
    """Render ``msg`` with the prefix and style registered for ``kind``.

    Args:
        kind: Key into the prefix and style tables.
        msg: Message text to print.
        use_emoji: Whether the emoji prefix should be included.
        use_color: Explicit colour flag; ``None`` defers to TTY detection.
    """

    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console_manager().get(color=color_enabled, emoji=use_emoji)
    prefix = _PREFIXES[kind] if use_emoji else ""
    text = Text(f"{prefix}{msg}")
    if color_enabled:
        text.stylize(_STYLES[kind])
    console.print(text)


def section(title: str, *, use_color: bool) -> None:
    """Render a section header.

    Args:
        title: Section title displayed to the user.
        use_color: Whether a Rich rule should be drawn instead of a plain banner.
    """

    console = get_console_manager().get(color=use_color, emoji=True)
    if use_color:
        console.print()
        console.print(Rule(title))
    else:
        console.print(f"\n--- {title} ---")


def info(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Emit an informational message."""

    _print_line("info", msg, use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Emit a success message."""

    _print_line("ok", msg, use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Emit a warning message."""

    _print_line("warn", msg, use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Emit an error message."""

    _print_line("fail", msg, use_emoji=use_emoji, use_color=use_color)


__all__ = ["fail", "info", "ok", "section", "warn"]
