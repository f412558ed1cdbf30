# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Status lines and section rules printed to the terminal through rich."""

from __future__ import annotations

import sys
from functools import lru_cache
from typing import Final, Literal

from rich.console import Console
from rich.rule import Rule
from rich.text import Text

StatusKind = Literal["info", "ok", "warn", "fail"]

# glyph shown with emoji enabled, rich style shown with colour enabled
_STATUS_MARKS: Final[dict[StatusKind, tuple[str, str]]] = {
    "info": ("ℹ️ ", "cyan"),
    "ok": ("✅ ", "green"),
    "warn": ("⚠️ ", "yellow"),
    "fail": ("❌ ", "red"),
}


def stdout_is_terminal() -> bool:
    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@lru_cache(maxsize=None)
def _build_console(colored: bool, emoji: bool, terminal: bool) -> Console:
    return Console(
        color_system="auto" if colored else None,
        force_terminal=terminal,
        no_color=not colored,
        emoji=emoji,
        soft_wrap=True,
    )


def console_for(*, use_emoji: bool, use_color: bool | None = None) -> Console:
    """Return the shared console for the requested presentation.

    Colour is only ever enabled on a terminal; ``use_color=None`` means
    "colour whenever stdout is a terminal".
    """

    terminal = stdout_is_terminal()
    colored = terminal if use_color is None else use_color and terminal
    return _build_console(colored, use_emoji, terminal)


def status(kind: StatusKind, msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print ``msg`` prefixed and styled for ``kind``."""

    glyph, style = _STATUS_MARKS[kind]
    console = console_for(use_emoji=use_emoji, use_color=use_color)
    line = Text(f"{glyph}{msg}" if use_emoji else msg)
    if not console.no_color:
        line.stylize(style)
    console.print(line)


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    status("info", msg, use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    status("ok", msg, use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    status("warn", msg, use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    status("fail", msg, use_emoji=use_emoji, use_color=use_color)


def section(title: str, *, use_color: bool | None = None) -> None:
    """Print a rule headed by ``title``, or a plain dashed heading without colour."""

    console = console_for(use_emoji=False, use_color=use_color)
    console.print()
    if console.no_color:
        console.print(f"--- {title} ---")
    else:
        console.print(Rule(title))


__all__ = ["console_for", "fail", "info", "ok", "section", "status", "stdout_is_terminal", "warn"]
