# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Status messages printed while installing a profile."""

from __future__ import annotations

import sys
from enum import StrEnum
from functools import cache
from typing import Final

from rich.console import Console
from rich.text import Text


class Level(StrEnum):
    """Severity of a status message."""

    INFO = "info"
    OK = "ok"
    WARN = "warn"
    FAIL = "fail"


# glyph, style
_DECORATION: Final[dict[Level, tuple[str, str]]] = {
    Level.INFO: ("ℹ️ ", "cyan"),
    Level.OK: ("✅ ", "green"),
    Level.WARN: ("⚠️ ", "yellow"),
    Level.FAIL: ("❌ ", "red"),
}


def stdout_is_tty() -> bool:
    """Return ``True`` when stdout is attached to a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@cache
def _console(color: bool, emoji: bool, tty: bool) -> Console:
    # No ``file`` argument: Rich looks up ``sys.stdout`` on every print.
    return Console(
        color_system="auto" if color and tty else None,
        force_terminal=tty,
        no_color=not (color and tty),
        emoji=emoji,
        highlight=False,
        soft_wrap=True,
    )


def report(level: Level, msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print ``msg`` decorated for ``level``.

    Args:
        level: Severity selecting the glyph and colour.
        msg: Message text.
        use_emoji: Prefix the message with the level's glyph.
        use_color: Force colour on or off; ``None`` enables it on a terminal.
    """

    tty = stdout_is_tty()
    color = tty if use_color is None else use_color
    glyph, style = _DECORATION[level]
    text = Text(f"{glyph}{msg}" if use_emoji else msg)
    if color:
        text.stylize(style)
    _console(color, use_emoji, tty).print(text)


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    report(Level.INFO, msg, use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    report(Level.OK, msg, use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    report(Level.WARN, msg, use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    report(Level.FAIL, msg, use_emoji=use_emoji, use_color=use_color)


__all__ = ["Level", "fail", "info", "ok", "report", "stdout_is_tty", "warn"]
