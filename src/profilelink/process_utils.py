# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import shlex
import shutil

# Bandit: subprocess usage is intentional; commands are argument lists built by
# profilelink itself and never run with ``shell=True``.
import subprocess  # nosec B404
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    # Bandit: type-only import of subprocess metadata is part of the safe wrapper.
    from subprocess import CompletedProcess as _CompletedProcess  # nosec B404
    from subprocess import Popen as _Popen  # nosec B404


@dataclass(frozen=True, slots=True)
class HostCommand:
    """Describe a host command as an argument vector.

    Attributes:
        argv: Executable followed by its arguments.
    """

    argv: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.argv:
            raise ValueError("host command requires at least one argument")

    @property
    def executable(self) -> str:
        """Return the executable name or path."""

        return self.argv[0]

    @property
    def arguments(self) -> tuple[str, ...]:
        """Return the arguments following the executable."""

        return self.argv[1:]

    def display(self, *, platform_name: str | None = None) -> str:
        """Render the command as a single shell-quoted string.

        Args:
            platform_name: ``sys.platform`` style identifier selecting the
                quoting rules. Defaults to the running interpreter's platform.

        Returns:
            str: Command line suitable for logs or a shell invocation.
        """

        target = platform_name or sys.platform
        if target == "win32":
            return subprocess.list2cmdline(self.argv)
        return shlex.join(self.argv)


def _normalize_args(args: Sequence[str]) -> list[str]:
    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def run_command(args: Sequence[str], *, capture_output: bool = False) -> _CompletedProcess[str]:
    """Run *args* to completion and return its status without raising on failure.

    Args:
        args: Executable followed by its arguments.
        capture_output: Capture stdout and stderr as text instead of inheriting them.

    Returns:
        CompletedProcess[str]: Completed process metadata.

    Raises:
        FileNotFoundError: If the executable cannot be located on ``PATH``.
    """

    # Bandit: argument vector only; no shell expansion.
    return subprocess.run(  # nosec B603
        _normalize_args(args),
        check=False,
        capture_output=capture_output,
        text=True,
    )


def spawn_detached(args: Sequence[str]) -> _Popen[bytes]:
    """Start *args* in a new session and return without waiting for it.

    The child does not share the caller's session, so terminal interrupts sent
    to the caller never reach it. Callers may keep the returned handle or drop
    it; the child keeps running either way.

    Raises:
        FileNotFoundError: If the executable cannot be located on ``PATH``.
        OSError: If the operating system refuses to start the process.
    """

    normalized = _normalize_args(args)
    # Bandit: argument vector only; no shell expansion.
    return subprocess.Popen(  # nosec B603
        normalized,
        stdin=subprocess.DEVNULL,
        start_new_session=True,
    )


__all__ = ["HostCommand", "run_command", "spawn_detached"]
