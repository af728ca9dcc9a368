# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Privilege detection and elevated re-execution of host commands.

Elevation is fire-and-forget: when the current process is not elevated,
:meth:`PrivilegeChecker.run_elevated` starts a new elevated process and returns
:attr:`ElevationOutcome.REQUESTED_ELEVATION` straight away. The caller never
learns whether the elevated command succeeded.
"""

from __future__ import annotations

import ctypes
import os
import subprocess  # nosec B404
import sys
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from .link_command import WINDOWS_PLATFORM
from .logging import warn
from .process_utils import HostCommand, run_command, spawn_detached

# ShellExecuteW return values at or below this threshold are error codes.
SHELL_EXECUTE_ERROR_THRESHOLD: Final[int] = 32
SW_HIDE: Final[int] = 0
SUDO_PREFIX: Final[tuple[str, ...]] = ("sudo", "--")


class ElevationError(RuntimeError):
    """Raised when an elevated process cannot be launched."""


class ElevationOutcome(StrEnum):
    """Enumerate how :meth:`PrivilegeChecker.run_elevated` handled a command."""

    RAN_DIRECTLY = "ran-directly"
    REQUESTED_ELEVATION = "requested-elevation"
    REQUEST_FAILED = "request-failed"


@dataclass(frozen=True, slots=True)
class ElevationResult:
    """Result of running or dispatching a command.

    Attributes:
        outcome: How the command was handled.
        succeeded: Command status for :attr:`ElevationOutcome.RAN_DIRECTLY`,
            ``False`` for a failed request and ``None`` when elevation was
            requested and the result is unknowable.
        message: Error text reported by the command or the launcher.
    """

    outcome: ElevationOutcome
    succeeded: bool | None = None
    message: str | None = None

    @property
    def verified(self) -> bool:
        """Return ``True`` when this process observed the command's result."""

        return self.outcome is ElevationOutcome.RAN_DIRECTLY


ElevationProbe = Callable[[], bool]
ElevationLauncher = Callable[[HostCommand], object]
CommandRunner = Callable[[HostCommand], ElevationResult]


def probe_elevation(platform_name: str | None = None) -> bool:
    """Return ``True`` when the process runs with administrative rights.

    Windows asks ``shell32.IsUserAnAdmin``; POSIX compares the effective user
    id against root. Platforms offering neither report ``False``.
    """

    target = platform_name or sys.platform
    if target == WINDOWS_PLATFORM:
        windll = getattr(ctypes, "windll", None)
        if windll is None:
            return False
        try:
            return bool(windll.shell32.IsUserAnAdmin())
        except (AttributeError, OSError):
            return False
    geteuid = getattr(os, "geteuid", None)
    if geteuid is None:
        return False
    return geteuid() == 0


def launch_with_runas(command: HostCommand) -> None:
    """Start ``command`` through the Windows ``runas`` verb without waiting.

    Raises:
        ElevationError: If ``ShellExecuteW`` is unavailable or refuses the
            request, for example when the UAC prompt is declined.
    """

    windll = getattr(ctypes, "windll", None)
    if windll is None:
        raise ElevationError("ShellExecuteW is not available on this platform")
    parameters = subprocess.list2cmdline(command.arguments)
    code = windll.shell32.ShellExecuteW(None, "runas", command.executable, parameters, None, SW_HIDE)
    if int(code) <= SHELL_EXECUTE_ERROR_THRESHOLD:
        raise ElevationError(f"ShellExecuteW refused the elevation request (code {int(code)})")


def launch_with_sudo(command: HostCommand) -> None:
    """Start ``command`` under ``sudo`` in a detached child process.

    The child's handle is dropped on purpose: the request is fire-and-forget
    and its result is never observed. Running in its own session, ``sudo``
    cannot prompt on the caller's terminal and relies on cached credentials
    or a ``SUDO_ASKPASS`` helper.

    Raises:
        FileNotFoundError: If ``sudo`` is not installed.
        OSError: If the child process cannot be started.
    """

    spawn_detached((*SUDO_PREFIX, *command.argv))


def default_launcher(platform_name: str | None = None) -> ElevationLauncher:
    """Return the elevation launcher used on ``platform_name``."""

    target = platform_name or sys.platform
    if target == WINDOWS_PLATFORM:
        return launch_with_runas
    return launch_with_sudo


def run_direct(command: HostCommand) -> ElevationResult:
    """Run ``command`` synchronously in the current security context."""

    try:
        completed = run_command(command.argv, capture_output=True)
    except OSError as exc:
        return ElevationResult(ElevationOutcome.RAN_DIRECTLY, succeeded=False, message=str(exc))
    if completed.returncode == 0:
        return ElevationResult(ElevationOutcome.RAN_DIRECTLY, succeeded=True)
    detail = (completed.stderr or "").strip() or (completed.stdout or "").strip()
    message = detail or f"{command.executable} exited with status {completed.returncode}"
    return ElevationResult(ElevationOutcome.RAN_DIRECTLY, succeeded=False, message=message)


class PrivilegeChecker:
    """Answer elevation queries and re-run commands with elevated rights.

    Args:
        platform_name: ``sys.platform`` style identifier; defaults to the
            running interpreter's platform.
        probe: Callable reporting whether the process is elevated. Evaluated on
            every query and never cached.
        launcher: Callable starting an elevated process for a command without
            waiting for it.
        runner: Callable executing a command synchronously in-process.
        use_emoji: Whether warnings may include emoji glyphs.
    """

    def __init__(
        self,
        *,
        platform_name: str | None = None,
        probe: ElevationProbe | None = None,
        launcher: ElevationLauncher | None = None,
        runner: CommandRunner | None = None,
        use_emoji: bool = True,
    ) -> None:
        self._platform = platform_name or sys.platform
        self._probe = probe or (lambda: probe_elevation(self._platform))
        self._launcher = launcher or default_launcher(self._platform)
        self._runner = runner or run_direct
        self._use_emoji = use_emoji

    @property
    def platform_name(self) -> str:
        """Return the platform identifier the checker was configured for."""

        return self._platform

    @property
    def link_requires_elevation(self) -> bool:
        """Return ``True`` when creating symbolic links needs administrative rights.

        Windows restricts symbolic link creation to administrators; POSIX hosts
        let any user create links, so the process always counts as sufficiently
        elevated there.
        """

        return self._platform == WINDOWS_PLATFORM

    def is_elevated(self) -> bool:
        """Return whether the current process holds administrative rights."""

        return self._probe()

    def can_create_links(self) -> bool:
        """Return ``True`` when link creation may run in-process."""

        return not self.link_requires_elevation or self.is_elevated()

    def run_direct(self, command: HostCommand) -> ElevationResult:
        """Run ``command`` synchronously without requesting elevation."""

        return self._runner(command)

    def run_elevated(self, command: HostCommand) -> ElevationResult:
        """Run ``command`` with elevated rights.

        Args:
            command: Host command to execute.

        Returns:
            ElevationResult: ``RAN_DIRECTLY`` with the command status when the
            process is already elevated, ``REQUESTED_ELEVATION`` once an
            elevated process has been started, or ``REQUEST_FAILED`` when it
            could not be started. This method never waits for the elevated
            process.
        """

        if self.is_elevated():
            return self.run_direct(command)
        try:
            self._launcher(command)
        except (OSError, ElevationError) as exc:
            warn(f"Failed to request elevation: {exc}", use_emoji=self._use_emoji)
            return ElevationResult(ElevationOutcome.REQUEST_FAILED, succeeded=False, message=str(exc))
        return ElevationResult(ElevationOutcome.REQUESTED_ELEVATION)


__all__ = [
    "CommandRunner",
    "ElevationError",
    "ElevationLauncher",
    "ElevationOutcome",
    "ElevationProbe",
    "ElevationResult",
    "PrivilegeChecker",
    "default_launcher",
    "launch_with_runas",
    "launch_with_sudo",
    "probe_elevation",
    "run_direct",
]
