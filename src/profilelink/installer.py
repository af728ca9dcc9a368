# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Install a configuration file by linking it into the application's location.

The installation is a linear sequence: validate the source, inspect the
destination, move a conflicting destination into a single ``.bak`` slot and
create the link, either in-process or through a fire-and-forget elevation
request. Nothing is retried or rolled back; a backup moved aside stays moved
when link creation subsequently fails.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import StrEnum
from pathlib import Path

from .backup import BackupPlan, backup_path_for, plan_backup
from .filesystem import EntryKind, FileSystem, HostFileSystem
from .link_command import build_link_command
from .logging import info, warn
from .privileges import ElevationOutcome, ElevationResult, PrivilegeChecker
from .process_utils import HostCommand


class InstallError(RuntimeError):
    """Base class for fatal installation failures."""


class SourceNotFoundError(InstallError):
    """Raised when the configuration file to link does not exist."""

    def __init__(self, source: Path) -> None:
        super().__init__(f"Source file not found: {source}")
        self.source = source


class LinkCreationError(InstallError):
    """Raised when an in-process link creation command fails."""

    def __init__(self, destination: Path, source: Path, detail: str | None) -> None:
        message = f"Failed to link {destination} -> {source}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.destination = destination
        self.source = source
        self.detail = detail


class LinkOutcome(StrEnum):
    """Enumerate the results of an installation attempt.

    ``ELEVATION_REQUESTED`` means an elevated process was asked to create the
    link; whether it did is never observed by this process.
    """

    CREATED = "created"
    ALREADY_LINKED = "already-linked"
    ELEVATION_REQUESTED = "elevation-requested"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class LinkRequest:
    """Source configuration file and the location it should be linked to."""

    source_path: Path
    destination_path: Path

    @property
    def backup_path(self) -> Path:
        """Return the single backup slot for the destination."""

        return backup_path_for(self.destination_path)


@dataclass(frozen=True, slots=True)
class InstallReport:
    """Summarise one installation attempt.

    Attributes:
        request: The request that was installed.
        outcome: Terminal outcome of the attempt.
        plan: Backup plan derived from the destination state.
        command: Link command that was run, dispatched or planned.
        elevation: Result reported by the privilege checker, when consulted.
        warnings: Non-fatal failures reported while installing.
        dry_run: Whether filesystem changes were only planned.
    """

    request: LinkRequest
    outcome: LinkOutcome
    plan: BackupPlan
    command: HostCommand | None = None
    elevation: ElevationResult | None = None
    warnings: tuple[str, ...] = field(default_factory=tuple)
    dry_run: bool = False

    @property
    def backed_up(self) -> bool:
        """Return ``True`` when the destination was (or would be) moved aside."""

        return self.plan.move_destination

    @property
    def verified(self) -> bool:
        """Return ``True`` when this process observed the link in place."""

        return self.outcome in {LinkOutcome.CREATED, LinkOutcome.ALREADY_LINKED} and not self.dry_run


class SymlinkInstaller:
    """Install a :class:`LinkRequest` with backup-and-replace semantics.

    Args:
        filesystem: Filesystem used for inspection, backup and deletion.
        privileges: Privilege checker deciding how the link command runs.
        use_emoji: Whether progress messages may include emoji glyphs.
        dry_run: Report planned backup and link steps without performing them.
    """

    def __init__(
        self,
        filesystem: FileSystem | None = None,
        privileges: PrivilegeChecker | None = None,
        *,
        use_emoji: bool = True,
        dry_run: bool = False,
    ) -> None:
        self._filesystem = filesystem or HostFileSystem()
        self._privileges = privileges or PrivilegeChecker(use_emoji=use_emoji)
        self._use_emoji = use_emoji
        self._dry_run = dry_run

    def install(self, request: LinkRequest) -> InstallReport:
        """Install ``request`` and return the resulting report.

        Args:
            request: Source file and destination path to link.

        Returns:
            InstallReport: Outcome plus the backup plan and non-fatal warnings.

        Raises:
            SourceNotFoundError: If the source file does not exist, including a
                source that is a dangling link. The destination is not touched.
            LinkCreationError: If in-process link creation fails.
        """

        # Link targets are stored verbatim, so anchor the source to the working directory.
        request = replace(request, source_path=request.source_path.absolute())
        source_kind = self._filesystem.resolved_kind(request.source_path)
        if source_kind is EntryKind.MISSING:
            raise SourceNotFoundError(request.source_path)

        plan = plan_backup(
            self._filesystem.kind(request.destination_path),
            self._filesystem.kind(request.backup_path),
        )
        if plan.already_linked:
            # Known gap: the existing link's target is not compared with the
            # source, so a link pointing elsewhere is accepted as installed.
            return InstallReport(request, LinkOutcome.ALREADY_LINKED, plan, dry_run=self._dry_run)

        warnings: list[str] = []
        self._apply_backup(request, plan, warnings)

        command = build_link_command(
            request.destination_path,
            request.source_path,
            is_directory=source_kind is EntryKind.DIRECTORY,
            platform_name=self._privileges.platform_name,
        )
        if self._dry_run:
            return self._plan_link(request, plan, command)
        if self._privileges.can_create_links():
            result = self._privileges.run_direct(command)
        else:
            info("Requesting elevated rights to create the link", use_emoji=self._use_emoji)
            result = self._privileges.run_elevated(command)
        outcome = self._resolve_outcome(request, result, warnings)
        return InstallReport(request, outcome, plan, command, result, tuple(warnings))

    def _apply_backup(self, request: LinkRequest, plan: BackupPlan, warnings: list[str]) -> None:
        destination = request.destination_path
        backup = request.backup_path
        if plan.delete_backup:
            if self._dry_run:
                info(f"Would delete existing backup {backup}", use_emoji=self._use_emoji)
            else:
                self._attempt(
                    lambda: self._filesystem.remove_tree(backup),
                    f"Failed to delete existing backup {backup}",
                    warnings,
                )
        if plan.move_destination:
            if self._dry_run:
                info(f"Would back up {destination} to {backup}", use_emoji=self._use_emoji)
            else:
                info(f"Backing up {destination} to {backup}", use_emoji=self._use_emoji)
                self._attempt(
                    lambda: self._filesystem.rename(destination, backup),
                    f"Failed to back up {destination}",
                    warnings,
                )

    def _attempt(self, action: Callable[[], None], failure: str, warnings: list[str]) -> None:
        try:
            action()
        except OSError as exc:
            message = f"{failure}: {exc}"
            warn(message, use_emoji=self._use_emoji)
            warnings.append(message)

    def _plan_link(self, request: LinkRequest, plan: BackupPlan, command: HostCommand) -> InstallReport:
        display = command.display(platform_name=self._privileges.platform_name)
        if self._privileges.can_create_links():
            info(f"Would run: {display}", use_emoji=self._use_emoji)
            outcome = LinkOutcome.CREATED
        else:
            info(f"Would request elevation to run: {display}", use_emoji=self._use_emoji)
            outcome = LinkOutcome.ELEVATION_REQUESTED
        return InstallReport(request, outcome, plan, command, dry_run=True)

    def _resolve_outcome(
        self,
        request: LinkRequest,
        result: ElevationResult,
        warnings: list[str],
    ) -> LinkOutcome:
        if result.outcome is ElevationOutcome.REQUESTED_ELEVATION:
            return LinkOutcome.ELEVATION_REQUESTED
        if result.outcome is ElevationOutcome.REQUEST_FAILED:
            warnings.append(f"Elevation request failed: {result.message}")
            return LinkOutcome.FAILED
        if not result.succeeded:
            raise LinkCreationError(request.destination_path, request.source_path, result.message)
        return LinkOutcome.CREATED


__all__ = [
    "InstallError",
    "InstallReport",
    "LinkCreationError",
    "LinkOutcome",
    "LinkRequest",
    "SourceNotFoundError",
    "SymlinkInstaller",
]
