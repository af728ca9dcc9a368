# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Helper services used by the install CLI command."""

from __future__ import annotations

from ..config import ConfigError, prepare_request
from ..filesystem import FileSystem
from ..installer import InstallError, InstallReport, LinkOutcome, SymlinkInstaller
from ..privileges import PrivilegeChecker
from ._install_cli_models import InstallCLIOptions
from .shared import CLIError, CLILogger


def perform_installation(
    options: InstallCLIOptions,
    *,
    logger: CLILogger,
    filesystem: FileSystem | None = None,
    privileges: PrivilegeChecker | None = None,
) -> InstallReport:
    """Install the configured profile.

    Args:
        options: Normalized CLI options containing paths and runtime flags.
        logger: Logger used to emit user-facing messages.
        filesystem: Optional filesystem override.
        privileges: Optional privilege checker override.

    Returns:
        InstallReport: The report produced by :class:`SymlinkInstaller`.

    Raises:
        CLIError: Raised when a prerequisite is missing or the installation
            fails fatally.
    """

    try:
        request = prepare_request(options.settings)
    except ConfigError as exc:
        logger.fail(str(exc))
        raise CLIError(str(exc)) from exc

    logger.debug(f"source={request.source_path} destination={request.destination_path}")
    installer = SymlinkInstaller(
        filesystem,
        privileges or PrivilegeChecker(use_emoji=options.emoji),
        use_emoji=options.emoji,
        dry_run=options.dry_run,
    )
    try:
        report = installer.install(request)
    except InstallError as exc:
        logger.fail(str(exc))
        raise CLIError(str(exc)) from exc
    if report.command is not None:
        logger.debug(f"outcome={report.outcome.value} command=\"{report.command.display()}\"")
    return report


def emit_install_summary(report: InstallReport, *, logger: CLILogger) -> None:
    """Emit the user-facing summary for an installation report.

    An existing link is reported exactly like a freshly created one.
    """

    request = report.request
    link = f"{request.destination_path} -> {request.source_path}"
    if report.dry_run:
        logger.warn(f"DRY RUN: no files were modified ({report.outcome.value})")
        return
    if report.outcome in {LinkOutcome.CREATED, LinkOutcome.ALREADY_LINKED}:
        logger.ok(f"Linked {link}")
    elif report.outcome is LinkOutcome.ELEVATION_REQUESTED:
        logger.warn(f"Elevation requested to link {link}; confirm the prompt to finish")
    else:
        logger.warn(f"Could not link {link}; rerun from an elevated shell")
    if report.backed_up:
        logger.info(f"Previous configuration kept at {request.backup_path}")


__all__ = ["emit_install_summary", "perform_installation"]
