# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Environment diagnostics for profile installation."""

from __future__ import annotations

import platform
from dataclasses import dataclass

import typer
from rich import box
from rich.console import Console
from rich.rule import Rule
from rich.table import Table

from ..config import ConfigError, ProfileSettings, prepare_request
from ..filesystem import EntryKind, FileSystem, HostFileSystem
from ..privileges import PrivilegeChecker
from ._install_cli_models import (
    CONFIG_FILE_OPTION,
    PROFILE_OPTION,
    PROFILES_ROOT_OPTION,
    TARGET_DIR_OPTION,
    InstallCLIOptions,
)
from .shared import CLIError
from .typer_ext import SortedTyper


@dataclass(slots=True)
class EnvironmentCheck:
    """Represents the outcome of a doctor environment probe."""

    name: str
    status: str
    ok: bool
    detail: str


def collect_checks(
    settings: ProfileSettings,
    *,
    privileges: PrivilegeChecker,
    filesystem: FileSystem,
) -> list[EnvironmentCheck]:
    """Return the environment checks reported by ``doctor``."""

    elevated = privileges.is_elevated()
    checks = [
        EnvironmentCheck("Platform", privileges.platform_name, True, platform.platform()),
        EnvironmentCheck(
            "Elevation",
            "elevated" if elevated else "standard user",
            True,
            "links require elevation" if privileges.link_requires_elevation else "links need no elevation",
        ),
    ]
    try:
        request = prepare_request(settings, platform_name=privileges.platform_name)
    except ConfigError as exc:
        checks.append(EnvironmentCheck("Prerequisites", "missing", False, str(exc)))
        return checks

    source_kind = filesystem.resolved_kind(request.source_path)
    checks.append(
        EnvironmentCheck(
            "Source",
            source_kind.value,
            source_kind is not EntryKind.MISSING,
            str(request.source_path),
        ),
    )
    destination_kind = filesystem.kind(request.destination_path)
    checks.append(
        EnvironmentCheck("Destination", destination_kind.value, True, str(request.destination_path)),
    )
    backup_kind = filesystem.kind(request.backup_path)
    if backup_kind is not EntryKind.MISSING:
        checks.append(EnvironmentCheck("Backup", backup_kind.value, True, str(request.backup_path)))
    return checks


def run_doctor(
    settings: ProfileSettings,
    *,
    console: Console | None = None,
    privileges: PrivilegeChecker | None = None,
    filesystem: FileSystem | None = None,
) -> int:
    """Run diagnostic checks and return an exit status (0 healthy, 1 otherwise)."""

    console = console or Console()
    console.print(Rule("[bold cyan]profilelink Doctor[/bold cyan]"))
    checks = collect_checks(
        settings,
        privileges=privileges or PrivilegeChecker(),
        filesystem=filesystem or HostFileSystem(),
    )

    table = Table(title="Environment", box=box.SIMPLE, expand=True)
    table.add_column("Check", style="bold")
    table.add_column("Status", style="bold")
    table.add_column("Details", overflow="fold")
    for check in checks:
        style = "green" if check.ok else "red"
        table.add_row(check.name, f"[{style}]{check.status}[/{style}]", check.detail)
    console.print(table)
    return 0 if all(check.ok for check in checks) else 1


def doctor_command(
    profile: PROFILE_OPTION = None,
    profiles_root: PROFILES_ROOT_OPTION = None,
    target_dir: TARGET_DIR_OPTION = None,
    config_file: CONFIG_FILE_OPTION = None,
) -> None:
    """Report elevation state and the resolved source and destination paths."""

    try:
        options = InstallCLIOptions.from_cli(
            profile=profile,
            profiles_root=profiles_root,
            target_dir=target_dir,
            config_file=config_file,
            dry_run=True,
            emoji=False,
        )
    except CLIError as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    raise typer.Exit(code=run_doctor(options.settings))


def register(app: SortedTyper) -> None:
    """Register the doctor command on the Typer application."""

    app.command("doctor", help="Diagnose the profile installation environment.")(doctor_command)


__all__ = ["EnvironmentCheck", "collect_checks", "doctor_command", "register", "run_doctor"]
