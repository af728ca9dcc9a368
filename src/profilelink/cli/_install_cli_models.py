# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data structures shared by the install and doctor CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

from ..config import ConfigError, ProfileSettings
from .shared import CLIError

PROFILE_OPTION = Annotated[
    str | None,
    typer.Option(
        "--profile",
        "-p",
        help="Profile to install (default: PROFILELINK_PROFILE or 'default').",
    ),
]
PROFILES_ROOT_OPTION = Annotated[
    Path | None,
    typer.Option(
        "--profiles-root",
        help="Directory holding one sub-directory per profile (default: ./profiles).",
    ),
]
TARGET_DIR_OPTION = Annotated[
    Path | None,
    typer.Option(
        "--target-dir",
        help="Directory the terminal application reads its configuration from.",
    ),
]
CONFIG_FILE_OPTION = Annotated[
    str | None,
    typer.Option("--config-file", help="Configuration file name (default: settings.json)."),
]
DRY_RUN_OPTION = Annotated[
    bool,
    typer.Option("--dry-run", help="Show actions without modifying files."),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]
DEBUG_OPTION = Annotated[
    bool,
    typer.Option("--debug", help="Print resolved paths and commands."),
]


@dataclass(slots=True)
class InstallCLIOptions:
    """Capture CLI options for profile installation."""

    settings: ProfileSettings
    dry_run: bool
    emoji: bool

    @classmethod
    def from_cli(
        cls,
        *,
        profile: str | None,
        profiles_root: Path | None,
        target_dir: Path | None,
        config_file: str | None,
        dry_run: bool,
        emoji: bool,
    ) -> InstallCLIOptions:
        """Return options parsed from CLI arguments.

        Raises:
            CLIError: If the resulting settings are invalid.
        """

        try:
            settings = ProfileSettings.from_environment(
                profile=profile,
                profiles_root=profiles_root.resolve() if profiles_root is not None else None,
                target_dir=target_dir.resolve() if target_dir is not None else None,
                config_filename=config_file,
            )
        except ConfigError as exc:
            raise CLIError(f"Invalid configuration: {exc}") from exc
        return cls(settings=settings, dry_run=dry_run, emoji=emoji)


__all__ = [
    "CONFIG_FILE_OPTION",
    "DEBUG_OPTION",
    "DRY_RUN_OPTION",
    "EMOJI_OPTION",
    "InstallCLIOptions",
    "PROFILES_ROOT_OPTION",
    "PROFILE_OPTION",
    "TARGET_DIR_OPTION",
]
