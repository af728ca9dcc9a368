# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command installing a terminal configuration profile."""

from __future__ import annotations

import typer

from ._install_cli_models import (
    CONFIG_FILE_OPTION,
    DEBUG_OPTION,
    DRY_RUN_OPTION,
    EMOJI_OPTION,
    PROFILE_OPTION,
    PROFILES_ROOT_OPTION,
    TARGET_DIR_OPTION,
    InstallCLIOptions,
)
from ._install_cli_services import emit_install_summary, perform_installation
from .shared import CLIError, build_cli_logger
from .typer_ext import SortedTyper


def install_command(
    profile: PROFILE_OPTION = None,
    profiles_root: PROFILES_ROOT_OPTION = None,
    target_dir: TARGET_DIR_OPTION = None,
    config_file: CONFIG_FILE_OPTION = None,
    dry_run: DRY_RUN_OPTION = False,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Link the selected profile's configuration file into the terminal application.

    Raises:
        typer.Exit: Always raised to terminate the command with an exit status.
    """

    logger = build_cli_logger(emoji=emoji, debug=debug)
    try:
        options = InstallCLIOptions.from_cli(
            profile=profile,
            profiles_root=profiles_root,
            target_dir=target_dir,
            config_file=config_file,
            dry_run=dry_run,
            emoji=emoji,
        )
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    try:
        report = perform_installation(options, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc

    emit_install_summary(report, logger=logger)
    raise typer.Exit(code=0)


def register(app: SortedTyper) -> None:
    """Register the install command on the Typer application."""

    app.command("install", help="Install a configuration profile by symlinking it.")(install_command)


__all__ = ["install_command", "register"]
