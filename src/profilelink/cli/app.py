# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared services."""

from __future__ import annotations

from . import doctor, install
from .typer_ext import TyperAppConfig, create_typer

app = create_typer(
    config=TyperAppConfig(
        name="profilelink",
        help_text="Link a terminal configuration profile into place.",
    ),
)
install.register(app)
doctor.register(app)


def main() -> None:
    """Run the Typer application."""

    app()


__all__ = ["app", "main"]
