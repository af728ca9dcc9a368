# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Install terminal configuration profiles by symlinking them into place."""

from __future__ import annotations

from .installer import (
    InstallError,
    InstallReport,
    LinkCreationError,
    LinkOutcome,
    LinkRequest,
    SourceNotFoundError,
    SymlinkInstaller,
)
from .privileges import ElevationOutcome, ElevationResult, PrivilegeChecker

__all__ = [
    "ElevationOutcome",
    "ElevationResult",
    "InstallError",
    "InstallReport",
    "LinkCreationError",
    "LinkOutcome",
    "LinkRequest",
    "PrivilegeChecker",
    "SourceNotFoundError",
    "SymlinkInstaller",
]

__version__ = "0.1.0"
