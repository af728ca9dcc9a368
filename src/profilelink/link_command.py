# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Platform commands that create a symbolic link."""

from __future__ import annotations

import sys
from pathlib import Path

from .process_utils import HostCommand

WINDOWS_PLATFORM = "win32"


def build_link_command(
    destination: Path,
    source: Path,
    *,
    is_directory: bool = False,
    platform_name: str | None = None,
) -> HostCommand:
    """Return the host command creating a link at ``destination`` to ``source``.

    Args:
        destination: Path where the link entry is created.
        source: Existing path the link points to.
        is_directory: Create a directory link (``mklink /D``) on Windows.
        platform_name: ``sys.platform`` style identifier; defaults to the
            running interpreter's platform.

    Returns:
        HostCommand: ``cmd /c mklink`` on Windows, ``ln -s`` elsewhere.
    """

    target = platform_name or sys.platform
    if target == WINDOWS_PLATFORM:
        flags = ("/D",) if is_directory else ()
        return HostCommand(("cmd", "/c", "mklink", *flags, str(destination), str(source)))
    return HostCommand(("ln", "-s", "--", str(source), str(destination)))


__all__ = ["WINDOWS_PLATFORM", "build_link_command"]
