# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filesystem access used by the installer, expressed as a swappable protocol."""

from __future__ import annotations

import os
import shutil
import stat
from enum import StrEnum
from pathlib import Path
from typing import Protocol, runtime_checkable


class EntryKind(StrEnum):
    """Describe what occupies a filesystem path without following links."""

    MISSING = "missing"
    LINK = "link"
    FILE = "file"
    DIRECTORY = "directory"


@runtime_checkable
class FileSystem(Protocol):
    """Operations the installer performs against the host filesystem."""

    def kind(self, path: Path) -> EntryKind:
        """Return the :class:`EntryKind` of the entry at ``path``.

        Links (symbolic links, junctions and other reparse points) are reported
        as :attr:`EntryKind.LINK` from the entry's own attributes, including
        links whose target no longer exists.
        """

    def resolved_kind(self, path: Path) -> EntryKind:
        """Return the :class:`EntryKind` of whatever ``path`` finally points to.

        Links are followed, so the result is never :attr:`EntryKind.LINK`; a
        dangling link is :attr:`EntryKind.MISSING`.
        """

    def remove_tree(self, path: Path) -> None:
        """Delete ``path`` recursively; links are removed, never followed.

        Raises:
            OSError: If the entry cannot be removed.
        """

    def rename(self, source: Path, destination: Path) -> None:
        """Move ``source`` to ``destination``.

        Raises:
            OSError: If the move fails.
        """


def is_reparse_point(entry: os.stat_result) -> bool:
    """Return ``True`` when ``entry`` carries the Windows reparse-point attribute."""

    attributes = getattr(entry, "st_file_attributes", 0)
    return bool(attributes & stat.FILE_ATTRIBUTE_REPARSE_POINT)


class HostFileSystem:
    """:class:`FileSystem` implementation backed by the running host."""

    def kind(self, path: Path) -> EntryKind:
        try:
            entry = os.lstat(path)
        except (FileNotFoundError, NotADirectoryError):
            return EntryKind.MISSING
        if stat.S_ISLNK(entry.st_mode) or is_reparse_point(entry):
            return EntryKind.LINK
        if stat.S_ISDIR(entry.st_mode):
            return EntryKind.DIRECTORY
        return EntryKind.FILE

    def resolved_kind(self, path: Path) -> EntryKind:
        try:
            entry = os.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            return EntryKind.MISSING
        return EntryKind.DIRECTORY if stat.S_ISDIR(entry.st_mode) else EntryKind.FILE

    def remove_tree(self, path: Path) -> None:
        entry_kind = self.kind(path)
        if entry_kind is EntryKind.MISSING:
            return
        if entry_kind is EntryKind.DIRECTORY:
            shutil.rmtree(path)
            return
        # Junctions report as directories to ``os.rmdir`` on Windows.
        if entry_kind is EntryKind.LINK and os.path.isdir(path) and os.name == "nt":
            os.rmdir(path)
            return
        path.unlink()

    def rename(self, source: Path, destination: Path) -> None:
        source.rename(destination)


__all__ = [
    "EntryKind",
    "FileSystem",
    "HostFileSystem",
    "is_reparse_point",
]
