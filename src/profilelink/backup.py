# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Single-generation backup policy for conflicting link destinations.

The policy is a pure state transition: given what currently occupies the
destination and its ``.bak`` slot, :func:`plan_backup` returns the steps the
installer must perform and the states both paths end up in. Only one backup
generation exists; an older ``.bak`` is discarded before the destination is
moved into its place.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .filesystem import EntryKind

BACKUP_SUFFIX: Final[str] = ".bak"


def backup_path_for(destination: Path) -> Path:
    """Return the backup location for ``destination`` (``<name>.bak``)."""

    return destination.with_name(destination.name + BACKUP_SUFFIX)


@dataclass(frozen=True, slots=True)
class BackupPlan:
    """Steps required before a link can be created at the destination.

    Attributes:
        destination_before: Entry currently occupying the destination.
        backup_before: Entry currently occupying the backup slot.
        delete_backup: Whether the existing backup must be removed first.
        move_destination: Whether the destination is moved into the backup slot.
        already_linked: Whether the destination is already a link and the
            installation is satisfied as-is.
    """

    destination_before: EntryKind
    backup_before: EntryKind
    delete_backup: bool
    move_destination: bool
    already_linked: bool

    @property
    def destination_after(self) -> EntryKind:
        """Return the destination state once the plan has been applied."""

        if self.move_destination:
            return EntryKind.MISSING
        return self.destination_before

    @property
    def backup_after(self) -> EntryKind:
        """Return the backup state once the plan has been applied."""

        if self.move_destination:
            return self.destination_before
        return self.backup_before

    @property
    def needs_link(self) -> bool:
        """Return ``True`` when a new link must be created afterwards."""

        return not self.already_linked


def plan_backup(destination: EntryKind, backup: EntryKind) -> BackupPlan:
    """Return the backup plan for the given destination and backup states.

    Args:
        destination: Entry currently occupying the destination path.
        backup: Entry currently occupying ``destination + ".bak"``.

    Returns:
        BackupPlan: Steps to perform and the resulting states.
    """

    if destination is EntryKind.MISSING:
        return BackupPlan(destination, backup, delete_backup=False, move_destination=False, already_linked=False)
    if destination is EntryKind.LINK:
        # The link target is deliberately not compared with the source; any
        # existing link counts as installed.
        return BackupPlan(destination, backup, delete_backup=False, move_destination=False, already_linked=True)
    return BackupPlan(
        destination,
        backup,
        delete_backup=backup is not EntryKind.MISSING,
        move_destination=True,
        already_linked=False,
    )


__all__ = ["BACKUP_SUFFIX", "BackupPlan", "backup_path_for", "plan_backup"]
