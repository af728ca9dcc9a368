# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the symlink installer against an in-memory filesystem."""

from __future__ import annotations

from pathlib import Path

import pytest

from profilelink.filesystem import EntryKind
from profilelink.installer import (
    LinkCreationError,
    LinkOutcome,
    LinkRequest,
    SourceNotFoundError,
    SymlinkInstaller,
)
from profilelink.privileges import ElevationOutcome, ElevationResult
from profilelink.process_utils import HostCommand
from tests.helpers.filesystem import BACKUP, DESTINATION, SOURCE, InMemoryFileSystem

REQUEST = LinkRequest(source_path=SOURCE, destination_path=DESTINATION)


def _installer(fake_fs: InMemoryFileSystem, checker, *, dry_run: bool = False) -> SymlinkInstaller:
    return SymlinkInstaller(fake_fs, checker, use_emoji=False, dry_run=dry_run)


def test_backup_path_appends_suffix_to_full_name() -> None:
    assert REQUEST.backup_path == BACKUP


def test_existing_link_is_accepted_without_any_changes(fake_fs, privileges) -> None:
    fake_fs.add_link(DESTINATION, SOURCE)

    report = _installer(fake_fs, privileges.checker(elevated=True)).install(REQUEST)

    assert report.outcome is LinkOutcome.ALREADY_LINKED
    assert fake_fs.mutations == []
    assert privileges.direct == []
    assert privileges.launched == []


def test_link_to_another_target_is_still_accepted(fake_fs, privileges) -> None:
    # Known gap: the link target is never compared with the requested source.
    elsewhere = Path("/somewhere/else/settings.json")
    fake_fs.add_link(DESTINATION, elsewhere)
    fake_fs.add_file(BACKUP, "older")

    report = _installer(fake_fs, privileges.checker(elevated=False)).install(REQUEST)

    assert report.outcome is LinkOutcome.ALREADY_LINKED
    assert fake_fs.entries[DESTINATION].target == elsewhere
    assert fake_fs.content(BACKUP) == "older"
    assert fake_fs.mutations == []
    assert privileges.launched == []


def test_plain_file_is_backed_up_before_linking(fake_fs, privileges) -> None:
    fake_fs.add_file(DESTINATION, "X")

    report = _installer(fake_fs, privileges.checker(elevated=True)).install(REQUEST)

    assert report.outcome is LinkOutcome.CREATED
    assert report.backed_up
    assert report.verified
    assert fake_fs.content(BACKUP) == "X"
    assert fake_fs.kind(DESTINATION) is EntryKind.LINK
    assert fake_fs.entries[DESTINATION].target == SOURCE


def test_existing_backup_is_replaced(fake_fs, privileges) -> None:
    fake_fs.add_file(DESTINATION, "X")
    fake_fs.add_file(BACKUP, "Y")

    report = _installer(fake_fs, privileges.checker(elevated=True)).install(REQUEST)

    assert report.outcome is LinkOutcome.CREATED
    assert fake_fs.content(BACKUP) == "X"
    assert fake_fs.mutations == [("remove_tree", BACKUP), ("rename", DESTINATION)]


def test_directory_destination_is_backed_up(fake_fs, privileges) -> None:
    fake_fs.add_directory(DESTINATION)
    fake_fs.add_file(DESTINATION / "nested.json", "inner")

    _installer(fake_fs, privileges.checker(elevated=True)).install(REQUEST)

    assert fake_fs.kind(BACKUP) is EntryKind.DIRECTORY
    assert fake_fs.kind(DESTINATION) is EntryKind.LINK


def test_missing_source_aborts_before_touching_destination(fake_fs, privileges) -> None:
    fake_fs.entries.pop(SOURCE)
    fake_fs.add_file(DESTINATION, "X")
    fake_fs.add_file(BACKUP, "Y")

    with pytest.raises(SourceNotFoundError) as excinfo:
        _installer(fake_fs, privileges.checker(elevated=True)).install(REQUEST)

    assert excinfo.value.source == SOURCE
    assert fake_fs.mutations == []
    assert fake_fs.content(DESTINATION) == "X"
    assert fake_fs.content(BACKUP) == "Y"
    assert privileges.direct == []


def test_dangling_source_link_counts_as_missing(fake_fs, privileges) -> None:
    target = SOURCE.with_name("removed.json")
    fake_fs.entries.pop(SOURCE)
    fake_fs.add_link(SOURCE, target)
    fake_fs.add_file(DESTINATION, "X")

    with pytest.raises(SourceNotFoundError):
        _installer(fake_fs, privileges.checker(elevated=True)).install(REQUEST)

    assert fake_fs.mutations == []
    assert fake_fs.content(DESTINATION) == "X"


def test_missing_destination_skips_backup_logic(fake_fs, privileges) -> None:
    fake_fs.add_file(BACKUP, "Y")

    report = _installer(fake_fs, privileges.checker(elevated=True)).install(REQUEST)

    assert report.outcome is LinkOutcome.CREATED
    assert not report.backed_up
    assert fake_fs.mutations == []
    assert fake_fs.content(BACKUP) == "Y"
    assert len(privileges.direct) == 1


def test_elevated_windows_run_uses_mklink(fake_fs, privileges) -> None:
    report = _installer(fake_fs, privileges.checker(elevated=True)).install(REQUEST)

    assert report.command == HostCommand(("cmd", "/c", "mklink", str(DESTINATION), str(SOURCE)))
    assert report.elevation is not None
    assert report.elevation.outcome is ElevationOutcome.RAN_DIRECTLY


def test_directory_source_uses_directory_link(fake_fs, privileges) -> None:
    fake_fs.entries.pop(SOURCE)
    fake_fs.add_directory(SOURCE)

    report = _installer(fake_fs, privileges.checker(elevated=True)).install(REQUEST)

    assert report.command is not None
    assert "/D" in report.command.argv


def test_not_elevated_requests_elevation_without_verifying(fake_fs, privileges) -> None:
    fake_fs.add_file(DESTINATION, "X")

    report = _installer(fake_fs, privileges.checker(elevated=False)).install(REQUEST)

    assert report.outcome is LinkOutcome.ELEVATION_REQUESTED
    assert not report.verified
    assert privileges.direct == []
    assert len(privileges.launched) == 1
    # The backup happens in this process; the link is left to the elevated child.
    assert fake_fs.content(BACKUP) == "X"
    assert fake_fs.kind(DESTINATION) is EntryKind.MISSING


def test_posix_links_do_not_need_elevation(fake_fs, privileges) -> None:
    report = _installer(fake_fs, privileges.checker(elevated=False, platform_name="linux")).install(REQUEST)

    assert report.outcome is LinkOutcome.CREATED
    assert privileges.launched == []
    assert report.command == HostCommand(("ln", "-s", "--", str(SOURCE), str(DESTINATION)))


def test_failed_elevation_request_is_not_fatal(fake_fs, privileges, capsys) -> None:
    def refuse(command: HostCommand) -> None:
        raise OSError("The operation was canceled by the user")

    checker = privileges.checker(elevated=False, launcher=refuse)
    report = _installer(fake_fs, checker).install(REQUEST)

    assert report.outcome is LinkOutcome.FAILED
    assert report.elevation is not None
    assert report.elevation.outcome is ElevationOutcome.REQUEST_FAILED
    assert any("canceled by the user" in warning for warning in report.warnings)
    assert "Failed to request elevation" in capsys.readouterr().out


def test_direct_link_failure_is_fatal_and_keeps_backup(fake_fs, privileges) -> None:
    fake_fs.add_file(DESTINATION, "X")

    def broken(command: HostCommand) -> ElevationResult:
        return ElevationResult(ElevationOutcome.RAN_DIRECTLY, succeeded=False, message="Access is denied.")

    checker = privileges.checker(elevated=True, runner=broken)
    with pytest.raises(LinkCreationError, match="Access is denied"):
        _installer(fake_fs, checker).install(REQUEST)

    # No rollback: the original file stays in the backup slot.
    assert fake_fs.content(BACKUP) == "X"
    assert fake_fs.kind(DESTINATION) is EntryKind.MISSING


def test_backup_delete_failure_is_logged_and_installation_continues(fake_fs, privileges, capsys) -> None:
    fake_fs.add_file(DESTINATION, "X")
    fake_fs.add_file(BACKUP, "Y")
    fake_fs.fail_remove = True

    report = _installer(fake_fs, privileges.checker(elevated=False)).install(REQUEST)

    assert report.outcome is LinkOutcome.ELEVATION_REQUESTED
    assert len(report.warnings) == 2
    assert report.warnings[0].startswith("Failed to delete existing backup")
    assert report.warnings[1].startswith("Failed to back up")
    assert fake_fs.content(BACKUP) == "Y"
    assert len(privileges.launched) == 1
    output = capsys.readouterr().out
    assert "Failed to delete existing backup" in output


def test_backup_move_failure_still_attempts_link(fake_fs, privileges) -> None:
    fake_fs.add_file(DESTINATION, "X")
    fake_fs.fail_rename = True

    def linked_over_file(command: HostCommand) -> ElevationResult:
        return ElevationResult(ElevationOutcome.RAN_DIRECTLY, succeeded=False, message="file exists")

    checker = privileges.checker(elevated=True, runner=linked_over_file)
    with pytest.raises(LinkCreationError, match="file exists"):
        _installer(fake_fs, checker).install(REQUEST)

    assert fake_fs.content(DESTINATION) == "X"


def test_dry_run_reports_plan_without_changes(fake_fs, privileges, capsys) -> None:
    fake_fs.add_file(DESTINATION, "X")
    fake_fs.add_file(BACKUP, "Y")

    report = _installer(fake_fs, privileges.checker(elevated=True), dry_run=True).install(REQUEST)

    assert report.dry_run
    assert report.outcome is LinkOutcome.CREATED
    assert not report.verified
    assert fake_fs.mutations == []
    assert privileges.direct == []
    output = capsys.readouterr().out
    assert "Would delete existing backup" in output
    assert "Would back up" in output
    assert "Would run: cmd /c mklink" in output


def test_dry_run_without_elevation_plans_request(fake_fs, privileges, capsys) -> None:
    report = _installer(fake_fs, privileges.checker(elevated=False), dry_run=True).install(REQUEST)

    assert report.outcome is LinkOutcome.ELEVATION_REQUESTED
    assert privileges.launched == []
    assert "Would request elevation" in capsys.readouterr().out
