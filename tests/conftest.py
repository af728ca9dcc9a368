# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from profilelink.privileges import ElevationOutcome, ElevationResult, PrivilegeChecker
from profilelink.process_utils import HostCommand
from tests.helpers.filesystem import SOURCE, InMemoryFileSystem


class RecordingPrivileges:
    """Build :class:`PrivilegeChecker` instances whose commands act on a fake filesystem."""

    def __init__(self, filesystem: InMemoryFileSystem) -> None:
        self.filesystem = filesystem
        self.direct: list[HostCommand] = []
        self.launched: list[HostCommand] = []

    def link_on_success(self, command: HostCommand) -> ElevationResult:
        self.direct.append(command)
        # Both ``ln -s -- SRC DEST`` and ``mklink DEST SRC`` carry the paths last.
        if command.executable == "ln":
            source, destination = command.argv[-2:]
        else:
            destination, source = command.argv[-2:]
        self.filesystem.add_link(Path(destination), Path(source))
        return ElevationResult(ElevationOutcome.RAN_DIRECTLY, succeeded=True)

    def launch(self, command: HostCommand) -> None:
        self.launched.append(command)

    def checker(
        self,
        *,
        elevated: bool,
        platform_name: str = "win32",
        runner: Callable[[HostCommand], ElevationResult] | None = None,
        launcher: Callable[[HostCommand], object] | None = None,
    ) -> PrivilegeChecker:
        return PrivilegeChecker(
            platform_name=platform_name,
            probe=lambda: elevated,
            runner=runner or self.link_on_success,
            launcher=launcher or self.launch,
            use_emoji=False,
        )


@pytest.fixture
def fake_fs() -> InMemoryFileSystem:
    """Return an in-memory filesystem that already holds the profile source file."""

    filesystem = InMemoryFileSystem()
    filesystem.add_file(SOURCE, "profile")
    return filesystem


@pytest.fixture
def privileges(fake_fs: InMemoryFileSystem) -> RecordingPrivileges:
    """Return a privilege factory bound to ``fake_fs``."""

    return RecordingPrivileges(fake_fs)


@pytest.fixture
def profile_tree(tmp_path: Path) -> tuple[Path, Path]:
    """Create ``profiles/default/settings.json`` and an empty target directory."""

    profiles_root = tmp_path / "profiles"
    profile_dir = profiles_root / "default"
    profile_dir.mkdir(parents=True)
    (profile_dir / "settings.json").write_text('{"theme": "dark"}\n', encoding="utf-8")
    target_dir = tmp_path / "LocalState"
    target_dir.mkdir()
    return profiles_root, target_dir


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for variable in ("PROFILELINK_PROFILE", "PROFILELINK_PROFILES_ROOT", "PROFILELINK_TARGET_DIR"):
        monkeypatch.delenv(variable, raising=False)
