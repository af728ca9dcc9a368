# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Profile selection and path resolution for the installer."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .installer import LinkRequest
from .link_command import WINDOWS_PLATFORM

DEFAULT_PROFILE: Final[str] = "default"
DEFAULT_CONFIG_FILENAME: Final[str] = "settings.json"
DEFAULT_PROFILES_DIRNAME: Final[str] = "profiles"
PROFILE_ENV: Final[str] = "PROFILELINK_PROFILE"
PROFILES_ROOT_ENV: Final[str] = "PROFILELINK_PROFILES_ROOT"
TARGET_DIR_ENV: Final[str] = "PROFILELINK_TARGET_DIR"
WINDOWS_TERMINAL_PACKAGE: Final[str] = "Microsoft.WindowsTerminal_8wekyb3d8bbwe"


class ConfigError(Exception):
    """Raised when configuration input is invalid or prerequisites are missing."""


def _default_profiles_root() -> Path:
    return Path.cwd() / DEFAULT_PROFILES_DIRNAME


class ProfileSettings(BaseModel):
    """Describe which profile to install and where it should be linked.

    Attributes:
        profile: Name of the profile directory under ``profiles_root``.
        profiles_root: Directory holding one sub-directory per profile.
        config_filename: Configuration file name inside the profile and the
            target directory.
        target_dir: Directory the terminal application reads its
            configuration from. ``None`` selects the platform default.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    profile: str = Field(default=DEFAULT_PROFILE, min_length=1)
    profiles_root: Path = Field(default_factory=_default_profiles_root)
    config_filename: str = Field(default=DEFAULT_CONFIG_FILENAME, min_length=1)
    target_dir: Path | None = None

    @field_validator("profile", "config_filename")
    @classmethod
    def _reject_path_separators(cls, value: str) -> str:
        if "/" in value or "\\" in value or value in {".", ".."}:
            raise ValueError(f"'{value}' must be a plain name, not a path")
        return value

    @field_validator("profiles_root", "target_dir")
    @classmethod
    def _anchor_to_working_directory(cls, value: Path | None) -> Path | None:
        # Link targets are stored verbatim, so relative paths must not survive.
        if value is None:
            return None
        return value.expanduser().absolute()

    @classmethod
    def from_environment(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: object,
    ) -> ProfileSettings:
        """Build settings from environment variables and explicit overrides.

        Explicit overrides whose value is not ``None`` win over the
        ``PROFILELINK_*`` environment variables, which win over the defaults.

        Raises:
            ConfigError: If the combined values fail validation.
        """

        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        for key, variable in (
            ("profile", PROFILE_ENV),
            ("profiles_root", PROFILES_ROOT_ENV),
            ("target_dir", TARGET_DIR_ENV),
        ):
            raw = env.get(variable)
            if raw:
                values[key] = raw
        values.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc

    @property
    def profile_dir(self) -> Path:
        """Return the directory holding the selected profile."""

        return self.profiles_root / self.profile

    @property
    def source_path(self) -> Path:
        """Return the repository-managed configuration file for the profile."""

        return self.profile_dir / self.config_filename

    def resolve_target_dir(
        self,
        *,
        platform_name: str | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> Path | None:
        """Return the terminal application's configuration directory.

        Windows defaults to Windows Terminal's per-user ``LocalState`` folder
        beneath ``%LOCALAPPDATA%``. Other platforms have no default.
        """

        if self.target_dir is not None:
            return self.target_dir
        return default_target_dir(platform_name=platform_name, environ=environ)

    def destination_path(
        self,
        *,
        platform_name: str | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> Path | None:
        """Return the path the application reads its configuration from."""

        target = self.resolve_target_dir(platform_name=platform_name, environ=environ)
        if target is None:
            return None
        return target / self.config_filename


def default_target_dir(
    *,
    platform_name: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path | None:
    """Return the platform's default terminal configuration directory, if any."""

    target = platform_name or sys.platform
    if target != WINDOWS_PLATFORM:
        return None
    env = os.environ if environ is None else environ
    local_app_data = env.get("LOCALAPPDATA")
    if not local_app_data:
        return None
    return Path(local_app_data) / "Packages" / WINDOWS_TERMINAL_PACKAGE / "LocalState"


def prepare_request(
    settings: ProfileSettings,
    *,
    platform_name: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> LinkRequest:
    """Check installation prerequisites and return the link request.

    The source file itself is validated by the installer.

    Raises:
        ConfigError: If the profile directory is missing or the terminal
            application's configuration directory cannot be found.
    """

    if not settings.profile_dir.is_dir():
        raise ConfigError(f"Profile directory not found: {settings.profile_dir}")
    target = settings.resolve_target_dir(platform_name=platform_name, environ=environ)
    if target is None:
        raise ConfigError(
            f"Terminal application not detected; pass --target-dir or set {TARGET_DIR_ENV}",
        )
    if not target.is_dir():
        raise ConfigError(f"Terminal application not detected: {target} does not exist")
    return LinkRequest(source_path=settings.source_path, destination_path=target / settings.config_filename)


__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_FILENAME",
    "DEFAULT_PROFILE",
    "PROFILES_ROOT_ENV",
    "PROFILE_ENV",
    "ProfileSettings",
    "TARGET_DIR_ENV",
    "WINDOWS_TERMINAL_PACKAGE",
    "default_target_dir",
    "prepare_request",
]
