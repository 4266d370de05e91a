"""Pydantic models for profiles and picker configuration."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BIN_PATH = "/opt/homebrew/bin:/usr/local/bin:/usr/bin:/bin"


def _default_cache_path() -> Path:
    override = os.environ.get("AWS_PROFILE_PICKER_CACHE")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".cache" / "aws-profile-picker" / "state.json"


class AuthMethod(str, Enum):
    """External tool that owns session credentials."""

    VAULT = "vault"
    SSO = "sso"
    NONE = "none"


class ProfileDescriptor(BaseModel):
    """A single profile from the AWS shared config files."""

    model_config = ConfigDict(frozen=True)

    name: str
    region: str | None = None
    source_profile: str | None = None
    credential_process: str | None = None


class PickerConfig(BaseModel):
    """Runtime configuration for the picker."""

    method: AuthMethod = AuthMethod.NONE
    bin_path: str = DEFAULT_BIN_PATH
    cache_path: Path = Field(default_factory=_default_cache_path)
    config_file: Path | None = None
    credentials_file: Path | None = None
    verbose: bool = False
