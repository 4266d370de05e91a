"""Load AWS profiles from the shared config and credentials files."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

from botocore import configloader
from botocore.exceptions import BotoCoreError

from aws_profile_picker.config import ProfileDescriptor
from aws_profile_picker.exceptions import ConfigReadError

logger = logging.getLogger(__name__)


def default_config_path() -> Path:
    """Path of the primary config file, honouring AWS_CONFIG_FILE."""
    override = os.environ.get("AWS_CONFIG_FILE")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".aws" / "config"


def default_credentials_path() -> Path:
    """Path of the fallback credentials file, honouring AWS_SHARED_CREDENTIALS_FILE."""
    override = os.environ.get("AWS_SHARED_CREDENTIALS_FILE")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".aws" / "credentials"


class ConfigReader:
    """Merges the config and credentials files into profile descriptors."""

    def __init__(
        self,
        config_path: Path | None = None,
        credentials_path: Path | None = None,
    ) -> None:
        self._config_path = config_path
        self._credentials_path = credentials_path

    @property
    def config_path(self) -> Path:
        return self._config_path or default_config_path()

    @property
    def credentials_path(self) -> Path:
        return self._credentials_path or default_credentials_path()

    def load(self) -> list[ProfileDescriptor]:
        """Return the merged profile list. Never raises."""
        config_file = self._read_safely(self._read_config, self.config_path)
        credentials_file = self._read_safely(self._read_credentials, self.credentials_path)
        return merge_profiles(config_file, credentials_file)

    @staticmethod
    def _read_safely(
        reader: Callable[[Path], dict[str, dict[str, Any]]], path: Path
    ) -> dict[str, dict[str, Any]]:
        try:
            return reader(path)
        except ConfigReadError as e:
            logger.debug("Treating %s as empty: %s", path, e)
            return {}

    @staticmethod
    def _read_config(path: Path) -> dict[str, dict[str, Any]]:
        """Profiles from the config file, keyed without the "profile " prefix."""
        try:
            return configloader.load_config(str(path)).get("profiles", {})
        except (BotoCoreError, OSError) as e:
            raise ConfigReadError(f"Failed to read config file {path}: {e}") from e

    @staticmethod
    def _read_credentials(path: Path) -> dict[str, dict[str, Any]]:
        """Sections of the credentials file, keyed by bare profile name."""
        try:
            return configloader.raw_config_parse(str(path))
        except (BotoCoreError, OSError) as e:
            raise ConfigReadError(f"Failed to read credentials file {path}: {e}") from e


def merge_profiles(
    config_file: dict[str, dict[str, Any]],
    credentials_file: dict[str, dict[str, Any]],
) -> list[ProfileDescriptor]:
    """Build descriptors from the two parsed sources.

    The config file is authoritative whenever it has any profile. Region falls
    back to the credentials entry, then to the config entry named by
    ``include_profile``.
    """
    entries = config_file if config_file else credentials_file

    profiles = []
    for name, values in entries.items():
        include_profile = config_file.get(name, {}).get("include_profile")
        region = (
            config_file.get(name, {}).get("region")
            or credentials_file.get(name, {}).get("region")
            or (include_profile and config_file.get(include_profile, {}).get("region"))
            or None
        )
        profiles.append(ProfileDescriptor(
            name=name,
            region=region,
            source_profile=values.get("source_profile") or None,
            credential_process=values.get("credential_process") or None,
        ))
    return profiles
