"""Abstract session backend shared by every authentication method."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable

from aws_profile_picker.commands import CommandRunner
from aws_profile_picker.config import AuthMethod, ProfileDescriptor
from aws_profile_picker.environment import EnvironmentState
from aws_profile_picker.exceptions import SessionCommandError

logger = logging.getLogger(__name__)


def expand_source_profiles(
    raw_sessions: Iterable[str], profiles: Iterable[ProfileDescriptor]
) -> list[str]:
    """Add profiles whose source_profile has a session. One level only."""
    raw = list(dict.fromkeys(raw_sessions))
    active = list(raw)
    for profile in profiles:
        if profile.source_profile in raw and profile.name not in active:
            active.append(profile.name)
    return active


class SessionBackend(ABC):
    """Probe and activate sessions through one external tool."""

    method: AuthMethod
    executable: str = ""
    list_args: tuple[str, ...] = ()
    marker: str | None = None  # Variable naming the profile this tool activated
    owned_vars: tuple[str, ...] = ()  # Everything the tool may export besides the marker

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    def list_active_sessions(
        self, profiles: list[ProfileDescriptor], env: EnvironmentState
    ) -> list[str]:
        """Names of profiles with a live session. Empty on any failure."""
        if not self.executable:
            return []
        try:
            output = self.runner.run(self.executable, list(self.list_args), env.snapshot())
        except SessionCommandError as e:
            logger.warning("Could not list %s sessions: %s", self.method.value, e)
            return []

        raw = self.parse_sessions(output)
        logger.debug("Raw %s sessions: %s", self.method.value, raw)
        return expand_source_profiles(raw, profiles)

    @abstractmethod
    def parse_sessions(self, output: str) -> list[str]:
        """Extract profile names from the listing command output."""

    @abstractmethod
    def activate(self, profile: str, env: EnvironmentState) -> bool:
        """Apply session credentials for ``profile``. True when anything was applied."""
