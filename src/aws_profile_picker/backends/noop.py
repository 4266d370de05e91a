"""Backend used when no session tool is configured."""

from __future__ import annotations

from aws_profile_picker.backends.base import SessionBackend
from aws_profile_picker.config import AuthMethod
from aws_profile_picker.environment import EnvironmentState


class NoopBackend(SessionBackend):
    method = AuthMethod.NONE

    def parse_sessions(self, output: str) -> list[str]:
        return []

    def activate(self, profile: str, env: EnvironmentState) -> bool:
        env.clear_markers()
        return False
