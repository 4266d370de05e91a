"""Apply session credentials for a profile and notify the caller."""

from __future__ import annotations

import logging
from collections.abc import Callable

from aws_profile_picker.backends.base import SessionBackend
from aws_profile_picker.environment import EnvironmentState

logger = logging.getLogger(__name__)


class SessionActivator:
    """Runs one backend's activation against an environment."""

    def __init__(self, backend: SessionBackend, env: EnvironmentState) -> None:
        self.backend = backend
        self.env = env

    def activate(self, profile: str, on_update: Callable[[], None] | None = None) -> bool:
        """Activate ``profile``; ``on_update`` fires once if credentials were applied."""
        if self.backend.marker:
            self.env.unset(self.backend.marker)

        applied = self.backend.activate(profile, self.env)
        if applied and on_update is not None:
            on_update()
        return applied
