"""JSON cache holding the selected profile between runs."""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from aws_profile_picker.exceptions import StateCacheError

logger = logging.getLogger(__name__)

SELECTED_PROFILE_KEY = "aws_profile"


class SelectionCache:
    """Persists the selected profile name with atomic writes."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._state: dict[str, Any] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path) as f:
                state = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise StateCacheError(f"Failed to load selection cache: {e}") from e
        if not isinstance(state, dict):
            raise StateCacheError(f"Selection cache {self._path} is not a JSON object")
        return state

    def _save(self, state: dict[str, Any]) -> None:
        """Atomic write: write to tmp file, then rename."""
        tmp_path = self._path.with_suffix(".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w") as f:
                json.dump(state, f, indent=2)
            os.replace(tmp_path, self._path)
        except OSError as e:
            raise StateCacheError(f"Failed to save selection cache: {e}") from e

    def _state_or_empty(self) -> dict[str, Any]:
        if self._state is None:
            try:
                self._state = self._load()
            except StateCacheError as e:
                logger.warning("Ignoring selection cache: %s", e)
                self._state = {}
        return self._state

    def get(self) -> str | None:
        """The persisted profile name, or None if unset."""
        value = self._state_or_empty().get(SELECTED_PROFILE_KEY)
        return value if isinstance(value, str) and value else None

    def set(self, profile: str | None) -> None:
        """Persist ``profile``; None clears the selection."""
        state = dict(self._state_or_empty())
        if profile is None:
            state.pop(SELECTED_PROFILE_KEY, None)
        else:
            state[SELECTED_PROFILE_KEY] = profile
        state["updated_at"] = datetime.now(UTC).isoformat()
        self._state = state
        try:
            self._save(state)
        except StateCacheError as e:
            logger.warning("Selection not persisted: %s", e)
