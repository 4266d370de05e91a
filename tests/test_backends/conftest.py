"""Shared fixtures for backend tests."""

from __future__ import annotations

import pytest

from aws_profile_picker.exceptions import SessionCommandError


@pytest.fixture
def failing_runner(runner):
    """A runner whose every command fails."""
    runner.run.side_effect = SessionCommandError("aws-vault not found in /opt/homebrew/bin")
    return runner
