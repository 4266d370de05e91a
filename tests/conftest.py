"""Shared fixtures for tests."""

from __future__ import annotations

import os
from unittest.mock import MagicMock

import pytest

from aws_profile_picker.commands import CommandRunner
from aws_profile_picker.config import ProfileDescriptor
from aws_profile_picker.environment import EnvironmentState


@pytest.fixture(autouse=True)
def fake_aws_creds(monkeypatch, tmp_path):
    """Keep tests away from the real environment, AWS files and selection cache."""
    # The picker writes to os.environ; give each test a private copy
    monkeypatch.setattr(os, "environ", dict(os.environ))
    for name in ("AWS_PROFILE", "AWS_REGION", "AWS_VAULT", "AWS_SSO_PROFILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    # Prevent loading real AWS config
    monkeypatch.setenv("AWS_CONFIG_FILE", "/dev/null")
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", "/dev/null")
    monkeypatch.setenv("AWS_PROFILE_PICKER_CACHE", str(tmp_path / "cache" / "state.json"))


@pytest.fixture
def env():
    """An environment backed by a plain dict."""
    return EnvironmentState({})


@pytest.fixture
def runner():
    """A command runner that never spawns processes."""
    return MagicMock(spec=CommandRunner)


@pytest.fixture
def profiles():
    return [
        ProfileDescriptor(name="dev", region="eu-west-1"),
        ProfileDescriptor(name="prod", region="us-east-1"),
        ProfileDescriptor(name="prod-admin", source_profile="prod"),
    ]
