"""aws-sso session backend."""

from __future__ import annotations

import logging
import re

from aws_profile_picker.backends.base import SessionBackend
from aws_profile_picker.config import AuthMethod
from aws_profile_picker.environment import (
    DEFAULT_REGION,
    REGION,
    SSO_MARKER,
    EnvironmentState,
)
from aws_profile_picker.exceptions import SessionCommandError

logger = logging.getLogger(__name__)

FIELD_SEPARATOR_RE = re.compile(r"\s*\|")
PROFILE_FIELD = 3
EXPORT_PREFIX = "export "
VARIABLE_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def is_session_row(line: str) -> bool:
    """Table rows of ``aws-sso`` output; headers, rulers and blanks are not."""
    return not ("=" in line or "Expires" in line or not line.strip())


def parse_sso_list(output: str) -> list[str]:
    """Profile names from the Profile column of ``aws-sso`` output."""
    sessions = []
    for line in output.splitlines():
        if not is_session_row(line):
            continue
        fields = FIELD_SEPARATOR_RE.split(line.strip())
        if len(fields) <= PROFILE_FIELD:
            continue
        name = fields[PROFILE_FIELD].strip()
        if name and name not in sessions:
            sessions.append(name)
    return sessions


def _unquote(value: str) -> str:
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


def parse_export_lines(output: str) -> dict[str, str]:
    """Variables from ``export KEY=VALUE`` lines.

    Other lines, and keys that are not valid shell variable names, are ignored.
    """
    variables: dict[str, str] = {}
    for line in output.splitlines():
        if not line.startswith(EXPORT_PREFIX):
            continue
        key, sep, value = line[len(EXPORT_PREFIX):].partition("=")
        if not sep:
            continue
        key = key.strip()
        value = _unquote(value.strip())
        if not VARIABLE_NAME_RE.fullmatch(key):
            logger.debug("Skipping export with invalid name %r", key)
            continue
        if value and "\0" not in value:
            variables[key] = value
    return variables


class SsoBackend(SessionBackend):
    method = AuthMethod.SSO
    executable = "aws-sso"
    marker = SSO_MARKER
    owned_vars = (
        "AWS_ACCESS_KEY_ID",
        "AWS_SECRET_ACCESS_KEY",
        "AWS_SESSION_TOKEN",
        "AWS_DEFAULT_REGION",
        "AWS_CREDENTIAL_EXPIRATION",
        "AWS_SSO",
        "AWS_SSO_ACCOUNT_ID",
        "AWS_SSO_DEFAULT_REGION",
        "AWS_SSO_PROFILE",
        "AWS_SSO_ROLE_ARN",
        "AWS_SSO_ROLE_NAME",
        "AWS_SSO_SESSION_EXPIRATION",
    )

    def parse_sessions(self, output: str) -> list[str]:
        return parse_sso_list(output)

    def activate(self, profile: str, env: EnvironmentState) -> bool:
        try:
            output = self.runner.run(
                self.executable, ["eval", "-p", profile], env.snapshot(), shell=True
            )
        except SessionCommandError as e:
            logger.warning("Could not activate aws-sso session for %s: %s", profile, e)
            return False

        variables = parse_export_lines(output)
        if not variables:
            logger.warning("aws-sso eval printed no export statements for %s", profile)
            return False

        for key, value in variables.items():
            env.set_session_var(key, value)
        if DEFAULT_REGION in variables:
            env.set(REGION, variables[DEFAULT_REGION])

        logger.info("Activated aws-sso session for %s", profile)
        return True
