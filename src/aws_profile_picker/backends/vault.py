"""aws-vault session backend."""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from aws_profile_picker.backends.base import SessionBackend
from aws_profile_picker.config import AuthMethod
from aws_profile_picker.environment import VAULT_MARKER, EnvironmentState
from aws_profile_picker.exceptions import CommandOutputError, SessionCommandError

logger = logging.getLogger(__name__)

# "sts.AssumeRole:59m" or "sts.GetSessionToken:-"; "-" means no live session
SESSION_MARKER_RE = re.compile(r"sts\.(?:AssumeRole|GetSessionToken):(\S+)")
NO_SESSION = "-"


class VaultCredentials(BaseModel):
    """Credential process JSON printed by ``aws-vault exec --json``."""

    model_config = ConfigDict(populate_by_name=True)

    access_key_id: str = Field(alias="AccessKeyId", min_length=1)
    secret_access_key: str = Field(alias="SecretAccessKey", min_length=1)
    session_token: str = Field(alias="SessionToken", min_length=1)
    expiration: str | None = Field(default=None, alias="Expiration")


def is_active_session_line(line: str) -> bool:
    """True when the line carries a session marker and none of them is a dash."""
    values = [value.rstrip(",") for value in SESSION_MARKER_RE.findall(line)]
    return bool(values) and NO_SESSION not in values


def parse_vault_list(output: str) -> list[str]:
    """Profile names with a live session in ``aws-vault list`` output."""
    sessions = []
    for line in output.splitlines():
        if not is_active_session_line(line):
            continue
        name = line.split()[0]
        if name not in sessions:
            sessions.append(name)
    return sessions


def parse_vault_credentials(output: str) -> VaultCredentials:
    try:
        return VaultCredentials.model_validate_json(output)
    except ValidationError as e:
        raise CommandOutputError(f"Unexpected aws-vault exec output: {e}") from e


class VaultBackend(SessionBackend):
    method = AuthMethod.VAULT
    executable = "aws-vault"
    list_args = ("list",)
    marker = VAULT_MARKER

    def parse_sessions(self, output: str) -> list[str]:
        return parse_vault_list(output)

    def activate(self, profile: str, env: EnvironmentState) -> bool:
        try:
            output = self.runner.run(
                self.executable, ["exec", profile, "--json"], env.snapshot()
            )
            creds = parse_vault_credentials(output)
        except SessionCommandError as e:
            logger.warning("Could not activate aws-vault session for %s: %s", profile, e)
            return False

        env.set_credentials(creds.access_key_id, creds.secret_access_key, creds.session_token)
        env.set(VAULT_MARKER, profile)
        logger.info("Activated aws-vault session for %s", profile)
        return True
