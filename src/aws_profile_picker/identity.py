"""Resolve who the reconciled environment authenticates as."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import boto3
from botocore.config import Config

from aws_profile_picker.environment import (
    ACCESS_KEY_ID,
    PROFILE,
    REGION,
    SECRET_ACCESS_KEY,
    SESSION_TOKEN,
    EnvironmentState,
)
from aws_profile_picker.exceptions import IdentityError

logger = logging.getLogger(__name__)

BOTO_CONFIG = Config(retries={"max_attempts": 3, "mode": "standard"})


@dataclass
class CallerIdentity:
    account: str
    arn: str
    user_id: str


def session_from_environment(env: EnvironmentState) -> boto3.Session:
    """Build a boto3 session from explicit credentials, else from the selected profile."""
    region = env.get(REGION)
    if env.get(ACCESS_KEY_ID) and env.get(SECRET_ACCESS_KEY):
        return boto3.Session(
            aws_access_key_id=env.get(ACCESS_KEY_ID),
            aws_secret_access_key=env.get(SECRET_ACCESS_KEY),
            aws_session_token=env.get(SESSION_TOKEN),
            region_name=region,
        )
    return boto3.Session(profile_name=env.get(PROFILE), region_name=region)


def resolve_identity(env: EnvironmentState) -> CallerIdentity:
    """Call STS GetCallerIdentity with the credentials the environment points at."""
    try:
        session = session_from_environment(env)
        sts = session.client("sts", config=BOTO_CONFIG)
        identity = sts.get_caller_identity()
    except Exception as e:
        raise IdentityError(f"Failed to resolve caller identity: {e}") from e

    logger.debug("Resolved identity %s", identity.get("Arn"))
    return CallerIdentity(
        account=identity["Account"],
        arn=identity["Arn"],
        user_id=identity["UserId"],
    )
