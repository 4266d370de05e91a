"""Process environment holding the active profile and session credentials."""

from __future__ import annotations

import logging
import os
import shlex
from collections.abc import MutableMapping

logger = logging.getLogger(__name__)

ACCESS_KEY_ID = "AWS_ACCESS_KEY_ID"
SECRET_ACCESS_KEY = "AWS_SECRET_ACCESS_KEY"
SESSION_TOKEN = "AWS_SESSION_TOKEN"
PROFILE = "AWS_PROFILE"
VAULT_MARKER = "AWS_VAULT"
SSO_MARKER = "AWS_SSO_PROFILE"
REGION = "AWS_REGION"
DEFAULT_REGION = "AWS_DEFAULT_REGION"

CREDENTIAL_VARS = (ACCESS_KEY_ID, SECRET_ACCESS_KEY, SESSION_TOKEN)
MARKER_VARS = (VAULT_MARKER, SSO_MARKER)


class EnvironmentState:
    """Mutable view over an environment mapping.

    Every write goes through :meth:`set` or :meth:`unset`, which keeps a record
    of touched variables so the final change set can be replayed in a shell.
    """

    def __init__(self, environ: MutableMapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ
        self._touched: dict[str, str | None] = {}
        self._session_vars: set[str] = set()

    def get(self, name: str) -> str | None:
        return self._environ.get(name)

    def set(self, name: str, value: str) -> None:
        self._environ[name] = value
        self._touched[name] = value

    def unset(self, name: str) -> None:
        if name in self._environ:
            del self._environ[name]
        self._touched[name] = None

    def clear_markers(self) -> None:
        """Remove every method marker."""
        for name in MARKER_VARS:
            self.unset(name)

    def clear_credentials(self) -> None:
        for name in CREDENTIAL_VARS:
            self.unset(name)

    def set_credentials(self, access_key_id: str, secret_access_key: str, session_token: str) -> None:
        self.set(ACCESS_KEY_ID, access_key_id)
        self.set(SECRET_ACCESS_KEY, secret_access_key)
        self.set(SESSION_TOKEN, session_token)

    def set_session_var(self, name: str, value: str) -> None:
        """Set a variable exported by a session tool; dropped by :meth:`clear_session_vars`."""
        self.set(name, value)
        self._session_vars.add(name)

    def clear_session_vars(self) -> None:
        for name in sorted(self._session_vars):
            self.unset(name)
        self._session_vars.clear()

    def snapshot(self) -> dict[str, str]:
        """Copy of the current contents, used as the base environment for child processes."""
        return dict(self._environ)

    @property
    def changes(self) -> dict[str, str | None]:
        """Variables touched so far, mapped to their final value (None if removed)."""
        return dict(self._touched)

    def to_shell(self) -> str:
        """Render the touched variables as POSIX shell statements."""
        lines = []
        for name, value in sorted(self._touched.items()):
            if value is None:
                lines.append(f"unset {name}")
            else:
                lines.append(f"export {name}={shlex.quote(value)}")
        return "\n".join(lines)
