"""Session backend registry and metadata."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from aws_profile_picker.config import AuthMethod

if TYPE_CHECKING:
    from aws_profile_picker.backends.base import SessionBackend
    from aws_profile_picker.commands import CommandRunner


@dataclass
class BackendMeta:
    """Metadata about a session backend."""

    description: str
    backend_class: str  # Dotted path for lazy loading
    module: str


BACKEND_REGISTRY: dict[AuthMethod, BackendMeta] = {
    AuthMethod.VAULT: BackendMeta(
        description="aws-vault sessions (exec --json credentials)",
        backend_class="VaultBackend",
        module="aws_profile_picker.backends.vault",
    ),
    AuthMethod.SSO: BackendMeta(
        description="aws-sso sessions (eval export statements)",
        backend_class="SsoBackend",
        module="aws_profile_picker.backends.sso",
    ),
    AuthMethod.NONE: BackendMeta(
        description="No session tool, profiles are used as configured",
        backend_class="NoopBackend",
        module="aws_profile_picker.backends.noop",
    ),
}


def get_backend_class(method: AuthMethod) -> type[SessionBackend]:
    """Lazily import and return the backend class for a method."""
    import importlib

    meta = BACKEND_REGISTRY[AuthMethod(method)]
    module = importlib.import_module(meta.module)
    return getattr(module, meta.backend_class)


def create_backend(method: AuthMethod, runner: CommandRunner) -> SessionBackend:
    return get_backend_class(method)(runner)
