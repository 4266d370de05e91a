"""Central selection coordinator."""

from __future__ import annotations

import logging
from collections.abc import Callable

from aws_profile_picker.activator import SessionActivator
from aws_profile_picker.backends import BACKEND_REGISTRY, create_backend, get_backend_class
from aws_profile_picker.backends.base import SessionBackend
from aws_profile_picker.commands import CommandRunner
from aws_profile_picker.config import AuthMethod, ProfileDescriptor
from aws_profile_picker.config_reader import ConfigReader
from aws_profile_picker.environment import PROFILE, REGION, EnvironmentState
from aws_profile_picker.exceptions import UnknownProfileError
from aws_profile_picker.state import SelectionCache

logger = logging.getLogger(__name__)


class ProfileSelector:
    """Keeps the selected profile, the live sessions and the environment consistent.

    Three triggers move the selector: a new profile list
    (:meth:`set_profile_options` / :meth:`refresh`), a new selection
    (:meth:`select`) and a new authentication method (:meth:`set_method`).
    Each trigger that changes the effective state runs one reconciliation pass,
    which rewrites the environment and then notifies every listener once.
    """

    def __init__(
        self,
        reader: ConfigReader,
        cache: SelectionCache,
        runner: CommandRunner,
        env: EnvironmentState,
        method: AuthMethod = AuthMethod.NONE,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.reader = reader
        self.cache = cache
        self.runner = runner
        self.env = env
        self._method = AuthMethod(method)
        self._backend = create_backend(self._method, runner)
        self._options: list[ProfileDescriptor] = []
        self._active_sessions: list[str] = []
        self._listeners: list[Callable[[], None]] = []
        if on_change is not None:
            self._listeners.append(on_change)

    @property
    def method(self) -> AuthMethod:
        return self._method

    @property
    def backend(self) -> SessionBackend:
        return self._backend

    @property
    def options(self) -> list[ProfileDescriptor]:
        return list(self._options)

    @property
    def active_sessions(self) -> list[str]:
        return list(self._active_sessions)

    @property
    def selected_profile(self) -> str | None:
        return self.cache.get()

    def subscribe(self, listener: Callable[[], None]) -> None:
        """Call ``listener`` after every reconciliation pass."""
        self._listeners.append(listener)

    def get_profile(self, name: str | None) -> ProfileDescriptor | None:
        return next((p for p in self._options if p.name == name), None)

    def has_session(self, name: str | None) -> bool:
        return (
            name is not None
            and self._method is not AuthMethod.NONE
            and name in self._active_sessions
        )

    # -- triggers ---------------------------------------------------------

    def probe(self) -> None:
        """Load profiles and sessions without touching the environment."""
        self._apply_options(self.reader.load())

    def refresh(self) -> None:
        """Reload profiles from disk, re-probe sessions and reconcile."""
        self._apply_options(self.reader.load())
        self._reconcile()

    def set_profile_options(self, options: list[ProfileDescriptor]) -> None:
        """Replace the profile list; reconcile if the effective selection moved."""
        before = (self.selected_profile, self.has_session(self.selected_profile))
        self._apply_options(options)
        after = (self.selected_profile, self.has_session(self.selected_profile))
        if before != after:
            self._reconcile()

    def select(self, name: str) -> None:
        """Select ``name`` and reconcile. Re-selecting refreshes the session."""
        if self.get_profile(name) is None:
            raise UnknownProfileError(
                f"Unknown profile {name!r}. Available: {[p.name for p in self._options]}"
            )
        self.cache.set(name)
        self._reconcile()

    def set_method(self, method: AuthMethod) -> None:
        """Switch the session tool, dropping whatever the previous one activated."""
        method = AuthMethod(method)
        if method is self._method:
            return
        logger.info("Switching session method %s -> %s", self._method.value, method.value)
        self._method = method
        self._backend = create_backend(method, self.runner)
        self._drop_session()
        self._probe_sessions()
        self._reconcile()

    # -- internals --------------------------------------------------------

    def _apply_options(self, options: list[ProfileDescriptor]) -> None:
        self._options = list(options)
        selected = self.selected_profile
        if selected is None or self.get_profile(selected) is None:
            repaired = self._options[0].name if self._options else None
            if repaired != selected:
                logger.info("Selected profile %r is not available, using %r", selected, repaired)
                self.cache.set(repaired)
        self._probe_sessions()

    def _probe_sessions(self) -> None:
        self._active_sessions = self._backend.list_active_sessions(self._options, self.env)

    def _notify(self) -> None:
        for listener in self._listeners:
            listener()

    def _drop_session(self) -> None:
        # Session variables in the environment belong to whichever tool set a marker
        owners = [
            backend_cls
            for backend_cls in map(get_backend_class, BACKEND_REGISTRY)
            if backend_cls.marker and self.env.get(backend_cls.marker)
        ]
        self.env.clear_session_vars()
        self.env.clear_markers()
        if owners:
            self.env.clear_credentials()
        for backend_cls in owners:
            for name in backend_cls.owned_vars:
                self.env.unset(name)

    def _reconcile(self) -> None:
        profile = self.selected_profile
        logger.debug("Reconciling environment for %r (%s)", profile, self._method.value)

        self._drop_session()
        self.env.unset(REGION)

        applied = False
        if self.has_session(profile):
            activator = SessionActivator(self._backend, self.env)
            applied = activator.activate(
                profile, on_update=lambda: logger.debug("Session credentials applied for %s", profile)
            )

        if profile and not applied:
            self.env.set(PROFILE, profile)
        else:
            self.env.unset(PROFILE)

        descriptor = self.get_profile(profile)
        if descriptor is not None and descriptor.region:
            self.env.set(REGION, descriptor.region)

        self._notify()
