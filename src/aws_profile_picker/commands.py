"""Run the external session tools."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from collections.abc import Mapping

from aws_profile_picker.exceptions import SessionCommandError

logger = logging.getLogger(__name__)


class CommandRunner:
    """Runs a session tool found on a fixed search path and returns its stdout."""

    def __init__(self, bin_path: str) -> None:
        self._bin_path = bin_path

    @property
    def bin_path(self) -> str:
        return self._bin_path

    def resolve(self, executable: str) -> str:
        """Absolute path of ``executable`` on the search path."""
        found = shutil.which(executable, path=self._bin_path)
        if found is None:
            raise SessionCommandError(f"{executable} not found in {self._bin_path}")
        return found

    def run(
        self,
        executable: str,
        args: list[str],
        env: Mapping[str, str],
        shell: bool = False,
    ) -> str:
        """Run the command and return stdout.

        Raises SessionCommandError on a missing executable, a non-zero exit or
        empty output.
        """
        path = self.resolve(executable)
        child_env = dict(env)
        child_env["PATH"] = self._bin_path

        argv = [path, *args]
        if shell:
            command: str | list[str] = shlex.join(argv)
        else:
            command = argv

        logger.debug("Running %s", command)
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                env=child_env,
                shell=shell,
            )
        except OSError as e:
            raise SessionCommandError(f"Failed to run {executable}: {e}") from e

        if result.returncode != 0:
            raise SessionCommandError(
                f"{executable} exited with {result.returncode}: {result.stderr.strip()}"
            )
        if not result.stdout.strip():
            raise SessionCommandError(f"{executable} produced no output")
        return result.stdout
