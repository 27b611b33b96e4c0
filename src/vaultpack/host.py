"""Host capabilities.

All side effects against the build host go through Host: locating tools on
PATH, checking privileges, running external commands and editing the few
configuration files the provisioner touches. Components receive a Host
instance so that tests can substitute a fake one for an already-provisioned
or unprivileged machine.
"""

import logging
import shlex
import subprocess
from pathlib import Path
from shutil import which
from typing import Mapping, Optional, Sequence

import psutil

from .errors import ExternalToolError


class Host:
    """Blocking access to the local machine."""

    def which(self, tool: str) -> Optional[str]:
        """Return the absolute path of ``tool`` on PATH, or None."""
        return which(tool)

    def is_elevated(self) -> bool:
        """Return True when the current process runs with effective uid 0."""
        try:
            return psutil.Process().uids().effective == 0
        except AttributeError:
            # uids() is POSIX only
            return False

    def run(
        self,
        cmd: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
        check: bool = True,
        cwd: Optional[Path] = None,
    ) -> subprocess.CompletedProcess:
        """Run a command to completion with output going to the terminal.

        Args:
            cmd: Command and arguments
            env: Full environment for the child (None inherits ours)
            check: Raise ExternalToolError on a non-zero exit
            cwd: Working directory for the child (None uses ours)

        Returns:
            The completed process

        Raises:
            ExternalToolError: If the command fails and check is True
        """
        logging.debug(f"Running: {shlex.join(cmd)}")
        try:
            result = subprocess.run(
                list(cmd),
                env=None if env is None else dict(env),
                cwd=None if cwd is None else str(cwd),
            )
        except OSError as e:
            raise ExternalToolError(cmd, -1, f"Failed to execute {cmd[0]}: {e}") from e

        logging.debug(f"Exit code {result.returncode}: {cmd[0]}")
        if check and result.returncode != 0:
            raise ExternalToolError(cmd, result.returncode)
        return result

    def exists(self, path: Path) -> bool:
        return path.exists()

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def write_text(self, path: Path, text: str) -> None:
        logging.debug(f"Writing {path}")
        path.write_text(text, encoding="utf-8")
