"""Debian build prerequisite provisioning.

Installs the native packages needed to compile Vaultwarden with apt-get. For
the archived buster suite the apt sources are first pointed at
archive.debian.org, which requires root; without it the retarget is skipped
with a warning and the operator is expected to provide the packages.

The archive mirror's Release files are expired, so the retargeted lines carry
their own ``check-valid-until=no allow-insecure=yes`` options. No apt-wide
setting is changed and other repositories keep their normal checks.
"""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from ..cli_utils import ErrorFormatter
from ..config.build_config import Suite
from ..errors import MissingToolError
from ..host import Host

# deb/deb-src, optional [options], URI, remainder (suite and components)
_SOURCE_LINE_RE = re.compile(
    r"^(?P<indent>\s*)(?P<type>deb(?:-src)?)"
    r"(?:\s+\[(?P<options>[^\]]*)\])?"
    r"\s+(?P<uri>\S+)(?P<rest>.*)$"
)


@dataclass(frozen=True)
class ProvisioningResult:
    """Outcome of a provisioning run."""

    retargeted: bool
    packages: Tuple[str, ...]


class PlatformProvisioner:
    """Installs build prerequisites through apt-get."""

    SOURCES_LIST = Path("/etc/apt/sources.list")

    ARCHIVE_MIRROR = "http://archive.debian.org/"

    # (host/path without scheme, archive URL); both http and https are matched
    ARCHIVE_REWRITES = (
        ("deb.debian.org/debian-security", "http://archive.debian.org/debian-security"),
        ("deb.debian.org/debian", "http://archive.debian.org/debian"),
        ("security.debian.org/debian-security", "http://archive.debian.org/debian-security"),
    )

    ARCHIVE_SOURCE_OPTIONS = (
        ("check-valid-until", "no"),
        ("allow-insecure", "yes"),
    )

    PACKAGES = (
        "build-essential",
        "clang",
        "git",
        "pkg-config",
        "libpq-dev",
        "libmariadb-dev",
        "libssl-dev",
        "zlib1g-dev",
        "ca-certificates",
    )

    def __init__(self, host: Host, show_progress: bool = True):
        self.host = host
        self.show_progress = show_progress

    def provision(self, suite: Suite) -> ProvisioningResult:
        """Retarget sources if needed, refresh the index and install packages.

        Args:
            suite: Debian baseline being targeted

        Returns:
            ProvisioningResult

        Raises:
            MissingToolError: If apt-get is not available
            ExternalToolError: If any apt-get invocation fails
        """
        if self.host.which("apt-get") is None:
            raise MissingToolError("--install-deps requested but apt-get not available.")

        retargeted = self.configure_archive_sources(suite)
        self.update_index()
        self.install_packages()

        return ProvisioningResult(retargeted=retargeted, packages=self.PACKAGES)

    def configure_archive_sources(self, suite: Suite) -> bool:
        """Point apt at archive.debian.org for end-of-life suites.

        Returns:
            True if the sources were retargeted
        """
        if not suite.is_archived:
            return False

        if not self.host.is_elevated():
            ErrorFormatter.print_warning(
                f"Warning: unable to retarget apt sources for {suite} without root privileges.\n"
                "Install dependencies manually or rerun with elevated rights."
            )
            return False

        if not self.host.exists(self.SOURCES_LIST):
            logging.info(f"{self.SOURCES_LIST} not present; leaving sources untouched")
            return False

        original = self.host.read_text(self.SOURCES_LIST)
        rewritten = self.rewrite_sources(original)
        if rewritten != original:
            self.host.write_text(self.SOURCES_LIST, rewritten)

        if self.show_progress:
            print(f"Retargeted apt sources for {suite} to archive.debian.org")
        return True

    @classmethod
    def rewrite_sources(cls, text: str) -> str:
        """Rewrite deb.debian.org/security.debian.org lines to the archive mirror.

        Every line that ends up on archive.debian.org gets the per-source
        options that disable the Release freshness and insecure-repository
        checks for that line only. Other lines, comments included, are left
        as they are.
        """
        return "\n".join(cls._rewrite_line(line) for line in text.split("\n"))

    @classmethod
    def _rewrite_line(cls, line: str) -> str:
        match = _SOURCE_LINE_RE.match(line)
        if match is None:
            return line

        uri = match.group("uri")
        for suffix, replacement in cls.ARCHIVE_REWRITES:
            prefixes = [scheme + suffix for scheme in ("https://", "http://")]
            prefix = next((p for p in prefixes if uri.startswith(p)), None)
            if prefix is not None:
                uri = replacement + uri[len(prefix):]
                break

        if not uri.startswith(cls.ARCHIVE_MIRROR):
            return line

        relaxed = {key for key, _ in cls.ARCHIVE_SOURCE_OPTIONS}
        options = [
            opt for opt in (match.group("options") or "").split()
            if opt.split("=", 1)[0] not in relaxed
        ]
        options.extend(f"{key}={value}" for key, value in cls.ARCHIVE_SOURCE_OPTIONS)

        head = match.group("indent") + match.group("type")
        return f"{head} [{' '.join(options)}] {uri}{match.group('rest')}"

    def update_index(self) -> None:
        self.host.run(["apt-get", "update"])

    def install_packages(self, env: Optional[dict] = None) -> None:
        if self.show_progress:
            print("Installing build prerequisites...")

        install_env = dict(os.environ if env is None else env)
        install_env["DEBIAN_FRONTEND"] = "noninteractive"

        cmd = ["apt-get", "install", "-y", "--no-install-recommends"]
        cmd.extend(self.PACKAGES)
        self.host.run(cmd, env=install_env)
