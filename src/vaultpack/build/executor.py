"""Cargo build executor.

This module runs the locked dependency fetch and the release build, then
locates the produced executable.

Design:
    - OPENSSL_STATIC and CARGO_TERM_COLOR get defaults but caller values win
    - Both cargo steps run with --locked so a stale Cargo.lock fails the build
    - The artifact path is derived from (target, profile), never searched for
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

from ..config.build_config import APP_NAME, BuildConfiguration
from ..errors import ArtifactMissingError, MissingToolError
from ..host import Host
from ..packages.toolchain import ToolchainSelection

BUILD_ENV_DEFAULTS = {
    "OPENSSL_STATIC": "1",
    "CARGO_TERM_COLOR": "always",
}

# Cargo writes these profiles to a directory that differs from the profile name.
PROFILE_DIRS = {
    "dev": "debug",
    "test": "debug",
    "bench": "release",
}


@dataclass(frozen=True)
class BuildOutput:
    """Verified result of a cargo build."""

    artifact: Path


def profile_dir(profile: str) -> str:
    """Map a cargo profile name to its output directory name."""
    return PROFILE_DIRS.get(profile, profile)


def expected_artifact_path(config: BuildConfiguration) -> Path:
    """Return where cargo places the executable for this configuration."""
    return config.cargo_target_dir / config.target / profile_dir(config.profile) / APP_NAME


class BuildExecutor:
    """Invokes cargo and verifies the executable it produces."""

    def __init__(
        self,
        host: Host,
        environ: Optional[Mapping[str, str]] = None,
        project_dir: Optional[Path] = None,
    ):
        """Initialize build executor.

        Args:
            host: Host used to run cargo
            environ: Base environment for cargo (None uses os.environ)
            project_dir: Directory cargo runs in (None uses the current directory)
        """
        self.host = host
        self.environ = os.environ if environ is None else environ
        self.project_dir = project_dir

    def build_env(self) -> Dict[str, str]:
        env = dict(self.environ)
        for key, value in BUILD_ENV_DEFAULTS.items():
            env.setdefault(key, value)
        return env

    def build(self, config: BuildConfiguration, toolchain: ToolchainSelection) -> BuildOutput:
        """Fetch dependencies and build the executable.

        Args:
            config: Resolved build configuration
            toolchain: Active toolchain from ToolchainManager

        Returns:
            BuildOutput pointing at the executable

        Raises:
            MissingToolError: If cargo is not on PATH
            ExternalToolError: If cargo fetch or cargo build fails
            ArtifactMissingError: If the executable is not where cargo should put it
        """
        if self.host.which("cargo") is None:
            raise MissingToolError(
                f"cargo command not found; ensure Rust {toolchain.channel} is installed."
            )

        env = self.build_env()

        self.host.run(["cargo", "fetch", "--locked"], env=env, cwd=self.project_dir)
        self.host.run(
            [
                "cargo",
                "build",
                "--locked",
                "--target",
                config.target,
                "--profile",
                config.profile,
                "--features",
                config.features_arg,
            ],
            env=env,
            cwd=self.project_dir,
        )

        return BuildOutput(artifact=self.locate_artifact(config))

    def locate_artifact(self, config: BuildConfiguration) -> Path:
        """Return the built executable.

        Raises:
            ArtifactMissingError: If the path is not an executable file
        """
        artifact = expected_artifact_path(config)
        resolved = artifact
        if self.project_dir is not None and not artifact.is_absolute():
            resolved = self.project_dir / artifact

        if not resolved.is_file() or not os.access(resolved, os.X_OK):
            raise ArtifactMissingError(f"Expected artefact at {artifact} not found.")
        return resolved
