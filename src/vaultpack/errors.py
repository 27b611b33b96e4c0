"""Error types for vaultpack.

Every failure that should stop the pipeline derives from VaultpackError so the
orchestrator can turn it into a failed BuildResult. Running without root for
the archived-suite retarget is not an error and has no class here; it is
reported as a warning.
"""

from typing import Optional, Sequence


class VaultpackError(Exception):
    """Base class for fatal pipeline errors."""

    pass


class ConfigurationError(VaultpackError):
    """Raised for unsupported options or a missing/invalid toolchain pin."""

    pass


class MissingToolError(VaultpackError):
    """Raised when a required host tool (apt-get, rustup, cargo) is absent."""

    pass


class ExternalToolError(VaultpackError):
    """Raised when a delegated command exits with a non-zero status."""

    def __init__(self, cmd: Sequence[str], returncode: int, message: Optional[str] = None):
        self.cmd = list(cmd)
        self.returncode = returncode
        if message is None:
            message = f"Command failed with exit code {returncode}: {' '.join(self.cmd)}"
        super().__init__(message)


class ArtifactMissingError(VaultpackError):
    """Raised when the build finished but the expected executable is absent."""

    pass
