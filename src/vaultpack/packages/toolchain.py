"""Rust toolchain management.

This module makes the pinned Rust toolchain the active rustup default and adds
the requested target architecture to it.
"""

from dataclasses import dataclass

from ..cli_utils import ErrorFormatter
from ..config.toolchain_file import ToolchainSpec
from ..errors import MissingToolError
from ..host import Host


@dataclass(frozen=True)
class ToolchainSelection:
    """Toolchain that is active after ToolchainManager.ensure()."""

    channel: str
    target: str
    target_added: bool


class ToolchainManager:
    """Installs and selects the pinned toolchain through rustup."""

    def __init__(self, host: Host, show_progress: bool = True):
        self.host = host
        self.show_progress = show_progress

    def ensure(self, spec: ToolchainSpec, target: str) -> ToolchainSelection:
        """Install the toolchain with the minimal profile and make it default.

        Safe to call when the toolchain is already installed and active.

        Args:
            spec: Pinned toolchain
            target: Rust target triple to add

        Returns:
            ToolchainSelection

        Raises:
            MissingToolError: If rustup is not on PATH
            ExternalToolError: If installing or selecting the toolchain fails
        """
        if self.host.which("rustup") is None:
            raise MissingToolError(
                "rustup is required but not found in PATH.\n"
                f"Install Rust toolchain {spec.channel} before running vaultpack."
            )

        if self.show_progress:
            print(f"Ensuring Rust toolchain {spec.channel}...")

        self.host.run(["rustup", "toolchain", "install", spec.channel, "--profile", "minimal"])
        self.host.run(["rustup", "default", spec.channel])

        # A target that cannot be added is left for cargo build to report.
        result = self.host.run(["rustup", "target", "add", target], check=False)
        target_added = result.returncode == 0
        if not target_added:
            ErrorFormatter.print_warning(
                f"Warning: 'rustup target add {target}' failed (exit code {result.returncode}); "
                "continuing with the installed targets."
            )

        return ToolchainSelection(channel=spec.channel, target=target, target_added=target_added)
