"""Host package and toolchain management for vaultpack.

This module handles installing the Debian build prerequisites and selecting
the pinned Rust toolchain.
"""

from .provisioner import PlatformProvisioner, ProvisioningResult
from .toolchain import ToolchainManager, ToolchainSelection

__all__ = [
    "PlatformProvisioner",
    "ProvisioningResult",
    "ToolchainManager",
    "ToolchainSelection",
]
