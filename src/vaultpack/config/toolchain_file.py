"""Reader for the rust-toolchain.toml pin.

Only the ``channel = "..."`` line matters; the rest of the file is ignored.
"""

import re
from dataclasses import dataclass
from pathlib import Path

from ..errors import ConfigurationError

TOOLCHAIN_FILE = Path("rust-toolchain.toml")

_CHANNEL_RE = re.compile(r'^channel\s*=\s*"(.*)"', re.MULTILINE)


@dataclass(frozen=True)
class ToolchainSpec:
    """Pinned toolchain channel and the file it was read from."""

    channel: str
    source: Path


class ToolchainVersionReader:
    """Extracts the pinned Rust toolchain channel."""

    def __init__(self, path: Path = TOOLCHAIN_FILE):
        self.path = path

    def ensure_present(self) -> None:
        """Fail fast when the pin file is missing.

        Raises:
            ConfigurationError: If the file does not exist
        """
        if not self.path.is_file():
            raise ConfigurationError(
                f"{self.path.name} not found; run from the project root."
            )

    def read(self) -> ToolchainSpec:
        """Read the first channel entry.

        Call ensure_present() first for the configuration error on a missing
        file; here a missing file surfaces as the OSError from reading it.

        Returns:
            ToolchainSpec with a non-empty channel

        Raises:
            ConfigurationError: If the file has no channel value
            OSError: If the file cannot be read
        """
        text = self.path.read_text(encoding="utf-8")

        match = _CHANNEL_RE.search(text)
        if match is None or not match.group(1):
            raise ConfigurationError(
                f"Unable to determine Rust toolchain version from {self.path.name}"
            )
        return ToolchainSpec(channel=match.group(1), source=self.path)
