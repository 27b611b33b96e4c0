"""Artifact packaging.

This module turns the built executable into the distributable archive:

    <out_dir>/vaultwarden-<target>-<suite>/
        vaultwarden
        LICENSE.txt   (if present)
        README.md     (if present)
    <out_dir>/vaultwarden-<target>-<suite>.tar.gz

The staging directory is rebuilt from scratch on every run and left in place
after the archive is written.
"""

import shutil
import tarfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from ..cli_utils import ErrorFormatter
from ..config.build_config import BuildConfiguration
from ..host import Host
from .executor import BuildOutput

ANCILLARY_FILES = ("LICENSE.txt", "README.md")


@dataclass(frozen=True)
class PackageResult:
    """Result of packaging the executable."""

    archive: Path
    package_dir: Path
    staged_files: Tuple[str, ...]
    stripped: bool


class ArtifactPackager:
    """Strips, stages and archives the executable."""

    def __init__(self, host: Host, project_dir: Optional[Path] = None, show_progress: bool = True):
        """Initialize artifact packager.

        Args:
            host: Host used to run strip
            project_dir: Directory holding the ancillary files and the
                default output directory (None uses the current directory)
            show_progress: Whether to print packaging progress
        """
        self.host = host
        self.project_dir = project_dir if project_dir is not None else Path(".")
        self.show_progress = show_progress

    def package(self, config: BuildConfiguration, output: BuildOutput) -> PackageResult:
        """Package the build output.

        Args:
            config: Resolved build configuration
            output: Verified build output

        Returns:
            PackageResult with the archive path

        Raises:
            ExternalToolError: If strip is present but fails
        """
        stripped = False
        if config.strip:
            stripped = self.strip_artifact(output.artifact)

        out_dir = config.out_dir
        if not out_dir.is_absolute():
            out_dir = self.project_dir / out_dir
        out_dir.mkdir(parents=True, exist_ok=True)

        package_dir = out_dir / config.package_name
        staged = self.stage(package_dir, output.artifact)
        archive = self.create_archive(package_dir)

        return PackageResult(
            archive=archive,
            package_dir=package_dir,
            staged_files=tuple(staged),
            stripped=stripped,
        )

    def strip_artifact(self, artifact: Path) -> bool:
        """Remove debug symbols in place.

        Returns:
            True if strip ran, False if it is not installed
        """
        if self.host.which("strip") is None:
            ErrorFormatter.print_warning("strip not available; skipping stripping step.")
            return False

        if self.show_progress:
            print(f"Stripping {artifact.name}...")
        self.host.run(["strip", str(artifact)])
        return True

    def stage(self, package_dir: Path, artifact: Path) -> List[str]:
        """Recreate the staging directory and copy the package contents into it.

        Returns:
            Names of the staged files
        """
        if package_dir.exists():
            shutil.rmtree(package_dir)
        package_dir.mkdir(parents=True)

        shutil.copy2(artifact, package_dir / artifact.name)
        staged = [artifact.name]

        for name in ANCILLARY_FILES:
            source = self.project_dir / name
            if source.is_file():
                shutil.copy2(source, package_dir / name)
                staged.append(name)

        return staged

    def create_archive(self, package_dir: Path) -> Path:
        """Write <package_dir>.tar.gz next to the staging directory."""
        archive = package_dir.parent / f"{package_dir.name}.tar.gz"

        if self.show_progress:
            print(f"Creating {archive.name}...")

        with tarfile.open(archive, "w:gz") as tar:
            tar.add(package_dir, arcname=package_dir.name)

        return archive
