"""
Build orchestration for vaultpack.

This module sequences the pipeline stages for one run:
1. Validate that rust-toolchain.toml exists and read the pinned channel
2. Install Debian build prerequisites (only with --install-deps)
3. Install and select the Rust toolchain and target
4. Fetch dependencies and build the executable with cargo
5. Strip, stage and archive the executable

Stages run strictly in order. A failure ends the run in the FAILED stage and
nothing done by earlier stages is rolled back.
"""

import os
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Mapping, Optional

from ..config.build_config import BuildConfiguration
from ..config.toolchain_file import TOOLCHAIN_FILE, ToolchainVersionReader
from ..errors import VaultpackError
from ..host import Host
from ..packages.provisioner import PlatformProvisioner
from ..packages.toolchain import ToolchainManager
from .executor import BuildExecutor
from .packager import ArtifactPackager


class Stage(Enum):
    """Pipeline stages, in execution order."""

    CONFIGURING = "configuring"
    VALIDATING = "validating preconditions"
    PROVISIONING = "provisioning"
    RESOLVING_TOOLCHAIN = "resolving toolchain"
    BUILDING = "building"
    PACKAGING = "packaging"
    DONE = "done"
    FAILED = "failed"


@dataclass
class BuildResult:
    """Result of a complete pipeline run."""

    success: bool
    archive_path: Optional[Path]
    stage: Stage
    build_time: float
    message: str
    failed_stage: Optional[Stage] = None


class BuildOrchestrator:
    """
    Runs the provision, toolchain, build and package stages for one configuration.

    Example usage:
        orchestrator = BuildOrchestrator()
        result = orchestrator.run(resolve_configuration(["--suite", "bullseye"]))
        if result.success:
            print(f"Archive: {result.archive_path}")
    """

    def __init__(
        self,
        host: Optional[Host] = None,
        project_dir: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
        verbose: bool = False,
    ):
        """
        Initialize build orchestrator.

        Args:
            host: Host capability (a real Host if omitted)
            project_dir: Project root holding rust-toolchain.toml (default: cwd)
            environ: Environment for cargo (default: os.environ)
            verbose: Enable verbose output
        """
        self.host = host if host is not None else Host()
        self.project_dir = project_dir if project_dir is not None else Path.cwd()
        self.environ = os.environ if environ is None else environ
        self.verbose = verbose
        self.stage = Stage.CONFIGURING
        self.trail: List[str] = []

    def _enter(self, stage: Stage, message: str) -> None:
        self.stage = stage
        self.trail.append(message)
        print(message)

    def run(self, config: BuildConfiguration) -> BuildResult:
        """
        Execute the pipeline.

        Args:
            config: Resolved build configuration

        Returns:
            BuildResult; on failure it names the stage that failed
        """
        start_time = time.time()
        verbose_mode = self.verbose or config.verbose
        steps = 5 if config.install_deps else 4
        step = 0

        try:
            self._enter(Stage.VALIDATING, "Validating build inputs...")
            reader = ToolchainVersionReader(self.project_dir / TOOLCHAIN_FILE)
            reader.ensure_present()
            spec = reader.read()
            print(f"Using Rust toolchain {spec.channel}")
            self._print_summary(config)

            if config.install_deps:
                step += 1
                self._enter(
                    Stage.PROVISIONING,
                    f"[{step}/{steps}] Installing build prerequisites for {config.suite}...",
                )
                provisioning = PlatformProvisioner(self.host).provision(config.suite)
                if verbose_mode:
                    print(f"      Installed {len(provisioning.packages)} packages")

            step += 1
            self._enter(
                Stage.RESOLVING_TOOLCHAIN,
                f"[{step}/{steps}] Resolving Rust toolchain {spec.channel}...",
            )
            toolchain = ToolchainManager(self.host).ensure(spec, config.target)

            step += 1
            self._enter(Stage.BUILDING, f"[{step}/{steps}] Building {config.target} ({config.profile})...")
            executor = BuildExecutor(self.host, environ=self.environ, project_dir=self.project_dir)
            output = executor.build(config, toolchain)
            if verbose_mode:
                print(f"      Artifact: {output.artifact}")

            step += 1
            self._enter(Stage.PACKAGING, f"[{step}/{steps}] Packaging {config.package_name}...")
            packager = ArtifactPackager(self.host, project_dir=self.project_dir)
            package = packager.package(config, output)
            if verbose_mode:
                print(f"      Staged: {', '.join(package.staged_files)}")

            self._enter(Stage.DONE, f"Packaged artefact created at {package.archive}")
            return BuildResult(
                success=True,
                archive_path=package.archive,
                stage=Stage.DONE,
                build_time=time.time() - start_time,
                message="Build successful",
            )

        except (VaultpackError, OSError) as e:
            failed_stage = self.stage
            self.stage = Stage.FAILED
            self.trail.append(f"Failed while {failed_stage.value}: {e}")
            return BuildResult(
                success=False,
                archive_path=None,
                stage=Stage.FAILED,
                build_time=time.time() - start_time,
                message=f"Failed while {failed_stage.value}: {e}",
                failed_stage=failed_stage,
            )

    def _print_summary(self, config: BuildConfiguration) -> None:
        print(f"Target     : {config.target}")
        print(f"Profile    : {config.profile}")
        print(f"Features   : {config.features_arg}")
        print(f"Output dir : {config.out_dir}")
        print(f"Stripping  : {'yes' if config.strip else 'no'}")
