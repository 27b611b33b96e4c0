"""
Build pipeline components for vaultpack.

This module provides:
- Cargo invocation and artifact lookup
- Stripping, staging and archiving the executable
- Stage sequencing
"""

from .executor import BuildExecutor, BuildOutput, expected_artifact_path
from .orchestrator import BuildOrchestrator, BuildResult, Stage
from .packager import ArtifactPackager, PackageResult

__all__ = [
    "ArtifactPackager",
    "BuildExecutor",
    "BuildOrchestrator",
    "BuildOutput",
    "BuildResult",
    "PackageResult",
    "Stage",
    "expected_artifact_path",
]
