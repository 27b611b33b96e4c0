"""
Build configuration for vaultpack.

Resolves the immutable BuildConfiguration from built-in defaults, command-line
options and the environment. Resolution has no side effects: an unsupported
suite or an empty feature list is rejected here, before anything is installed
or built.
"""

import argparse
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Tuple

from ..errors import ConfigurationError

APP_NAME = "vaultwarden"

DEFAULT_TARGET = "x86_64-unknown-linux-gnu"
DEFAULT_PROFILE = "release"
DEFAULT_FEATURES = ("sqlite", "mysql", "postgresql", "vendored_openssl")
DEFAULT_OUT_DIR = Path("dist")
DEFAULT_CARGO_TARGET_DIR = Path("target")


class Suite(Enum):
    """Supported Debian baselines."""

    BUSTER = "buster"
    BULLSEYE = "bullseye"

    @classmethod
    def parse(cls, value: str) -> "Suite":
        """Parse a suite name.

        Raises:
            ConfigurationError: If the suite is not supported
        """
        for suite in cls:
            if suite.value == value:
                return suite
        names = "' or '".join(s.value for s in cls)
        raise ConfigurationError(f"Unsupported suite '{value}'. Use '{names}'.")

    @property
    def is_archived(self) -> bool:
        """True for end-of-life suites served from archive.debian.org."""
        return self is Suite.BUSTER

    def __str__(self) -> str:
        return self.value


DEFAULT_SUITE = Suite.BULLSEYE


@dataclass(frozen=True)
class BuildConfiguration:
    """Fully resolved options for one pipeline run."""

    suite: Suite = DEFAULT_SUITE
    target: str = DEFAULT_TARGET
    profile: str = DEFAULT_PROFILE
    features: Tuple[str, ...] = DEFAULT_FEATURES
    out_dir: Path = DEFAULT_OUT_DIR
    strip: bool = True
    install_deps: bool = False
    verbose: bool = False
    cargo_target_dir: Path = DEFAULT_CARGO_TARGET_DIR

    @property
    def package_name(self) -> str:
        return f"{APP_NAME}-{self.target}-{self.suite.value}"

    @property
    def features_arg(self) -> str:
        return " ".join(self.features)


def parse_features(value: str) -> Tuple[str, ...]:
    """Split a whitespace-delimited feature string, dropping repeats.

    Order is kept because it is passed to cargo as given.

    Raises:
        ConfigurationError: If no feature tokens remain
    """
    features: List[str] = []
    for token in value.split():
        if token not in features:
            features.append(token)
    if not features:
        raise ConfigurationError("--features requires at least one feature name")
    return tuple(features)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the vaultpack command."""
    parser = argparse.ArgumentParser(
        prog="vaultpack",
        description=(
            "Build Vaultwarden on Debian-based hosts (10/11) with the database "
            "features enabled and package it as a tar.gz archive."
        ),
        epilog=(
            "environment variables:\n"
            "  OPENSSL_STATIC     defaults to 1 to force static OpenSSL\n"
            "  CARGO_TERM_COLOR   defaults to 'always'\n"
            "  CARGO_TARGET_DIR   respected if set; otherwise ./target is used"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--suite",
        default=DEFAULT_SUITE.value,
        metavar="{buster,bullseye}",
        help=f"Debian baseline to target (default: {DEFAULT_SUITE.value})",
    )
    parser.add_argument(
        "--target",
        default=DEFAULT_TARGET,
        help=f"Rust target triple (default: {DEFAULT_TARGET})",
    )
    parser.add_argument(
        "--profile",
        default=DEFAULT_PROFILE,
        help=f"Cargo profile to build (default: {DEFAULT_PROFILE})",
    )
    parser.add_argument(
        "--features",
        default=None,
        help=(
            "Feature list passed to cargo "
            f"(default: \"{' '.join(DEFAULT_FEATURES)}\")"
        ),
    )
    parser.add_argument(
        "--out-dir",
        type=Path,
        default=DEFAULT_OUT_DIR,
        help=f"Directory where the packaged artefact is stored (default: {DEFAULT_OUT_DIR})",
    )
    parser.add_argument(
        "--no-strip",
        action="store_true",
        help="Skip stripping the resulting binary",
    )
    parser.add_argument(
        "--install-deps",
        action="store_true",
        help="Install required Debian packages (needs root)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )
    return parser


def resolve_configuration(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> BuildConfiguration:
    """Resolve the build configuration.

    Args:
        argv: Command-line tokens without the program name (None uses sys.argv)
        environ: Environment mapping (None uses os.environ)

    Returns:
        Immutable BuildConfiguration

    Raises:
        SystemExit: On --help (code 0) or unknown options (code 2)
        ConfigurationError: If a value is not supported
    """
    if environ is None:
        environ = os.environ

    args = create_parser().parse_args(argv)

    suite = Suite.parse(args.suite)
    features = DEFAULT_FEATURES if args.features is None else parse_features(args.features)

    cargo_target_dir = environ.get("CARGO_TARGET_DIR")

    return BuildConfiguration(
        suite=suite,
        target=args.target,
        profile=args.profile,
        features=features,
        out_dir=args.out_dir,
        strip=not args.no_strip,
        install_deps=args.install_deps,
        verbose=args.verbose,
        cargo_target_dir=Path(cargo_target_dir) if cargo_target_dir else DEFAULT_CARGO_TARGET_DIR,
    )
