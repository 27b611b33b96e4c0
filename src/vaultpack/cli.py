"""
Command-line interface for vaultpack.

This module provides the `vaultpack` CLI tool that builds Vaultwarden for a
Debian baseline and packages it as a tar.gz archive.
"""

import sys
from typing import Optional, Sequence

from vaultpack import __version__
from vaultpack.build import BuildOrchestrator
from vaultpack.cli_utils import ErrorFormatter, configure_logging
from vaultpack.config import BuildConfiguration, resolve_configuration
from vaultpack.errors import ConfigurationError


def build_command(config: BuildConfiguration) -> None:
    """Build and package Vaultwarden.

    Examples:
        vaultpack                                  # bullseye, x86_64, release
        vaultpack --suite buster --install-deps    # provision a buster host first
        vaultpack --features "sqlite postgresql"   # custom feature list
        vaultpack --no-strip --out-dir out         # keep symbols, write to ./out
    """
    print(f"vaultpack v{__version__}")
    print()

    try:
        orchestrator = BuildOrchestrator(verbose=config.verbose)
        result = orchestrator.run(config)

        if result.success:
            ErrorFormatter.print_success("Build successful!")
            print()
            print(f"Archive: {result.archive_path}")
            print(f"Build time: {result.build_time:.2f}s")
            sys.exit(0)
        else:
            ErrorFormatter.print_error("Build failed!", result.message)
            sys.exit(1)

    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, config.verbose)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """vaultpack - reproducible Vaultwarden builds for Debian."""
    try:
        config = resolve_configuration(argv)
    except ConfigurationError as e:
        ErrorFormatter.print_error("Invalid configuration", str(e))
        sys.exit(1)

    configure_logging(config.verbose)
    build_command(config)


if __name__ == "__main__":
    main()
