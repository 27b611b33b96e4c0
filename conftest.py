"""
Pytest configuration for the vaultpack test suite.

This configuration enables the --full flag to run integration tests.
"""

import pytest


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--full",
        action="store_true",
        default=False,
        help="Run full test suite including integration tests (slow)",
    )


def pytest_configure(config):
    """Register markers and skip integration tests unless --full is given."""
    config.addinivalue_line(
        "markers", "integration: runs real apt-get/rustup/cargo on the host"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--full"):
        return
    skip_integration = pytest.mark.skip(reason="needs --full to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)
