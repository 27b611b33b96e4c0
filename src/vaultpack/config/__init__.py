"""Configuration modules for vaultpack."""

from .build_config import (
    APP_NAME,
    BuildConfiguration,
    Suite,
    create_parser,
    resolve_configuration,
)
from .toolchain_file import ToolchainSpec, ToolchainVersionReader

__all__ = [
    "APP_NAME",
    "BuildConfiguration",
    "Suite",
    "create_parser",
    "resolve_configuration",
    "ToolchainSpec",
    "ToolchainVersionReader",
]
