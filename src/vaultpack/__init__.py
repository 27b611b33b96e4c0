"""vaultpack - build and package Vaultwarden for Debian baselines."""

__version__ = "0.1.0"
