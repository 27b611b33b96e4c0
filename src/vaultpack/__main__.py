"""Allow running vaultpack with ``python -m vaultpack``."""

from vaultpack.cli import main

if __name__ == "__main__":
    main()
