"""
Setup file.
"""

from setuptools import find_packages, setup

KEYWORDS = "vaultwarden debian cargo rust build packaging release toolchain"


if __name__ == "__main__":
    setup(
        name="vaultpack",
        version="0.1.0",
        description="Build and package Vaultwarden binaries for Debian buster/bullseye",
        keywords=KEYWORDS,
        python_requires=">=3.9",
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        install_requires=["psutil"],
        extras_require={"test": ["pytest"]},
        entry_points={"console_scripts": ["vaultpack = vaultpack.cli:main"]},
        include_package_data=True)
