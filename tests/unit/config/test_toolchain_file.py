"""Unit tests for reading the rust-toolchain.toml pin."""

import pytest

from vaultpack.config import ToolchainVersionReader
from vaultpack.errors import ConfigurationError


def test_reads_channel(tmp_path):
    path = tmp_path / "rust-toolchain.toml"
    path.write_text('[toolchain]\nchannel = "1.2.3"\n')

    spec = ToolchainVersionReader(path).read()

    assert spec.channel == "1.2.3"
    assert spec.source == path


def test_first_match_wins(tmp_path):
    path = tmp_path / "rust-toolchain.toml"
    path.write_text('channel = "1.75.0"\nchannel = "nightly"\n')

    assert ToolchainVersionReader(path).read().channel == "1.75.0"


def test_whitespace_around_equals(tmp_path):
    path = tmp_path / "rust-toolchain.toml"
    path.write_text('[toolchain]\nchannel="stable"\n')

    assert ToolchainVersionReader(path).read().channel == "stable"


def test_indented_channel_is_ignored(tmp_path):
    path = tmp_path / "rust-toolchain.toml"
    path.write_text('[toolchain]\n  channel = "1.2.3"\n')

    with pytest.raises(ConfigurationError, match="Unable to determine"):
        ToolchainVersionReader(path).read()


def test_no_channel_raises(tmp_path):
    path = tmp_path / "rust-toolchain.toml"
    path.write_text('[toolchain]\ncomponents = ["clippy"]\n')

    with pytest.raises(ConfigurationError, match="Unable to determine Rust toolchain version"):
        ToolchainVersionReader(path).read()


def test_empty_channel_raises(tmp_path):
    path = tmp_path / "rust-toolchain.toml"
    path.write_text('channel = ""\n')

    with pytest.raises(ConfigurationError):
        ToolchainVersionReader(path).read()


def test_missing_file_raises(tmp_path):
    reader = ToolchainVersionReader(tmp_path / "rust-toolchain.toml")

    with pytest.raises(ConfigurationError, match="not found; run from the project root"):
        reader.ensure_present()


def test_read_does_not_repeat_presence_check(tmp_path):
    reader = ToolchainVersionReader(tmp_path / "rust-toolchain.toml")

    with pytest.raises(FileNotFoundError):
        reader.read()
