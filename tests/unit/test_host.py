"""Unit tests for the real Host against harmless local commands."""

import os
import sys
from unittest.mock import patch

import pytest

from vaultpack.errors import ExternalToolError
from vaultpack.host import Host


def test_run_success():
    result = Host().run([sys.executable, "-c", "pass"])
    assert result.returncode == 0


def test_run_failure_raises():
    with pytest.raises(ExternalToolError) as exc_info:
        Host().run([sys.executable, "-c", "import sys; sys.exit(3)"])

    assert exc_info.value.returncode == 3
    assert exc_info.value.cmd[0] == sys.executable


def test_run_failure_unchecked():
    result = Host().run([sys.executable, "-c", "import sys; sys.exit(3)"], check=False)
    assert result.returncode == 3


def test_run_passes_environment_and_cwd(tmp_path):
    script = "import os, pathlib; pathlib.Path('out.txt').write_text(os.environ['VAULTPACK_MARKER'])"

    Host().run([sys.executable, "-c", script], env={**os.environ, "VAULTPACK_MARKER": "yes"}, cwd=tmp_path)

    assert (tmp_path / "out.txt").read_text() == "yes"


def test_run_missing_executable(tmp_path):
    with pytest.raises(ExternalToolError, match="Failed to execute"):
        Host().run([str(tmp_path / "no-such-tool")])


def test_which():
    host = Host()
    assert host.which("definitely-not-a-real-tool-name") is None


def test_is_elevated_reads_effective_uid():
    with patch("vaultpack.host.psutil.Process") as mock_process:
        mock_process.return_value.uids.return_value.effective = 0
        assert Host().is_elevated() is True

        mock_process.return_value.uids.return_value.effective = 1000
        assert Host().is_elevated() is False


def test_text_files(tmp_path):
    host = Host()
    path = tmp_path / "sources.list"

    assert not host.exists(path)
    host.write_text(path, "deb http://archive.debian.org/debian buster main\n")
    assert host.exists(path)
    assert host.read_text(path).startswith("deb http://archive.debian.org")
