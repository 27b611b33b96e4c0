"""Shared fixtures: a fake Host that records commands instead of running them."""

import subprocess
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

from vaultpack.errors import ExternalToolError
from vaultpack.host import Host


class FakeHost(Host):
    """Host double for an already-provisioned (or deliberately broken) machine.

    Attributes:
        tools: Names reported as present on PATH
        elevated: Value returned by is_elevated()
        commands: Every command passed to run(), in order
        envs: Environment passed with each command
        returncodes: Exit code per command prefix, e.g. {("cargo", "build"): 101}
        files: In-memory files for read_text/write_text/exists
        on_run: Optional callback invoked with each command before it "exits"
    """

    DEFAULT_TOOLS = ("apt-get", "rustup", "cargo", "strip")

    def __init__(self, tools=DEFAULT_TOOLS, elevated: bool = True):
        self.tools = set(tools)
        self.elevated = elevated
        self.commands: List[List[str]] = []
        self.envs: List[Optional[Dict[str, str]]] = []
        self.returncodes: Dict[tuple, int] = {}
        self.files: Dict[Path, str] = {}
        self.on_run: Optional[Callable[[List[str]], None]] = None

    def which(self, tool):
        return f"/usr/bin/{tool}" if tool in self.tools else None

    def is_elevated(self):
        return self.elevated

    def run(self, cmd, env=None, check=True, cwd=None):
        cmd = list(cmd)
        self.commands.append(cmd)
        self.envs.append(None if env is None else dict(env))
        if self.on_run is not None:
            self.on_run(cmd)

        returncode = 0
        for prefix, code in self.returncodes.items():
            if tuple(cmd[: len(prefix)]) == prefix:
                returncode = code
        if check and returncode != 0:
            raise ExternalToolError(cmd, returncode)
        return subprocess.CompletedProcess(cmd, returncode)

    def exists(self, path):
        return Path(path) in self.files

    def read_text(self, path):
        return self.files[Path(path)]

    def write_text(self, path, text):
        self.files[Path(path)] = text

    def ran(self, *prefix) -> bool:
        return any(tuple(c[: len(prefix)]) == prefix for c in self.commands)


def _make_executable(path: Path, content: bytes = b"\x7fELF fake binary") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    path.chmod(0o755)
    return path


@pytest.fixture
def make_executable():
    """Write a file with the executable bit set."""
    return _make_executable


@pytest.fixture
def fake_host():
    """FakeHost with every tool present and root privileges."""
    return FakeHost()


@pytest.fixture
def host_factory():
    """Build FakeHost instances with custom tools or privileges."""
    return FakeHost


@pytest.fixture
def project_dir(tmp_path):
    """Project directory with a rust-toolchain.toml pinning 1.2.3."""
    (tmp_path / "rust-toolchain.toml").write_text(
        '[toolchain]\nchannel = "1.2.3"\ncomponents = ["rustfmt", "clippy"]\n'
    )
    return tmp_path


@pytest.fixture
def building_host(fake_host, project_dir):
    """FakeHost whose `cargo build` writes the executable where cargo would."""

    def on_run(cmd):
        if cmd[:2] != ["cargo", "build"]:
            return
        target = cmd[cmd.index("--target") + 1]
        profile = cmd[cmd.index("--profile") + 1]
        profile_dir = "debug" if profile in ("dev", "test") else profile
        _make_executable(project_dir / "target" / target / profile_dir / "vaultwarden")

    fake_host.on_run = on_run
    return fake_host
