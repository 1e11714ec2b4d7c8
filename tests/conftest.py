#!/usr/bin/env python3
"""
Shared test fixtures for ssh-roads tests
"""

import json
import re
import subprocess
from typing import Any, Dict, List, Optional

import pytest

from ssh_roads.config import ServerDefinition


ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(text: str) -> str:
    """Remove colour escape sequences from captured output"""
    return ANSI_RE.sub("", text)


def make_server(**overrides: Any) -> ServerDefinition:
    """
    Helper to create ServerDefinition objects from a raw dict for tests.

    Starts from a minimal password entry and applies the overrides.
    """
    data: Dict[str, Any] = {
        "key": "a",
        "name": "Box",
        "ip": "1.2.3.4",
        "port": "22",
        "conn_type": "password",
        "user": "u",
        "comment": "",
    }
    data.update(overrides)
    return ServerDefinition.from_dict(data)


class RecordingRunner:
    """Stand-in for subprocess.run that records every launched command."""

    def __init__(self, returncode: int = 0, missing: tuple = (), raises: Optional[BaseException] = None):
        self.returncode = returncode
        self.missing = missing
        self.raises = raises
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, cmd, env=None, **kwargs):
        if cmd[0] in self.missing:
            raise FileNotFoundError(2, "No such file or directory", cmd[0])
        if self.raises is not None:
            raise self.raises
        self.calls.append({"cmd": list(cmd), "env": dict(env) if env is not None else None})
        return subprocess.CompletedProcess(cmd, self.returncode)

    @property
    def commands(self) -> List[List[str]]:
        return [call["cmd"] for call in self.calls]


@pytest.fixture
def runner(monkeypatch):
    """Patch subprocess.run with a recorder that reports success"""
    recorder = RecordingRunner()
    monkeypatch.setattr(subprocess, "run", recorder)
    return recorder


@pytest.fixture
def expect_installed(monkeypatch):
    """Pretend expect is on PATH"""
    monkeypatch.setattr(
        "ssh_roads.connectors.password.shutil.which",
        lambda name, path=None: f"/usr/bin/{name}",
    )


@pytest.fixture
def expect_missing(monkeypatch):
    """Pretend expect is not installed"""
    monkeypatch.setattr(
        "ssh_roads.connectors.password.shutil.which",
        lambda name, path=None: None if name == "expect" else f"/usr/bin/{name}",
    )


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Empty HOME and working directory so no real config or .env is picked up"""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    return home


@pytest.fixture
def servers_file(isolated_home):
    """Write a servers.json into ~/.ssh-roads and return a writer function"""

    def write(servers, filename: str = "servers.json"):
        config_dir = isolated_home / ".ssh-roads"
        config_dir.mkdir(exist_ok=True)
        path = config_dir / filename
        path.write_text(json.dumps({"servers": servers}), encoding="utf-8")
        return path

    return write
