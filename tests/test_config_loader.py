#!/usr/bin/env python3
"""
Tests for the configuration loader and resource search path
"""

import json
import os
from pathlib import Path

import pytest

from ssh_roads.config import (
    ConfigParseError,
    ConfigReadError,
    get_resource_path,
    load_env_file,
    load_servers,
)


SERVERS = [
    {"key": "a", "name": "Box", "ip": "1.2.3.4", "port": "22", "conn_type": "password",
     "user": "u", "comment": "", "pswd": "$MYPASS"},
    {"key": "b", "name": "Other", "ip": "5.6.7.8", "port": "2222", "conn_type": "gcp",
     "user": "v", "comment": "gcp box", "gcp_project": "p", "gcp_zone": "z", "gcp_vm_name": "vm"},
]


@pytest.fixture
def clean_env(monkeypatch):
    """Make sure variables loaded from .env files are removed after the test"""
    names = ["SSH_ROADS_DOTENV_VALUE", "SSH_ROADS_PRESET"]
    for name in names:
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)
    return monkeypatch


class TestGetResourcePath:
    """Test the ~/.ssh-roads then cwd search order"""

    def test_prefers_home_directory(self, isolated_home):
        config_dir = isolated_home / ".ssh-roads"
        config_dir.mkdir()
        (config_dir / "servers.json").write_text("[]")
        Path("servers.json").write_text("[]")

        assert get_resource_path("servers.json") == config_dir / "servers.json"

    def test_falls_back_to_cwd(self, isolated_home):
        Path("servers.json").write_text("[]")
        assert get_resource_path("servers.json") == Path("servers.json")

    def test_returns_local_path_when_missing(self, isolated_home):
        path = get_resource_path("servers.json")
        assert path == Path("servers.json")
        assert not path.exists()

    def test_without_home(self, tmp_path):
        """Test an unset HOME skips the global location"""
        assert get_resource_path("servers.json", env={}) == Path("servers.json")

    def test_explicit_env_mapping(self, tmp_path):
        config_dir = tmp_path / ".ssh-roads"
        config_dir.mkdir()
        (config_dir / ".env").write_text("A=1\n")
        assert get_resource_path(".env", env={"HOME": str(tmp_path)}) == config_dir / ".env"


class TestLoadServers:
    """Test parsing the servers file"""

    def test_load_object_with_servers_list(self, servers_file):
        path = servers_file(SERVERS)
        servers = load_servers(path)

        assert isinstance(servers, tuple)
        assert [s.key for s in servers] == ["a", "b"]
        assert servers[0].password == "$MYPASS"
        assert servers[1].gcp_vm_name == "vm"

    def test_default_path_uses_search_order(self, servers_file):
        servers_file(SERVERS)
        servers = load_servers()
        assert len(servers) == 2

    def test_load_bare_list(self, tmp_path):
        path = tmp_path / "servers.json"
        path.write_text(json.dumps(SERVERS))
        assert [s.key for s in load_servers(path)] == ["a", "b"]

    def test_file_order_preserved(self, tmp_path):
        entries = [dict(SERVERS[0], key=k) for k in ["z", "m", "a"]]
        path = tmp_path / "servers.json"
        path.write_text(json.dumps({"servers": entries}))
        assert [s.key for s in load_servers(path)] == ["z", "m", "a"]

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "servers.yaml"
        path.write_text(
            "servers:\n"
            "  - key: y\n"
            "    name: Yaml box\n"
            "    ip: 10.0.0.5\n"
            "    port: 2200\n"
            "    conn_type: password\n"
            "    user: root\n"
        )
        servers = load_servers(path)
        assert servers[0].key == "y"
        assert servers[0].port == "2200"
        assert servers[0].resolved_port() == 2200

    def test_yaml_numeric_key_and_password(self, tmp_path):
        path = tmp_path / "servers.yml"
        path.write_text(
            "- key: 1\n"
            "  name: Numbered\n"
            "  ip: 10.0.0.6\n"
            "  conn_type: password\n"
            "  user: root\n"
            "  pswd: 1234\n"
        )
        servers = load_servers(path)
        assert servers[0].key == "1"
        assert servers[0].password == "1234"

    def test_missing_file(self, isolated_home):
        with pytest.raises(ConfigReadError, match="Failed to read config file"):
            load_servers()

    def test_directory_instead_of_file(self, tmp_path):
        with pytest.raises(ConfigReadError):
            load_servers(tmp_path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "servers.json"
        path.write_text("{not json")
        with pytest.raises(ConfigParseError, match="Invalid JSON"):
            load_servers(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "servers.yml"
        path.write_text("servers: [unclosed\n")
        with pytest.raises(ConfigParseError, match="Invalid YAML"):
            load_servers(path)

    def test_missing_servers_key(self, tmp_path):
        path = tmp_path / "servers.json"
        path.write_text(json.dumps({"hosts": []}))
        with pytest.raises(ConfigParseError, match="missing the 'servers' list"):
            load_servers(path)

    def test_servers_not_a_list(self, tmp_path):
        path = tmp_path / "servers.json"
        path.write_text(json.dumps({"servers": "a"}))
        with pytest.raises(ConfigParseError, match="must be a list"):
            load_servers(path)

    def test_collects_all_entry_errors(self, tmp_path):
        """Test every invalid entry is reported at once"""
        path = tmp_path / "servers.json"
        path.write_text(json.dumps({"servers": [
            {"key": "x", "name": "No ip", "conn_type": "password", "user": "u"},
            "not an object",
            SERVERS[0],
        ]}))
        with pytest.raises(ConfigParseError) as exc_info:
            load_servers(path)

        message = str(exc_info.value)
        assert "Server 'x': Server configuration missing required field 'ip'" in message
        assert "Server #2: must be an object" in message

    def test_empty_list_is_valid(self, tmp_path):
        path = tmp_path / "servers.json"
        path.write_text(json.dumps({"servers": []}))
        assert load_servers(path) == ()


class TestLoadEnvFile:
    """Test .env loading through the same search path"""

    def test_loads_env_from_home(self, isolated_home, clean_env):
        config_dir = isolated_home / ".ssh-roads"
        config_dir.mkdir()
        env_path = config_dir / ".env"
        env_path.write_text("SSH_ROADS_DOTENV_VALUE=from-home\n")

        assert load_env_file() == env_path
        assert os.environ["SSH_ROADS_DOTENV_VALUE"] == "from-home"

    def test_loads_env_from_cwd(self, isolated_home, clean_env):
        Path(".env").write_text("SSH_ROADS_DOTENV_VALUE=from-cwd\n")

        assert load_env_file() == Path(".env")
        assert os.environ["SSH_ROADS_DOTENV_VALUE"] == "from-cwd"

    def test_does_not_override_existing(self, isolated_home, clean_env):
        clean_env.setenv("SSH_ROADS_PRESET", "shell")
        Path(".env").write_text("SSH_ROADS_PRESET=dotenv\n")

        load_env_file()
        assert os.environ["SSH_ROADS_PRESET"] == "shell"

    def test_no_env_file(self, isolated_home, monkeypatch):
        monkeypatch.setattr("ssh_roads.config.loader.find_dotenv", lambda usecwd=False: "")
        assert load_env_file() is None
