#!/usr/bin/env python3
"""Validate the ssh-roads servers file"""

import os
import sys
from collections import Counter
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from dotenv import dotenv_values

from ..config import ConfigError, ConnType, ServerDefinition, get_resource_path, load_servers
from ..config.loader import CONFIG_FILENAME, ENV_FILENAME
from ..config.server import PLACEHOLDER_PREFIX

PLACEHOLDER_FIELDS = ("name", "ip", "port", "user", "password", "gcp_project", "gcp_zone", "gcp_vm_name")
GCP_FIELDS = ("gcp_project", "gcp_zone", "gcp_vm_name")


def check_env_var(
    var_name: str,
    env: Optional[Mapping[str, str]] = None,
    dotenv: Optional[Dict[str, Optional[str]]] = None,
) -> Tuple[bool, Optional[str]]:
    """Check if environment variable exists in the shell or .env"""
    env_dict = env if env is not None else os.environ
    if var_name in env_dict:
        return True, "shell"
    if dotenv and dotenv.get(var_name) is not None:
        return True, ".env"
    return False, None


def find_duplicate_keys(servers: List[ServerDefinition]) -> List[str]:
    """Keys used by more than one server; only the first of each is reachable"""
    counts = Counter(server.key for server in servers)
    return [key for key, count in counts.items() if count > 1]


def check_server(
    server: ServerDefinition,
    env: Optional[Mapping[str, str]] = None,
    dotenv: Optional[Dict[str, Optional[str]]] = None,
) -> Tuple[List[str], List[str]]:
    """Return (errors, warnings) for a single server definition"""
    errors = []
    warnings = []

    conn_type = server.connection_type
    if conn_type is None:
        supported = ", ".join(t.value for t in ConnType)
        errors.append(f"Unknown connection type: {server.conn_type} (must be one of: {supported})")
    elif conn_type == ConnType.PASSWORD:
        if server.password is None:
            warnings.append("No 'pswd' set - an empty password will be sent")
    elif conn_type == ConnType.GCP:
        for field in GCP_FIELDS:
            if not getattr(server, field):
                warnings.append(f"Missing '{field}' for gcp connection")

    for field in PLACEHOLDER_FIELDS:
        value = getattr(server, field)
        if not value or not value.startswith(PLACEHOLDER_PREFIX):
            continue
        var_name = value[len(PLACEHOLDER_PREFIX):]
        exists, location = check_env_var(var_name, env, dotenv)
        if exists:
            warnings.append(f"'{field}' will be read from {var_name} ({location})")
        else:
            warnings.append(f"'{field}' references missing environment variable: {var_name}")

    return errors, warnings


def validate_config(config_path: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> bool:
    """Validate configuration file and report issues"""
    path = Path(config_path) if config_path else get_resource_path(CONFIG_FILENAME, env)

    print(f"Validating {path}...")
    print("-" * 50)

    env_path = get_resource_path(ENV_FILENAME, env)
    dotenv = dotenv_values(env_path) if env_path.exists() else {}

    try:
        servers = list(load_servers(path))
    except ConfigError as e:
        print(f"❌ {e}")
        return False

    if not servers:
        print("❌ No servers found in configuration")
        return False

    print(f"✅ Found {len(servers)} server(s)")
    print()

    has_errors = False

    duplicates = find_duplicate_keys(servers)
    for key in duplicates:
        print(f"⚠️  Duplicate key '{key}' - only the first entry can be selected")
    if duplicates:
        print()

    for server in servers:
        print(f"Server: {server.key} ({server.name})")
        errors, warnings = check_server(server, env, dotenv)

        if errors:
            has_errors = True
            for error in errors:
                print(f"  ❌ {error}")
        else:
            print("  ✅ Valid configuration")

        for warning in warnings:
            print(f"  ⚠️  {warning}")

        print()

    if has_errors:
        print("❌ Configuration has errors")
        return False

    print("✅ Configuration is valid")
    return True


def main():
    """Main entry point"""
    import argparse

    parser = argparse.ArgumentParser(description="Validate ssh-roads server configuration")
    parser.add_argument(
        "config",
        nargs="?",
        default=None,
        help="Path to servers file (default: ~/.ssh-roads/servers.json or ./servers.json)"
    )

    args = parser.parse_args()

    success = validate_config(args.config)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
