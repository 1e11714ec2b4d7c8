"""
Server list loader
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, Union

import yaml
from dotenv import find_dotenv, load_dotenv

from .server import ServerDefinition

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".ssh-roads"
CONFIG_FILENAME = "servers.json"
ENV_FILENAME = ".env"

YAML_SUFFIXES = (".yaml", ".yml")


class ConfigError(Exception):
    """Base class for configuration loading errors"""
    pass


class ConfigReadError(ConfigError):
    """Raised when the configuration file is missing or unreadable"""
    pass


class ConfigParseError(ConfigError):
    """Raised when the configuration file holds malformed data"""
    pass


def get_resource_path(filename: str, env: Optional[Mapping[str, str]] = None) -> Path:
    """
    Locate a resource file.

    Looks in ~/.ssh-roads/ first (global installation), then the current
    working directory. The local path is returned even if it does not exist
    so that the caller can report it.

    Args:
        filename: Name of the file to look for
        env: Optional environment mapping used to read HOME (defaults to os.environ)
    """
    env_dict = env if env is not None else os.environ
    home = env_dict.get("HOME")
    if home:
        global_path = Path(home) / CONFIG_DIR_NAME / filename
        if global_path.exists():
            return global_path

    return Path(filename)


def load_env_file(env_path: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """
    Load a .env file into os.environ without overriding existing variables.

    Args:
        env_path: Explicit .env location; resolved with get_resource_path() when omitted

    Returns:
        Path of the file that was loaded, or None if no .env file was found
    """
    path = Path(env_path) if env_path is not None else get_resource_path(ENV_FILENAME)
    if path.exists():
        load_dotenv(path)
        logger.debug(f"Loaded environment from {path}")
        return path

    found = find_dotenv(usecwd=True)
    if found:
        load_dotenv(found)
        logger.debug(f"Loaded environment from {found}")
        return Path(found)
    return None


def _parse(path: Path, content: str) -> Any:
    """Parse file content as YAML or JSON depending on the file suffix"""
    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigParseError(f"Invalid YAML in config file {path}: {e}")
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigParseError(f"Invalid JSON in config file {path}: {e}")


def load_servers(path: Optional[Union[str, Path]] = None) -> Tuple[ServerDefinition, ...]:
    """
    Load and validate all server definitions from the configuration file.

    The file holds either {"servers": [...]} or a bare list of entries.

    Args:
        path: Path to the servers file (defaults to the resolved servers.json)

    Returns:
        Server definitions in file order

    Raises:
        ConfigReadError: If the file doesn't exist or can't be read
        ConfigParseError: If the file content is invalid
    """
    config_path = Path(path) if path is not None else get_resource_path(CONFIG_FILENAME)
    logger.debug(f"Loading servers from {config_path}")

    try:
        content = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigReadError(f"Failed to read config file {config_path}: {e}")

    data = _parse(config_path, content)

    if isinstance(data, dict):
        if "servers" not in data:
            raise ConfigParseError(f"Config file {config_path} is missing the 'servers' list")
        raw_servers = data["servers"]
    else:
        raw_servers = data

    if not isinstance(raw_servers, list):
        raise ConfigParseError(f"'servers' in {config_path} must be a list of server entries")

    servers = []
    errors = []

    for idx, raw in enumerate(raw_servers):
        if not isinstance(raw, dict):
            errors.append(f"Server #{idx+1}: must be an object, got {type(raw).__name__}")
            continue

        try:
            servers.append(ServerDefinition.from_dict(raw))
        except ValueError as e:
            key = raw.get("key", f"#{idx+1}")
            errors.append(f"Server '{key}': {e}")

    if errors:
        error_msg = "Configuration validation failed:\n  - " + "\n  - ".join(errors)
        raise ConfigParseError(error_msg)

    logger.info(f"Loaded {len(servers)} server(s) from {config_path}")
    return tuple(servers)
