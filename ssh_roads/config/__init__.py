"""
Configuration module for server definitions
"""

from .loader import (
    ConfigError,
    ConfigParseError,
    ConfigReadError,
    get_resource_path,
    load_env_file,
    load_servers,
)
from .server import ConnType, ServerDefinition, display_address, resolve_port, resolve_value

__all__ = [
    "ConfigError",
    "ConfigParseError",
    "ConfigReadError",
    "ConnType",
    "ServerDefinition",
    "display_address",
    "get_resource_path",
    "load_env_file",
    "load_servers",
    "resolve_port",
    "resolve_value",
]
