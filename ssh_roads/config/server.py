"""
Server definition classes with placeholder resolution
"""

import logging
import os
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional


logger = logging.getLogger(__name__)

# Default values
DEFAULT_SSH_PORT = 22
PLACEHOLDER_PREFIX = "$"

_PORT_RE = re.compile(r"\+?[0-9]+")

# Alternative field names accepted in the servers file, mapped to attribute names
FIELD_ALIASES = {
    "connType": "conn_type",
    "pswd": "password",
    "gcpProject": "gcp_project",
    "gcpZone": "gcp_zone",
    "gcpVmName": "gcp_vm_name",
}

REQUIRED_FIELDS = ("key", "name", "ip", "user", "conn_type")
OPTIONAL_FIELDS = ("comment", "password", "gcp_project", "gcp_zone", "gcp_vm_name")
NUMERIC_TEXT_FIELDS = ("key", "password")


class ConnType(Enum):
    """Supported connection types"""
    PASSWORD = "password"
    GCP = "gcp"

    @classmethod
    def parse(cls, value: str) -> Optional["ConnType"]:
        """Return the matching member, or None for an unsupported type"""
        try:
            return cls(value)
        except ValueError:
            return None


def resolve_value(value: str, env: Optional[Mapping[str, str]] = None) -> str:
    """
    Resolve a `$NAME` placeholder against the environment.

    A missing variable is not an error: a warning is logged and the
    placeholder text is returned as-is so the entry can still be displayed.

    Args:
        value: Raw field value
        env: Optional environment mapping (defaults to os.environ)
    """
    if not value.startswith(PLACEHOLDER_PREFIX):
        return value

    env_dict = env if env is not None else os.environ
    var_name = value[len(PLACEHOLDER_PREFIX):]
    resolved = env_dict.get(var_name)
    if resolved is None:
        logger.warning(f"Environment variable {var_name} not found")
        return value
    return resolved


def resolve_port(value: Optional[str], env: Optional[Mapping[str, str]] = None) -> int:
    """Resolve a port value, falling back to 22 when it is missing or unparseable"""
    if value is None:
        return DEFAULT_SSH_PORT
    resolved = resolve_value(value, env)
    if not _PORT_RE.fullmatch(resolved):
        return DEFAULT_SSH_PORT
    port = int(resolved)
    if port > 65535:
        return DEFAULT_SSH_PORT
    return port


def display_address(host: str, port: int) -> str:
    """Render `host` for the default SSH port, `host:port` otherwise"""
    if port == DEFAULT_SSH_PORT:
        return host
    return f"{host}:{port}"


@dataclass(frozen=True)
class ServerDefinition:
    """One configured remote target"""
    key: str
    name: str
    ip: str
    user: str
    conn_type: str
    port: str = str(DEFAULT_SSH_PORT)
    comment: str = ""
    password: Optional[str] = None
    gcp_project: Optional[str] = None
    gcp_zone: Optional[str] = None
    gcp_vm_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServerDefinition":
        """
        Create ServerDefinition from a raw dict with validation.

        Both the snake_case field names and their camelCase aliases are
        accepted. The connection type is not checked here; unsupported
        types are rejected when connecting.

        Raises:
            ValueError: If a required field is missing or a field has the wrong type
        """
        fields: Dict[str, Any] = {}
        for raw_name, value in data.items():
            name = FIELD_ALIASES.get(raw_name, raw_name)
            if name in fields:
                raise ValueError(f"Field '{name}' is given more than once")
            fields[name] = value

        # YAML reads unquoted `key: 1` and `pswd: 1234` as integers
        for name in NUMERIC_TEXT_FIELDS:
            value = fields.get(name)
            if isinstance(value, int) and not isinstance(value, bool):
                fields[name] = str(value)

        for name in REQUIRED_FIELDS:
            if name not in fields or fields[name] is None:
                raise ValueError(f"Server configuration missing required field '{name}'")
            if not isinstance(fields[name], str):
                raise ValueError(f"Field '{name}' must be a string, got {type(fields[name]).__name__}")

        port = fields.get("port")
        if port is None:
            port = str(DEFAULT_SSH_PORT)
        elif isinstance(port, int) and not isinstance(port, bool):
            port = str(port)
        elif not isinstance(port, str):
            raise ValueError(f"Field 'port' must be a string or integer, got {type(port).__name__}")

        optional: Dict[str, Any] = {}
        for name in OPTIONAL_FIELDS:
            value = fields.get(name)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"Field '{name}' must be a string, got {type(value).__name__}")
            optional[name] = value

        return cls(
            key=fields["key"],
            name=fields["name"],
            ip=fields["ip"],
            user=fields["user"],
            conn_type=fields["conn_type"],
            port=port,
            comment=optional["comment"] or "",
            password=optional["password"],
            gcp_project=optional["gcp_project"],
            gcp_zone=optional["gcp_zone"],
            gcp_vm_name=optional["gcp_vm_name"],
        )

    @property
    def connection_type(self) -> Optional[ConnType]:
        """Parsed connection type (None if unsupported)"""
        return ConnType.parse(self.conn_type)

    def resolve(self, value: Optional[str], env: Optional[Mapping[str, str]] = None) -> str:
        """Resolve a field value; absent optional fields resolve to an empty string"""
        if value is None:
            return ""
        return resolve_value(value, env)

    def resolved_port(self, env: Optional[Mapping[str, str]] = None) -> int:
        """Port as an integer, 22 if missing or unparseable"""
        return resolve_port(self.port, env)

    def address(self, env: Optional[Mapping[str, str]] = None) -> str:
        """Resolved display address for this server"""
        return display_address(self.resolve(self.ip, env), self.resolved_port(env))

    def __repr__(self) -> str:
        return f"ServerDefinition(key={self.key!r}, name={self.name!r}, type={self.conn_type!r})"
