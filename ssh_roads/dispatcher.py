"""
Route key lookup and connection dispatch
"""

import logging
from typing import Dict, Mapping, Optional, Sequence, Type

from colorama import Fore, Style

from .config import ConnType, ServerDefinition
from .connectors.base import BaseConnector, ServerNotFound, UnknownConnectionType
from .connectors.gcp import GcpConnector
from .connectors.password import PasswordConnector

logger = logging.getLogger(__name__)

CONNECTORS: Dict[ConnType, Type[BaseConnector]] = {
    ConnType.PASSWORD: PasswordConnector,
    ConnType.GCP: GcpConnector,
}


def find_server(servers: Sequence[ServerDefinition], key: str) -> Optional[ServerDefinition]:
    """Return the first server whose key matches exactly, or None"""
    return next((server for server in servers if server.key == key), None)


def get_connector(server: ServerDefinition, env: Optional[Mapping[str, str]] = None) -> BaseConnector:
    """
    Create the connector for a server's connection type.

    Raises:
        UnknownConnectionType: If the type is not supported
    """
    conn_type = server.connection_type
    if conn_type is None:
        raise UnknownConnectionType(server.conn_type)
    return CONNECTORS[conn_type](server, env)


def connect(
    servers: Sequence[ServerDefinition],
    route: str,
    env: Optional[Mapping[str, str]] = None,
) -> None:
    """
    Connect to the server selected by `route` and wait for the session to end.

    Args:
        servers: Loaded server definitions
        route: Key of the server to connect to
        env: Optional environment mapping (defaults to os.environ)

    Raises:
        ServerNotFound: If no server has the given key
        UnknownConnectionType: If the server's connection type is not supported
        ConnectionFailed: If the connection process fails or exits non-zero
    """
    server = find_server(servers, route)
    if server is None:
        raise ServerNotFound(route)

    name = server.resolve(server.name, env)
    address = server.address(env)
    print(
        f"{Fore.RED}{Style.BRIGHT}You chose{Style.RESET_ALL} "
        f"{Fore.YELLOW}{Style.BRIGHT}{name}{Style.RESET_ALL} "
        f"{Fore.GREEN}{Style.BRIGHT}{address}{Style.RESET_ALL}"
    )

    connector = get_connector(server, env)
    logger.info(f"Connecting to {server.key} via {server.conn_type}")
    connector.connect()
