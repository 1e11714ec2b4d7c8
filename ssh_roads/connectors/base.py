"""
Connector base class and the errors raised while dispatching a connection.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Mapping, Optional
import logging
import os
import subprocess

from ..config import ServerDefinition

logger = logging.getLogger(__name__)


class DispatchError(Exception):
    """Base class for errors raised while connecting to a server"""
    pass


class ServerNotFound(DispatchError):
    """Raised when no server matches the requested key"""

    def __init__(self, key: str):
        super().__init__(f"Server not found: {key}")
        self.key = key


class UnknownConnectionType(DispatchError):
    """Raised when a server uses a connection type that is not supported"""

    def __init__(self, conn_type: str):
        super().__init__(f"Unknown connection type: {conn_type}")
        self.conn_type = conn_type


class ConnectionFailed(DispatchError):
    """Raised when the connection process fails to start or exits non-zero"""
    pass


class BaseConnector(ABC):
    """Base class for connectors that hand the terminal to an external program"""

    def __init__(self, server: ServerDefinition, env: Optional[Mapping[str, str]] = None):
        self.server = server
        self.env = env
        self.host = server.resolve(server.ip, env)
        self.user = server.resolve(server.user, env)
        self.port = server.resolved_port(env)

    def _base_env(self) -> Dict[str, str]:
        """Environment for child processes, preserving PATH and friends"""
        return dict(self.env) if self.env is not None else os.environ.copy()

    def _run(self, cmd: List[str], env: Optional[Dict[str, str]] = None) -> int:
        """
        Run a command with inherited stdin/stdout/stderr and wait for it.

        Raises:
            FileNotFoundError: If the executable does not exist
        """
        logger.debug(f"Running: {' '.join(cmd)}")
        result = subprocess.run(cmd, env=env if env is not None else self._base_env())
        logger.debug(f"{cmd[0]} exited with status {result.returncode}")
        return result.returncode

    @abstractmethod
    def connect(self) -> None:
        """
        Open an interactive session and block until it ends

        Raises:
            ConnectionFailed: If the session could not be started or exited non-zero
        """
        pass
