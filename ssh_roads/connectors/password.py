"""
Password-authenticated SSH connector.

Uses an expect script to answer the password prompt, then hands the session
over to the user. Credentials reach the script through environment variables
only, so they never show up in the process list.
"""

import logging
import shutil
from typing import List

from .base import BaseConnector, ConnectionFailed

logger = logging.getLogger(__name__)

EXPECT_SCRIPT = r"""
set host $env(SSH_HOST)
set user $env(SSH_USER)
set pswd $env(SSH_PSWD)
set port $env(SSH_PORT)

spawn ssh $user@$host -p $port -o StrictHostKeyChecking=no
expect {
    "*assword:" {
        send -- "$pswd\n"
    }
    timeout {
        exit 1
    }
    eof {
        exit 1
    }
}
interact
"""


class PasswordConnector(BaseConnector):
    """SSH connector that supplies the password through expect"""

    EXPECT_BINARY = "expect"
    SSH_BINARY = "ssh"

    @property
    def password(self) -> str:
        return self.server.resolve(self.server.password, self.env)

    def build_expect_command(self) -> List[str]:
        return [self.EXPECT_BINARY, "-c", EXPECT_SCRIPT]

    def build_ssh_command(self) -> List[str]:
        """Plain interactive ssh command, used when expect is not installed"""
        return [
            self.SSH_BINARY,
            "-p", str(self.port),
            "-o", "StrictHostKeyChecking=no",
            f"{self.user}@{self.host}",
        ]

    def connect(self) -> None:
        if shutil.which(self.EXPECT_BINARY, path=self._base_env().get("PATH")) is None:
            logger.warning("expect not found, falling back to interactive ssh (enter the password manually)")
            self._connect_interactive()
            return

        env = self._base_env()
        env["SSH_HOST"] = self.host
        env["SSH_USER"] = self.user
        env["SSH_PSWD"] = self.password
        env["SSH_PORT"] = str(self.port)

        try:
            returncode = self._run(self.build_expect_command(), env)
        except FileNotFoundError:
            raise ConnectionFailed("expect: command not found. Please install expect.")
        except (OSError, ValueError) as e:
            raise ConnectionFailed(f"expect: {e}")

        if returncode != 0:
            raise ConnectionFailed(f"SSH connection failed (exit status {returncode})")

    def _connect_interactive(self) -> None:
        try:
            returncode = self._run(self.build_ssh_command())
        except FileNotFoundError:
            raise ConnectionFailed("ssh: command not found. Please install an OpenSSH client.")
        except (OSError, ValueError) as e:
            raise ConnectionFailed(f"ssh: {e}")

        if returncode != 0:
            raise ConnectionFailed(f"SSH failed (exit status {returncode})")
