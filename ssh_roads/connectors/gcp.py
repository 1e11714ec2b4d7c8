"""Google Cloud connector: opens the session through `gcloud compute ssh`."""

from typing import List

from .base import BaseConnector, ConnectionFailed


class GcpConnector(BaseConnector):
    """Connector using the gcloud compute ssh proxy"""

    GCLOUD_BINARY = "gcloud"

    def build_command(self) -> List[str]:
        project = self.server.resolve(self.server.gcp_project, self.env)
        zone = self.server.resolve(self.server.gcp_zone, self.env)
        vm_name = self.server.resolve(self.server.gcp_vm_name, self.env)

        return [
            self.GCLOUD_BINARY,
            "compute",
            "ssh",
            "--project", project,
            "--zone", zone,
            f"{self.user}@{vm_name}",
        ]

    def connect(self) -> None:
        try:
            returncode = self._run(self.build_command())
        except FileNotFoundError:
            raise ConnectionFailed("gcloud: command not found. Please install the Google Cloud SDK.")
        except (OSError, ValueError) as e:
            raise ConnectionFailed(f"gcloud: {e}")

        if returncode != 0:
            raise ConnectionFailed(f"GCP SSH connection failed (exit status {returncode})")
