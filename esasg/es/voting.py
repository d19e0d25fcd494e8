"""The voting configuration exclusions APIs of a cluster."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from esasg.es.client import Client

_PATH = "/_cluster/voting_config_exclusions"


@dataclass
class ClusterDeleteVotingConfigExclusion:
    """Removes all voting configuration exclusions.

    Any node may then return to the voting configuration.
    """

    client: Client
    # Wait for all excluded nodes to leave the cluster before removing
    # the exclusions.
    wait: Optional[bool] = None

    def build_url(self) -> tuple[str, dict[str, str]]:
        """Return the request path and query parameters."""
        params: dict[str, str] = {}
        if self.wait is not None:
            params["wait_for_removal"] = "true" if self.wait else "false"
        return _PATH, params

    def do(self) -> None:
        """Perform the request."""
        path, params = self.build_url()
        self.client.perform_request("DELETE", path, params)


@dataclass
class ClusterPostVotingConfigExclusion:
    """Excludes nodes from the voting configuration."""

    client: Client
    # The node or nodes to exclude.
    node: str = ""
    # How long to wait for the node to be reconfigured out of the voting
    # configuration; the server default is 30 seconds.
    timeout: str = ""

    def validate(self) -> None:
        """Raise ValueError if the request cannot be made."""
        if not self.node:
            raise ValueError("non-empty node required")

    def build_url(self) -> tuple[str, dict[str, str]]:
        """Return the request path and query parameters."""
        params: dict[str, str] = {}
        if self.timeout:
            params["timeout"] = self.timeout
        return f"{_PATH}/{self.node}", params

    def do(self) -> None:
        """Validate and perform the request."""
        self.validate()
        path, params = self.build_url()
        self.client.perform_request("POST", path, params)