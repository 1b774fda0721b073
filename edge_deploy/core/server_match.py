"""Registry server address matching"""

import re
from typing import Iterable, Optional

from ..models.config import RegistryMatchConfig

_SCHEME = re.compile(r"^[a-z][a-z0-9+.-]*://")
_API_SUFFIX = re.compile(r"/v[12]$")


def normalize_server(address: Optional[str]) -> str:
    """Canonical form of a registry address

    Lowercased, without scheme, trailing slashes or a trailing /v1 or /v2
    API path. ``https://Index.Docker.io/v1/`` becomes ``index.docker.io``.
    """
    if not address:
        return ""
    value = address.strip().lower()
    value = _SCHEME.sub("", value)
    value = value.rstrip("/")
    value = _API_SUFFIX.sub("", value)
    return value.rstrip("/")


class ServerMatchPolicy:
    """Decides whether a manifest address and a credential server are the same registry

    Docker Hub is special: its login server (``https://index.docker.io/v1/``)
    differs from the namespace images are pushed under (``myuser``), so both
    sides are treated as equivalent when each resolves to the default
    registry.
    """

    def __init__(
        self,
        docker_hub_hosts: Optional[Iterable[str]] = None,
        match_bare_namespaces: bool = True,
    ):
        defaults = RegistryMatchConfig()
        hosts = docker_hub_hosts if docker_hub_hosts is not None else defaults.docker_hub_hosts
        self.docker_hub_hosts = {normalize_server(h) for h in hosts}
        self.match_bare_namespaces = match_bare_namespaces

    @classmethod
    def from_config(cls, config: RegistryMatchConfig) -> 'ServerMatchPolicy':
        return cls(config.docker_hub_hosts, config.match_bare_namespaces)

    def is_default_registry(self, address: Optional[str]) -> bool:
        """True when an address refers to Docker Hub"""
        normalized = normalize_server(address)
        if not normalized:
            return False

        host = normalized.split("/", 1)[0]
        if host in self.docker_hub_hosts:
            return True

        if not self.match_bare_namespaces:
            return False

        # Docker resolves a first path component without '.' or ':' to Docker Hub
        return "." not in host and ":" not in host and host != "localhost"

    def matches(self, address: Optional[str], server: Optional[str]) -> bool:
        """Compare a manifest registry address with a credential server"""
        left = normalize_server(address)
        right = normalize_server(server)
        if not left or not right:
            return False
        if left == right:
            return True
        return self.is_default_registry(left) and self.is_default_registry(right)
