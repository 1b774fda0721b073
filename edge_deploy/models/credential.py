"""Registry credential models"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..constants import PLACEHOLDER_SIGIL, REGISTRY_TYPE_ACR, REGISTRY_TYPE_GENERIC


class RegistryType(Enum):
    """Where a registry credential comes from"""
    GENERIC = REGISTRY_TYPE_GENERIC
    AZURE_CONTAINER_REGISTRY = REGISTRY_TYPE_ACR

    @classmethod
    def from_input(cls, value: str) -> 'RegistryType':
        """Map a task input value to a registry type"""
        if value == REGISTRY_TYPE_ACR:
            return cls.AZURE_CONTAINER_REGISTRY
        return cls.GENERIC


@dataclass(frozen=True)
class Credential:
    """Resolved credential for one container registry"""
    server_url: str
    username: str
    password: str

    @property
    def is_complete(self) -> bool:
        """All fields present and non-empty"""
        return bool(self.server_url and self.username and self.password)

    def to_dict(self) -> Dict[str, str]:
        """Convert to the manifest registryCredentials entry shape"""
        return {
            'username': self.username,
            'password': self.password,
            'address': self.server_url,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Credential':
        """Create from dictionary"""
        return cls(
            server_url=data.get('address') or data.get('server_url', ''),
            username=data.get('username', ''),
            password=data.get('password', ''),
        )

    def __repr__(self) -> str:
        return f"Credential(server_url={self.server_url!r}, username={self.username!r}, password='***')"


def is_placeholder(value: Optional[Any]) -> bool:
    """Check whether a manifest field still holds a substitution token"""
    return isinstance(value, str) and value.startswith(PLACEHOLDER_SIGIL)


@dataclass
class RegistryReference:
    """registryCredentials entry embedded in a deployment manifest"""
    address: str
    username: Optional[str] = None
    password: Optional[str] = None

    @property
    def needs_substitution(self) -> bool:
        """Username or password is an unresolved placeholder"""
        return is_placeholder(self.username) or is_placeholder(self.password)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RegistryReference':
        """Create from dictionary"""
        return cls(
            address=data.get('address', ''),
            username=data.get('username'),
            password=data.get('password'),
        )


@dataclass(frozen=True)
class ServicePrincipal:
    """Service principal read from an Azure Resource Manager endpoint"""
    client_id: str
    secret: str
    tenant_id: str
    subscription: str
    environment: Optional[str] = None

    def __repr__(self) -> str:
        return (
            f"ServicePrincipal(client_id={self.client_id!r}, tenant_id={self.tenant_id!r}, "
            f"subscription={self.subscription!r}, environment={self.environment!r})"
        )
