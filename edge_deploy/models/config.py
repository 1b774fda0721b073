"""Configuration data models"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..constants import (
    DEFAULT_DOCKER_HUB_HOSTS,
    DEFAULT_IOT_EXTENSION_NAME,
    DEFAULT_IOTEDGEDEV_VERSION,
)


@dataclass
class RegistryMatchConfig:
    """Policy for matching manifest registry addresses to credentials"""

    docker_hub_hosts: List[str] = field(default_factory=lambda: list(DEFAULT_DOCKER_HUB_HOSTS))
    match_bare_namespaces: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "docker_hub_hosts": list(self.docker_hub_hosts),
            "match_bare_namespaces": self.match_bare_namespaces,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RegistryMatchConfig':
        """Create from dictionary"""
        return cls(
            docker_hub_hosts=list(data.get("docker_hub_hosts", DEFAULT_DOCKER_HUB_HOSTS)),
            match_bare_namespaces=bool(data.get("match_bare_namespaces", True)),
        )


@dataclass
class EdgeDeployConfig:
    """Complete edge-deploy configuration"""

    iotedgedev_version: str = DEFAULT_IOTEDGEDEV_VERSION
    iot_extension_name: str = DEFAULT_IOT_EXTENSION_NAME
    output_folder: Optional[str] = None
    log_level: str = "WARNING"
    registry_match: RegistryMatchConfig = field(default_factory=RegistryMatchConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "iotedgedev_version": self.iotedgedev_version,
            "iot_extension_name": self.iot_extension_name,
            "log_level": self.log_level,
            "registry_match": self.registry_match.to_dict(),
        }
        if self.output_folder:
            data["output_folder"] = self.output_folder
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'EdgeDeployConfig':
        """Create from dictionary"""
        data = data or {}
        return cls(
            iotedgedev_version=str(data.get("iotedgedev_version", DEFAULT_IOTEDGEDEV_VERSION)),
            iot_extension_name=data.get("iot_extension_name", DEFAULT_IOT_EXTENSION_NAME),
            output_folder=data.get("output_folder"),
            log_level=str(data.get("log_level", "WARNING")).upper(),
            registry_match=RegistryMatchConfig.from_dict(data.get("registry_match") or {}),
        )
