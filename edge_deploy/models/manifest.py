"""Deployment manifest model"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..api.exceptions import FileNotFoundValidationError, ManifestParseError
from ..constants import (
    DESIRED_PROPERTIES_KEY,
    EDGE_AGENT_MODULE,
    MANIFEST_INDENT,
    MODULES_CONTENT_KEYS,
)


def _child(node: Any, key: str) -> Optional[Any]:
    """Return node[key] for mappings, None for anything else"""
    if isinstance(node, dict):
        return node.get(key)
    return None


def _lookup(node: Any, *keys: str) -> Optional[Any]:
    """Walk a chain of keys, stopping at the first absent level"""
    for key in keys:
        node = _child(node, key)
        if node is None:
            return None
    return node


@dataclass
class DeploymentManifest:
    """IoT Edge deployment manifest held in memory for one rewrite pass"""
    data: Dict[str, Any]
    path: Optional[Path] = None

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'DeploymentManifest':
        """Read and parse a manifest file

        Raises:
            FileNotFoundValidationError: the file does not exist
            ManifestParseError: the file is not a JSON object
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundValidationError(str(path), "Deployment manifest")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ManifestParseError(str(path), str(e)) from e

        if not isinstance(data, dict):
            raise ManifestParseError(str(path), "top-level value is not an object")

        return cls(data=data, path=path)

    def modules_content(self) -> Optional[Dict[str, Any]]:
        """Module content block, under either spelling the tooling has used"""
        for key in MODULES_CONTENT_KEYS:
            content = _child(self.data, key)
            if isinstance(content, dict):
                return content
        return None

    def desired_properties(self, module: str = EDGE_AGENT_MODULE) -> Optional[Dict[str, Any]]:
        """Desired properties of a system module

        The deployment schema uses a literal "properties.desired" key; a
        nested properties/desired layout is accepted too.
        """
        agent = _child(self.modules_content(), module)
        desired = _child(agent, DESIRED_PROPERTIES_KEY)
        if desired is None:
            desired = _lookup(agent, 'properties', 'desired')
        return desired if isinstance(desired, dict) else None

    def registry_credentials(self) -> Optional[Dict[str, Dict[str, Any]]]:
        """registryCredentials mapping, or None when any level is absent"""
        credentials = _lookup(self.desired_properties(), 'runtime', 'settings', 'registryCredentials')
        return credentials if isinstance(credentials, dict) else None

    def to_json(self) -> str:
        """Serialize with stable two-space indentation"""
        return json.dumps(self.data, indent=MANIFEST_INDENT, ensure_ascii=False)

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Write the manifest back, by default to where it was read from"""
        target = Path(path) if path is not None else self.path
        if target is None:
            raise ValueError("No path to save the manifest to")

        with open(target, 'w', encoding='utf-8') as f:
            f.write(self.to_json())

        self.path = target
        return target
