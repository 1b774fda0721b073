"""Registry credential resolution"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..api.exceptions import CredentialResolutionError
from ..models.credential import Credential, RegistryType
from .pipeline_host import PipelineHost
from .session_manager import SessionManager

logger = logging.getLogger(__name__)


@dataclass
class EndpointReference:
    """Where to look a registry credential up

    For a generic registry ``endpoint_id`` names a docker registry service
    endpoint. For Azure Container Registry it names the subscription
    endpoint and ``registry`` carries ``{"loginServer", "id"}``.
    """
    endpoint_id: str
    registry: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_acr(cls, endpoint_id: str, registry_json: Optional[str]) -> 'EndpointReference':
        try:
            registry = json.loads(registry_json) if registry_json else {}
        except json.JSONDecodeError as e:
            raise CredentialResolutionError(f"Invalid container registry definition: {e}") from e
        if not isinstance(registry, dict):
            raise CredentialResolutionError("Invalid container registry definition")
        return cls(endpoint_id=endpoint_id, registry=registry)


def acr_name(registry: Dict[str, Any]) -> str:
    """Registry name from its resource id, else from the login server"""
    resource_id = registry.get('id') or ''
    parts = [p for p in resource_id.split('/') if p]
    for i, part in enumerate(parts[:-1]):
        if part.lower() == 'registries':
            return parts[i + 1]
    login_server = registry.get('loginServer') or ''
    return login_server.split('.', 1)[0]


class CredentialResolver:
    """Produces exactly one complete Credential per request"""

    def __init__(self, host: PipelineHost, session_manager: Optional[SessionManager] = None):
        self.host = host
        self.session_manager = session_manager or SessionManager()

    def resolve(self, registry_type: RegistryType, endpoint_ref: EndpointReference) -> Credential:
        """Resolve a registry credential

        Raises:
            CredentialResolutionError: the provider returned an incomplete record
            AuthenticationError: the cloud login needed for ACR was rejected
        """
        if registry_type == RegistryType.AZURE_CONTAINER_REGISTRY:
            credential = self._resolve_acr(endpoint_ref)
        else:
            credential = self._resolve_generic(endpoint_ref)

        if not credential.is_complete:
            missing = [
                name for name in ('server_url', 'username', 'password')
                if not getattr(credential, name)
            ]
            raise CredentialResolutionError(
                f"Container registry credential is incomplete, missing: {', '.join(missing)} "
                f"({credential!r})"
            )
        return credential

    def _resolve_generic(self, endpoint_ref: EndpointReference) -> Credential:
        endpoint_id = endpoint_ref.endpoint_id
        return Credential(
            server_url=self.host.get_endpoint_auth(endpoint_id, 'registry') or '',
            username=self.host.get_endpoint_auth(endpoint_id, 'username') or '',
            password=self.host.get_endpoint_auth(endpoint_id, 'password') or '',
        )

    def _resolve_acr(self, endpoint_ref: EndpointReference) -> Credential:
        login_server = endpoint_ref.registry.get('loginServer') or ''
        name = acr_name(endpoint_ref.registry)
        if not name:
            raise CredentialResolutionError("Azure Container Registry name is missing")
        if not login_server:
            raise CredentialResolutionError("Azure Container Registry login server is missing")

        principal = self.host.get_service_principal(endpoint_ref.endpoint_id)
        logger.info("Fetching admin credentials of registry %s", name)

        with self.session_manager.session(principal):
            record = self.session_manager.azure_cli.acr_credentials(name)

        if not isinstance(record, dict):
            record = {}
        passwords = record.get('passwords') or []
        password = ''
        if passwords and isinstance(passwords[0], dict):
            password = passwords[0].get('value') or ''

        return Credential(
            server_url=login_server.lower(),
            username=record.get('username') or '',
            password=password,
        )
