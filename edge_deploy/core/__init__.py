"""Core functionality for edge-deploy"""

from .command_runner import CommandRunner, CommandResult
from .pipeline_host import PipelineHost
from .azure_cli import AzureCli
from .docker_client import DockerClient
from .iotedgedev import IotEdgeDev, extract_deployment_path
from .server_match import ServerMatchPolicy, normalize_server
from .manifest_rewriter import ManifestRewriter
from .session_manager import SessionManager
from .credential_resolver import CredentialResolver, EndpointReference
from .credential_store import CredentialStore

__all__ = [
    "CommandRunner",
    "CommandResult",
    "PipelineHost",
    "AzureCli",
    "DockerClient",
    "IotEdgeDev",
    "extract_deployment_path",
    "ServerMatchPolicy",
    "normalize_server",
    "ManifestRewriter",
    "SessionManager",
    "CredentialResolver",
    "EndpointReference",
    "CredentialStore",
]
