"""Edge Deploy - build, push and deploy IoT Edge deployment manifests.

Wraps iotedgedev, the Azure CLI and docker for use as a CI/CD pipeline task.
"""

from .__version__ import __version__, __version_info__, __license__

# Core API
from .core import (
    ManifestRewriter,
    SessionManager,
    CredentialResolver,
    EndpointReference,
    ServerMatchPolicy,
    PipelineHost,
)
from .services import BuildService, PushService, DeployService, TaskService

# Data models
from .models import Credential, RegistryType, DeploymentManifest, Session, SessionState, TaskResult

# Exceptions
from .api.exceptions import (
    EdgeDeployError,
    ValidationError,
    ManifestParseError,
    AuthenticationError,
    SubprocessError,
    CredentialResolutionError,
    ConfigError,
)

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__license__",

    # Main classes
    "ManifestRewriter",
    "SessionManager",
    "CredentialResolver",
    "EndpointReference",
    "ServerMatchPolicy",
    "PipelineHost",
    "BuildService",
    "PushService",
    "DeployService",
    "TaskService",

    # Data models
    "Credential",
    "RegistryType",
    "DeploymentManifest",
    "Session",
    "SessionState",
    "TaskResult",

    # Exceptions
    "EdgeDeployError",
    "ValidationError",
    "ManifestParseError",
    "AuthenticationError",
    "SubprocessError",
    "CredentialResolutionError",
    "ConfigError",
]
