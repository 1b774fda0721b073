"""Data models for edge-deploy"""

from .credential import Credential, RegistryReference, RegistryType, ServicePrincipal, is_placeholder
from .manifest import DeploymentManifest
from .session import Session, SessionState
from .result import TaskResult, RewriteReport, OperationStatus, ErrorDetail
from .config import EdgeDeployConfig, RegistryMatchConfig

__all__ = [
    # Credential models
    "Credential",
    "RegistryReference",
    "RegistryType",
    "ServicePrincipal",
    "is_placeholder",

    # Manifest models
    "DeploymentManifest",

    # Session models
    "Session",
    "SessionState",

    # Result models
    "TaskResult",
    "RewriteReport",
    "OperationStatus",
    "ErrorDetail",

    # Config models
    "EdgeDeployConfig",
    "RegistryMatchConfig",
]
