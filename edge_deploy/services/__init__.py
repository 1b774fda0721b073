"""Services for edge-deploy"""

from .config_service import ConfigService
from .build_service import BuildService, BuildOptions
from .push_service import PushService, PushOptions
from .deploy_service import DeployService, DeployOptions, DeploymentRecord
from .task_service import TaskService

__all__ = [
    "ConfigService",
    "BuildService",
    "BuildOptions",
    "PushService",
    "PushOptions",
    "DeployService",
    "DeployOptions",
    "DeploymentRecord",
    "TaskService",
]
