"""Task orchestration: one action per invocation"""

import logging
from typing import Optional

from ..api.exceptions import EdgeDeployError, ValidationError
from ..constants import ACTION_BUILD, ACTION_DEPLOY, ACTION_PUSH, ACTIONS, OUTPUT_VARIABLE_DEPLOYMENT_PATH
from ..core.command_runner import CommandRunner
from ..core.credential_resolver import EndpointReference
from ..core.pipeline_host import PipelineHost
from ..models.config import EdgeDeployConfig
from ..models.credential import RegistryType
from ..models.result import OperationStatus, TaskResult
from .build_service import BuildOptions, BuildService
from .deploy_service import DeployOptions, DeployService
from .push_service import PushOptions, PushService

logger = logging.getLogger(__name__)


class TaskService:
    """Reads the host's inputs, runs the selected action and reports the result"""

    def __init__(self, host: PipelineHost, config: Optional[EdgeDeployConfig] = None,
                 runner: Optional[CommandRunner] = None):
        self.host = host
        self.config = config or EdgeDeployConfig()
        self.runner = runner or CommandRunner()

    # Input mapping

    def build_options(self) -> BuildOptions:
        return BuildOptions(
            template_file=self.host.get_input('templateFilePath', required=True),
            platform=self.host.get_input('defaultPlatform', required=True),
        )

    def push_options(self) -> PushOptions:
        registry_type = RegistryType.from_input(
            self.host.get_input('containerregistrytype', required=True)
        )
        if registry_type == RegistryType.AZURE_CONTAINER_REGISTRY:
            endpoint = EndpointReference.for_acr(
                self.host.get_input('azureSubscriptionEndpoint', required=True),
                self.host.get_input('azureContainerRegistry', required=True),
            )
        else:
            endpoint = EndpointReference(
                endpoint_id=self.host.get_input('dockerRegistryEndpoint', required=True)
            )

        return PushOptions(
            template_file=self.host.get_input('templateFilePath', required=True),
            platform=self.host.get_input('defaultPlatform', required=True),
            registry_type=registry_type,
            endpoint=endpoint,
            bypass_modules=self.host.get_input('bypassModules') or '',
        )

    def deploy_options(self) -> DeployOptions:
        device_option = self.host.get_input('deviceOption', required=True)
        return DeployOptions(
            deployment_file=self.host.get_input('deploymentFilePath', required=True),
            hub_name=self.host.get_input('iothubname', required=True),
            deployment_id=self.host.get_input('deploymentid', required=True),
            service_endpoint=self.host.get_input('connectedServiceNameARM', required=True),
            priority=self.host.get_input('priority', required=True),
            device_option=device_option,
            device_id=self.host.get_input('deviceId'),
            target_condition=self.host.get_input('targetcondition'),
        )

    # Execution

    def execute(self, action: str, result: TaskResult) -> None:
        if action == ACTION_BUILD:
            logger.info("Building module images")
            path = BuildService(self.host, self.config, self.runner).build(self.build_options())
            if path:
                result.output_variables[OUTPUT_VARIABLE_DEPLOYMENT_PATH] = path
        elif action == ACTION_PUSH:
            logger.info("Pushing module images")
            PushService(self.host, self.config, self.runner).push(self.push_options())
        elif action == ACTION_DEPLOY:
            logger.info("Starting deployment to IoT Edge devices")
            record = DeployService(self.host, self.config, self.runner).deploy(self.deploy_options())
            result.output_variables['DEPLOYMENT_ID'] = record.deployment_id
        else:
            raise ValidationError(
                f"Unknown action '{action}', expected one of: {', '.join(ACTIONS)}"
            )

    def run(self, action: Optional[str] = None) -> TaskResult:
        """Run one action and report success or failure to the host

        Errors are not retried; each becomes a single failed result.
        """
        result = TaskResult(action=action or '')
        try:
            if action is None:
                action = self.host.get_input('action', required=True)
                result.action = action
            self.execute(action, result)
        except EdgeDeployError as e:
            logger.debug("%s failed", action, exc_info=True)
            result.add_error(e.error_code, str(e))
            result.complete(OperationStatus.FAILED, str(e))
        except Exception as e:
            logger.exception("%s failed unexpectedly", action or "Task")
            message = f"{type(e).__name__}: {e}"
            result.add_error(None, message)
            result.complete(OperationStatus.FAILED, message)
        else:
            result.complete(OperationStatus.SUCCESS, f"{action} finished")

        self.host.set_result(result.is_success, result.message if not result.is_success else '')
        return result
