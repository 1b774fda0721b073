"""IoT Edge deployment service"""

import logging
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..api.exceptions import ValidationError
from ..constants import DEVICE_OPTION_SINGLE
from ..core.azure_cli import AzureCli
from ..core.command_runner import CommandRunner
from ..core.deployment import (
    find_deployment_files,
    first_valid_manifest,
    normalize_deployment_id,
    parse_priority,
    target_condition,
    write_deployment_content,
)
from ..core.pipeline_host import PipelineHost
from ..core.session_manager import SessionManager
from ..models.config import EdgeDeployConfig
from ..models.manifest import DeploymentManifest

logger = logging.getLogger(__name__)


@dataclass
class DeployOptions:
    """Inputs of the deploy action"""
    deployment_file: str
    hub_name: str
    deployment_id: str
    service_endpoint: str
    priority: Optional[str] = None
    device_option: str = DEVICE_OPTION_SINGLE
    device_id: Optional[str] = None
    target_condition: Optional[str] = None


@dataclass
class DeploymentRecord:
    """What was created on the IoT Hub"""
    hub_name: str
    deployment_id: str
    target_condition: str
    priority: int
    manifest_path: Optional[Path] = None


class DeployService:
    """Creates an IoT Edge deployment on an IoT Hub

    The Azure CLI session needed for this is opened and closed within a
    single call to ``deploy``.
    """

    def __init__(self, host: PipelineHost, config: Optional[EdgeDeployConfig] = None,
                 runner: Optional[CommandRunner] = None):
        self.host = host
        self.config = config or EdgeDeployConfig()
        self.azure_cli = AzureCli(runner or CommandRunner())
        self.session_manager = SessionManager(self.azure_cli)

    def load_manifest(self, deployment_file: str) -> DeploymentManifest:
        paths = find_deployment_files(deployment_file)
        logger.debug("Found %d result(s) for deployment file: %s", len(paths), deployment_file)
        if not paths:
            raise ValidationError(f"Deployment file can't be found: {deployment_file}")

        for path in paths:
            logger.info("Found deployment file candidate %s", path)

        manifest = first_valid_manifest(paths)
        if manifest is None:
            raise ValidationError("No valid deployment file found")
        return manifest

    def deploy(self, options: DeployOptions) -> DeploymentRecord:
        """Replace the IoT Hub deployment with the given manifest

        Raises:
            ValidationError: inputs or deployment file are invalid
            AuthenticationError: Azure login rejected
            SubprocessError: deployment creation failed
        """
        logger.info("Task running in build pipeline: %s", self.host.is_build_pipeline())

        manifest = self.load_manifest(options.deployment_file)

        if not self.azure_cli.is_installed():
            raise ValidationError("Azure CLI (az) is not installed on this agent")

        record = DeploymentRecord(
            hub_name=options.hub_name,
            deployment_id=normalize_deployment_id(options.deployment_id),
            target_condition=target_condition(
                options.device_option, options.device_id, options.target_condition
            ),
            priority=parse_priority(options.priority),
            manifest_path=manifest.path,
        )
        if not record.deployment_id:
            raise ValidationError(f"Deployment id '{options.deployment_id}' has no valid characters")
        logger.info("Normalized deployment id is %s", record.deployment_id)

        principal = self.host.get_service_principal(options.service_endpoint)

        with tempfile.TemporaryDirectory() as temp_dir:
            content_path = write_deployment_content(
                manifest, Path(temp_dir), int(time.time() * 1000)
            )

            with self.session_manager.session(principal):
                self.azure_cli.add_extension(self.config.iot_extension_name)

                # An existing deployment with the same id may or may not exist
                result = self.azure_cli.delete_deployment(record.hub_name, record.deployment_id)
                logger.debug("Deleting existing deployment exited with %d", result.returncode)

                self.azure_cli.create_deployment(
                    record.hub_name,
                    record.deployment_id,
                    str(content_path),
                    record.target_condition,
                    record.priority,
                )

        logger.info("Deployment %s created on %s", record.deployment_id, record.hub_name)
        return record
