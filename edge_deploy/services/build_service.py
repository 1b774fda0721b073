"""Module image build service"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..api.exceptions import FileNotFoundValidationError
from ..constants import (
    ENV_DEPLOYMENT_FILE_OUTPUT_FOLDER,
    OUTPUT_VARIABLE_DEPLOYMENT_PATH,
    VARIABLE_OUTPUT_FOLDER,
)
from ..core.command_runner import CommandRunner
from ..core.iotedgedev import IotEdgeDev, compose_environment, extract_deployment_path
from ..core.pipeline_host import PipelineHost
from ..models.config import EdgeDeployConfig

logger = logging.getLogger(__name__)


def validate_template(template_file: str) -> Path:
    """Deployment template path, which must exist"""
    path = Path(template_file)
    logger.debug("The template file path is %s", path)
    if not path.is_file():
        raise FileNotFoundValidationError(str(path), "Deployment template file")
    return path


@dataclass
class BuildOptions:
    """Inputs of the build action"""
    template_file: str
    platform: str


class BuildService:
    """Builds module images and publishes the generated deployment file path"""

    def __init__(self, host: PipelineHost, config: Optional[EdgeDeployConfig] = None,
                 runner: Optional[CommandRunner] = None):
        self.host = host
        self.config = config or EdgeDeployConfig()
        self.runner = runner or CommandRunner()
        self.iotedgedev = IotEdgeDev(self.runner, self.config.iotedgedev_version)

    def output_folder(self) -> Optional[str]:
        return self.config.output_folder or self.host.get_variable(VARIABLE_OUTPUT_FOLDER)

    def build(self, options: BuildOptions) -> Optional[str]:
        """Run ``iotedgedev build``

        Returns:
            Generated deployment file path, or None when it could not be
            found in the tool output
        """
        template = validate_template(options.template_file)
        self.iotedgedev.setup()

        env = compose_environment(self.host, {
            ENV_DEPLOYMENT_FILE_OUTPUT_FOLDER: self.output_folder(),
        })

        result = self.iotedgedev.build(str(template), options.platform, env, cwd=str(template.parent))

        deployment_path = extract_deployment_path(result.stdout)
        if deployment_path is None:
            logger.warning("Could not find the generated deployment file in the iotedgedev output")
            return None

        self.host.set_variable(OUTPUT_VARIABLE_DEPLOYMENT_PATH, deployment_path)
        self.host.set_variable('_' + OUTPUT_VARIABLE_DEPLOYMENT_PATH, deployment_path)
        logger.info("Set %s to %s", OUTPUT_VARIABLE_DEPLOYMENT_PATH, deployment_path)
        return deployment_path
