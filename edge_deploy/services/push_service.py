"""Module image push service"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..constants import OUTPUT_VARIABLE_DEPLOYMENT_PATH
from ..core.command_runner import CommandRunner
from ..core.credential_resolver import CredentialResolver, EndpointReference
from ..core.credential_store import CredentialStore
from ..core.docker_client import DockerClient
from ..core.iotedgedev import IotEdgeDev, compose_environment, registry_environment
from ..core.manifest_rewriter import ManifestRewriter
from ..core.azure_cli import AzureCli
from ..core.pipeline_host import PipelineHost
from ..core.server_match import ServerMatchPolicy
from ..core.session_manager import SessionManager
from ..models.config import EdgeDeployConfig
from ..models.credential import RegistryType
from ..models.result import RewriteReport
from .build_service import validate_template

logger = logging.getLogger(__name__)


@dataclass
class PushOptions:
    """Inputs of the push action"""
    template_file: str
    platform: str
    registry_type: RegistryType
    endpoint: EndpointReference
    bypass_modules: str = ""


class PushService:
    """Pushes module images and fills registry credentials into the
    generated deployment file"""

    def __init__(self, host: PipelineHost, config: Optional[EdgeDeployConfig] = None,
                 runner: Optional[CommandRunner] = None):
        self.host = host
        self.config = config or EdgeDeployConfig()
        self.runner = runner or CommandRunner()
        self.iotedgedev = IotEdgeDev(self.runner, self.config.iotedgedev_version)
        self.docker = DockerClient(self.runner)
        self.resolver = CredentialResolver(host, SessionManager(AzureCli(self.runner)))
        self.store = CredentialStore(host)
        self.rewriter = ManifestRewriter(ServerMatchPolicy.from_config(self.config.registry_match))

    def push(self, options: PushOptions) -> Optional[RewriteReport]:
        """Run ``iotedgedev push`` against one registry

        Returns:
            Rewrite report for the generated deployment file, or None when
            that file was not found
        """
        credential = self.resolver.resolve(options.registry_type, options.endpoint)
        logger.debug("Bypass modules are: %s", options.bypass_modules)

        template = validate_template(options.template_file)
        self.iotedgedev.setup()

        env = compose_environment(
            self.host, registry_environment(credential, options.bypass_modules)
        )

        # iotedgedev picks the credential by CONTAINER_REGISTRY_SERVER, which
        # for Docker Hub must be the namespace rather than the login server,
        # so log in up front and let the push reuse that login.
        try:
            self.docker.login(credential)
            self.iotedgedev.push(str(template), options.platform, env, cwd=str(template.parent))
        finally:
            self.docker.logout(credential.server_url)

        candidates = self.store.append(credential)
        logger.debug("Number of docker credentials passed: %d", len(candidates))

        return self.expand_credentials(candidates)

    def expand_credentials(self, candidates) -> Optional[RewriteReport]:
        deployment_path = self.host.get_variable('_' + OUTPUT_VARIABLE_DEPLOYMENT_PATH)
        if not deployment_path or not Path(deployment_path).is_file():
            logger.debug("The generated deployment file can't be found in the path: %s", deployment_path)
            return None

        logger.info("Deployment file path: %s", deployment_path)
        report = self.rewriter.rewrite(deployment_path, candidates)
        for key, server in report.replaced.items():
            logger.info("Replaced credential %s with the one for %s", key, server)
        return report

