"""Azure CLI wrapper"""

import json
import logging
from typing import Any, Dict, Optional

from ..api.exceptions import SubprocessError
from ..constants import AZ_EXTENSION_EXISTS, AZ_LIBFFI_MISSING, AZURE_CLI, DEFAULT_AZURE_CLOUD
from ..models.credential import ServicePrincipal
from .command_runner import CommandResult, CommandRunner

logger = logging.getLogger(__name__)

# Reinstall of the distribution's azure-cli package, used when the
# agent's bundled CLI cannot load libffi and so cannot add extensions.
CLI_REPAIR_COMMANDS = [
    ['sudo', 'rm', '/etc/apt/sources.list.d/azure-cli.list'],
    ['sudo', 'apt-key', 'adv', '--keyserver', 'packages.microsoft.com',
     '--recv-keys', '52E16F86FEE04B979B07E28DB02C46DF417A0893'],
    ['sudo', 'apt-get', 'install', 'apt-transport-https'],
    ['sudo', 'apt-get', 'update'],
    ['sudo', 'apt-get', '--assume-yes', 'remove', 'azure-cli'],
    ['sudo', 'apt-get', '--assume-yes', 'install', 'azure-cli'],
]


class AzureCli:
    """Invokes ``az`` subcommands through a CommandRunner"""

    def __init__(self, runner: Optional[CommandRunner] = None):
        self.runner = runner or CommandRunner()

    def _az(self, *args: str, check: bool = False) -> CommandResult:
        return self.runner.run([AZURE_CLI, *args], check=check)

    def is_installed(self) -> bool:
        return self.runner.which(AZURE_CLI) is not None

    def version(self) -> str:
        # Also creates the configuration files a fresh agent is missing
        result = self._az('--version')
        logger.debug(result.stdout)
        return result.stdout

    def set_cloud(self, environment: Optional[str]) -> None:
        """Select a sovereign cloud; global Azure needs no switch"""
        if environment and environment != DEFAULT_AZURE_CLOUD:
            result = self._az('cloud', 'set', '--name', environment)
            logger.debug("cloud set exited with %d", result.returncode)

    def login(self, principal: ServicePrincipal) -> CommandResult:
        return self._az(
            'login', '--service-principal',
            '-u', principal.client_id,
            '-p', principal.secret,
            '--tenant', principal.tenant_id,
        )

    def set_subscription(self, subscription: str) -> CommandResult:
        return self._az('account', 'set', '--subscription', subscription)

    def clear_account(self) -> CommandResult:
        return self._az('account', 'clear')

    def add_extension(self, name: str) -> None:
        """Install a CLI extension, repairing the CLI once if it cannot load libffi"""
        result = self._az('extension', 'add', '--name', name)
        if result.ok or AZ_EXTENSION_EXISTS in result.stderr:
            return

        if AZ_LIBFFI_MISSING not in result.stderr:
            raise SubprocessError(result.args, result.returncode, result.stderr)

        logger.warning(
            "The Azure CLI on this agent cannot install %s (missing libffi); "
            "reinstalling azure-cli from the distribution repository", name
        )
        self.repair_installation()
        self._az('extension', 'add', '--name', name, check=True)

    def repair_installation(self) -> None:
        for command in CLI_REPAIR_COMMANDS:
            result = self.runner.run(command)
            logger.debug("%s -> %d", " ".join(command[:3]), result.returncode)

    def show_json(self, *args: str) -> Any:
        result = self._az(*args, '--output', 'json', check=True)
        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise SubprocessError(
                result.args, result.returncode,
                message=f"Unexpected output from 'az {' '.join(args[:2])}': {e}"
            ) from e

    def acr_credentials(self, registry_name: str) -> Dict[str, Any]:
        """Admin credentials of a container registry"""
        return self.show_json('acr', 'credential', 'show', '--name', registry_name)

    def delete_deployment(self, hub_name: str, deployment_id: str) -> CommandResult:
        return self._az(
            'iot', 'edge', 'deployment', 'delete',
            '--hub-name', hub_name,
            '--deployment-id', deployment_id,
        )

    def create_deployment(
        self,
        hub_name: str,
        deployment_id: str,
        content_path: str,
        target_condition: str,
        priority: int,
    ) -> CommandResult:
        return self._az(
            'iot', 'edge', 'deployment', 'create',
            '--deployment-id', deployment_id,
            '--hub-name', hub_name,
            '--content', content_path,
            '--target-condition', target_condition,
            '--priority', str(priority),
            check=True,
        )
