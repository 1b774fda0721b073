"""iotedgedev build/push helper"""

import logging
import os
import re
import sys
from typing import Dict, List, Mapping, Optional

from packaging.version import InvalidVersion, Version

from ..api.exceptions import SubprocessError
from ..constants import (
    DEFAULT_IOTEDGEDEV_VERSION,
    ENV_BYPASS_MODULES,
    ENV_REGISTRY_PASSWORD,
    ENV_REGISTRY_SERVER,
    ENV_REGISTRY_USERNAME,
    EXPANDING_PATTERN,
    IOTEDGEDEV,
)
from ..models.credential import Credential
from .command_runner import CommandResult, CommandRunner
from .pipeline_host import PipelineHost

logger = logging.getLogger(__name__)

_VERSION_IN_OUTPUT = re.compile(r"(\d+\.\d+(?:\.\d+)?\S*)")


def extract_deployment_path(output: str) -> Optional[str]:
    """Generated deployment file path from iotedgedev build output

    Best effort: depends on iotedgedev logging
    ``Expanding '<template>' to '<deployment>'``. Only the first match is
    used, and None is returned when the line is missing.
    """
    match = EXPANDING_PATTERN.search(output or "")
    if match and match.group(1):
        return match.group(1)
    return None


def compose_environment(host: PipelineHost, task_env: Dict[str, Optional[str]],
                        base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Full child environment for an iotedgedev invocation

    Task-provided keys win over pipeline variables, which in turn are laid
    over the current process environment.
    """
    env = dict(os.environ if base is None else base)
    task_keys = {k: v for k, v in task_env.items() if v is not None}
    env.update(host.task_environment(task_keys))
    return env


def registry_environment(credential: Credential, bypass_modules: str = "") -> Dict[str, str]:
    """Environment contract iotedgedev reads for a push"""
    return {
        ENV_BYPASS_MODULES: bypass_modules,
        ENV_REGISTRY_SERVER: credential.server_url,
        ENV_REGISTRY_USERNAME: credential.username,
        ENV_REGISTRY_PASSWORD: credential.password,
    }


class IotEdgeDev:
    """Installs and invokes iotedgedev"""

    def __init__(self, runner: Optional[CommandRunner] = None,
                 version: str = DEFAULT_IOTEDGEDEV_VERSION):
        self.runner = runner or CommandRunner()
        self.version = version

    def installed_version(self) -> Optional[str]:
        try:
            result = self.runner.run([IOTEDGEDEV, '--version'])
        except SubprocessError:
            return None
        if not result.ok:
            return None
        match = _VERSION_IN_OUTPUT.search(result.stdout)
        return match.group(1) if match else result.stdout.strip()

    def is_locked_version(self, installed: str) -> bool:
        try:
            return Version(installed) == Version(self.version)
        except InvalidVersion:
            return installed == self.version

    def setup(self) -> str:
        """Make sure the pinned iotedgedev version is available

        Returns:
            The installed version string

        Raises:
            SubprocessError: installation failed
        """
        installed = self.installed_version()
        if installed and self.is_locked_version(installed):
            logger.info("%s %s is already installed", IOTEDGEDEV, installed)
            return installed

        if installed:
            logger.info("Replacing %s %s with %s", IOTEDGEDEV, installed, self.version)
        else:
            logger.info("Installing %s %s", IOTEDGEDEV, self.version)

        self.runner.run(
            [sys.executable, '-m', 'pip', 'install', f'{IOTEDGEDEV}=={self.version}'],
            check=True,
        )

        installed = self.installed_version()
        if not installed:
            raise SubprocessError(
                [IOTEDGEDEV, '--version'], 1,
                message=f"{IOTEDGEDEV} is not runnable after installation"
            )
        return installed

    def _invoke(self, command: List[str], env: Dict[str, str], cwd: Optional[str]) -> CommandResult:
        return self.runner.stream([IOTEDGEDEV, *command], env=env, check=True, cwd=cwd)

    def build(self, template_file: str, platform: str, env: Dict[str, str],
              cwd: Optional[str] = None) -> CommandResult:
        return self._invoke(['build', '--file', template_file, '--platform', platform], env, cwd)

    def push(self, template_file: str, platform: str, env: Dict[str, str],
             cwd: Optional[str] = None) -> CommandResult:
        return self._invoke(['push', '--no-build', '--file', template_file, '--platform', platform], env, cwd)
