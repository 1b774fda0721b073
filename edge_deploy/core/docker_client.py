"""Docker registry login/logout"""

import logging
from typing import Optional

from ..api.exceptions import SubprocessError
from ..constants import DOCKER
from ..models.credential import Credential
from .command_runner import CommandRunner

logger = logging.getLogger(__name__)


class DockerClient:
    """Registry login helper around the docker CLI"""

    def __init__(self, runner: Optional[CommandRunner] = None):
        self.runner = runner or CommandRunner()

    def is_installed(self) -> bool:
        return self.runner.which(DOCKER) is not None

    def login(self, credential: Credential) -> None:
        result = self.runner.run([
            DOCKER, 'login',
            '-u', credential.username,
            '-p', credential.password,
            credential.server_url,
        ])
        if not result.ok:
            raise SubprocessError(
                result.args, result.returncode,
                message=f"docker login to {credential.server_url} failed: {result.stderr.strip()}"
            )
        logger.info("Logged in to registry %s", credential.server_url)

    def logout(self, server_url: Optional[str] = None) -> None:
        """Best-effort logout; failures are only logged"""
        args = [DOCKER, 'logout']
        if server_url:
            args.append(server_url)
        try:
            result = self.runner.run(args)
        except SubprocessError as e:
            logger.warning("docker logout failed: %s", e)
            return
        if not result.ok:
            logger.warning("docker logout failed: %s", result.stderr.strip())
