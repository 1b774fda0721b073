"""Configuration management service"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional, Union

import yaml

from ..api.exceptions import ConfigError
from ..constants import ENV_CONFIG_PATH, ENV_LOG_LEVEL, PROJECT_CONFIG_FILE, VARIABLE_IOTEDGEDEV_VERSION
from ..models.config import EdgeDeployConfig

logger = logging.getLogger(__name__)


class ConfigService:
    """Loads edge-deploy configuration

    Sources, later ones winning: built-in defaults, the YAML file
    (``$EDGE_DEPLOY_CONFIG`` or ``.edge-deploy.yaml`` in the working
    directory), then environment overrides.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None,
                 environ: Optional[Mapping[str, str]] = None):
        self.environ = environ if environ is not None else os.environ
        if config_path is None:
            config_path = self.environ.get(ENV_CONFIG_PATH) or Path.cwd() / PROJECT_CONFIG_FILE
        self.config_path = Path(config_path)
        self._config: Optional[EdgeDeployConfig] = None

    @property
    def config(self) -> EdgeDeployConfig:
        """Get current configuration (lazy load)"""
        if self._config is None:
            self.load_config()
        return self._config

    def load_config(self) -> EdgeDeployConfig:
        """Load configuration from file and environment

        Raises:
            ConfigError: the file exists but is not a YAML mapping
        """
        data = {}
        if self.config_path.exists():
            with open(self.config_path, 'r', encoding='utf-8') as f:
                content = f.read()

            # Simple environment variable expansion
            content = os.path.expandvars(content)

            try:
                data = yaml.safe_load(content) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid configuration file {self.config_path}: {e}") from e

            if not isinstance(data, dict):
                raise ConfigError(f"Configuration file {self.config_path} must contain a mapping")
            logger.debug("Loaded configuration from %s", self.config_path)

        config = EdgeDeployConfig.from_dict(data)
        self._apply_env_overrides(config)
        self._config = config
        return config

    def _apply_env_overrides(self, config: EdgeDeployConfig) -> None:
        if log_level := self.environ.get(ENV_LOG_LEVEL):
            config.log_level = log_level.upper()

        if version := self.environ.get(VARIABLE_IOTEDGEDEV_VERSION):
            config.iotedgedev_version = version
