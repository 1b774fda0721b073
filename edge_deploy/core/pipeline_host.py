"""Boundary to the host task runner (Azure Pipelines agent)"""

import json
import logging
import os
import sys
from typing import Dict, List, Mapping, MutableMapping, Optional, TextIO, Tuple

from ..api.exceptions import MissingInputError
from ..constants import VARIABLE_HOST_TYPE
from ..models.credential import ServicePrincipal

logger = logging.getLogger(__name__)


def _escape_data(value: str) -> str:
    return value.replace('%', '%AZP25').replace('\r', '%0D').replace('\n', '%0A')


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(']', '%5D').replace(';', '%3B')


def variable_env_name(name: str) -> str:
    """Environment name the agent uses for a pipeline variable"""
    return name.replace('.', '_').replace(' ', '_').upper()


class PipelineHost:
    """Reads task inputs, variables and service endpoints from the agent
    environment, and reports output variables and results back through
    ``##vso`` logging commands.
    """

    def __init__(self, environ: Optional[MutableMapping[str, str]] = None,
                 stream: Optional[TextIO] = None):
        self.environ = environ if environ is not None else os.environ
        self.stream = stream or sys.stdout

    # Inputs

    def get_input(self, name: str, required: bool = False) -> Optional[str]:
        key = 'INPUT_' + name.replace(' ', '_').upper()
        value = self.environ.get(key, '').strip()
        if not value:
            if required:
                raise MissingInputError(name)
            return None
        return value

    # Variables

    def get_variable(self, name: str) -> Optional[str]:
        key = variable_env_name(name)
        value = self.environ.get(key)
        if value is None:
            value = self.environ.get('SECRET_' + key)
        return value

    def _variable_names(self, listing: str) -> List[str]:
        raw = self.environ.get(listing)
        if not raw:
            return []
        try:
            names = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("%s is not valid JSON; ignoring it", listing)
            return []
        return [name for name in names if isinstance(name, str)]

    def get_variables(self) -> List[Tuple[str, str]]:
        """Public and secret pipeline variables as (name, value) pairs"""
        variables = []
        for listing in ("VSTS_PUBLIC_VARIABLES", "VSTS_SECRET_VARIABLES"):
            for name in self._variable_names(listing):
                value = self.get_variable(name)
                if value is not None:
                    variables.append((name, value))
        return variables

    def set_variable(self, name: str, value: str, secret: bool = False) -> None:
        """Publish a variable to later steps and to this process"""
        self.environ[variable_env_name(name)] = value
        properties = f"variable={_escape_property(name)};"
        if secret:
            properties += "issecret=true;"
        self._command('task.setvariable', properties, value)

    def is_build_pipeline(self) -> bool:
        host_type = self.get_variable(VARIABLE_HOST_TYPE) or ''
        return host_type.lower() == 'build'

    # Service endpoints

    def get_endpoint_auth(self, endpoint_id: str, key: str) -> Optional[str]:
        return self.environ.get(f'ENDPOINT_AUTH_PARAMETER_{endpoint_id}_{key.upper()}')

    def get_endpoint_data(self, endpoint_id: str, key: str) -> Optional[str]:
        return self.environ.get(f'ENDPOINT_DATA_{endpoint_id}_{key.upper()}')

    def get_service_principal(self, endpoint_id: str) -> ServicePrincipal:
        """Service principal of an Azure Resource Manager endpoint"""
        return ServicePrincipal(
            client_id=self.get_endpoint_auth(endpoint_id, 'serviceprincipalid') or '',
            secret=self.get_endpoint_auth(endpoint_id, 'serviceprincipalkey') or '',
            tenant_id=self.get_endpoint_auth(endpoint_id, 'tenantid') or '',
            subscription=(
                self.get_endpoint_data(endpoint_id, 'SubscriptionName')
                or self.get_endpoint_data(endpoint_id, 'SubscriptionId')
                or ''
            ),
            environment=self.get_endpoint_data(endpoint_id, 'environment'),
        )

    # Results

    def set_result(self, succeeded: bool, message: str = '') -> None:
        result = 'Succeeded' if succeeded else 'Failed'
        self._command('task.complete', f'result={result};', message)

    def _command(self, command: str, properties: str, data: str) -> None:
        self.stream.write(f"##vso[{command} {properties}]{_escape_data(data)}\n")
        self.stream.flush()

    def task_environment(self, base: Mapping[str, str]) -> Dict[str, str]:
        """Pipeline variables layered under task-provided keys

        Keys already present in ``base`` win; dots in variable names become
        underscores and names are upper-cased.
        """
        env = dict(base)
        for name, value in self.get_variables():
            key = variable_env_name(name)
            if not env.get(key):
                env[key] = value
        return env
