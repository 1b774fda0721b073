"""Shared fixtures for edge-deploy tests"""

import io
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

from edge_deploy.core.command_runner import CommandResult, CommandRunner
from edge_deploy.core.pipeline_host import PipelineHost
from edge_deploy.models.credential import ServicePrincipal


@dataclass
class Call:
    args: List[str]
    env: Optional[Dict[str, str]] = None
    cwd: Optional[str] = None
    streamed: bool = False


@dataclass
class FakeRunner(CommandRunner):
    """Records commands and answers them from canned responses

    ``responses`` maps an argument prefix to ``(returncode, stdout, stderr)``
    or to a list of those, consumed in order with the last one repeating.
    The longest matching prefix wins; unmatched commands succeed silently.
    """
    responses: Dict[Tuple[str, ...], object] = field(default_factory=dict)
    tools: Tuple[str, ...] = ("az", "docker", "iotedgedev")
    calls: List[Call] = field(default_factory=list)

    def __post_init__(self):
        self.cwd = None

    def respond(self, prefix: Tuple[str, ...], *answers) -> None:
        self.responses[tuple(prefix)] = list(answers) if len(answers) > 1 else answers[0]

    def which(self, tool):
        return f"/usr/bin/{tool}" if tool in self.tools else None

    def _answer(self, args) -> CommandResult:
        best = None
        for prefix in self.responses:
            if tuple(args[:len(prefix)]) == prefix and (best is None or len(prefix) > len(best)):
                best = prefix
        if best is None:
            return CommandResult(args=list(args), returncode=0)

        answer = self.responses[best]
        if isinstance(answer, list):
            answer = answer.pop(0) if len(answer) > 1 else answer[0]
        code, stdout, stderr = answer
        return CommandResult(args=list(args), returncode=code, stdout=stdout, stderr=stderr)

    def run(self, args, env=None, check=False, cwd=None):
        self.calls.append(Call(list(args), env, str(cwd) if cwd else None))
        result = self._answer(args)
        if check:
            result.check()
        return result

    def stream(self, args, env=None, check=True, cwd=None):
        self.calls.append(Call(list(args), env, str(cwd) if cwd else None, streamed=True))
        result = self._answer(args)
        if check:
            result.check()
        return result

    def invocations(self, *prefix) -> List[Call]:
        return [c for c in self.calls if tuple(c.args[:len(prefix)]) == prefix]


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def environ():
    return {}


@pytest.fixture
def host_output():
    return io.StringIO()


@pytest.fixture
def host(environ, host_output):
    return PipelineHost(environ=environ, stream=host_output)


@pytest.fixture
def principal():
    return ServicePrincipal(
        client_id="sp-client",
        secret="sp-secret",
        tenant_id="tenant-1",
        subscription="My Subscription",
    )


def add_arm_endpoint(environ: Dict[str, str], endpoint_id: str = "arm") -> None:
    environ[f"ENDPOINT_AUTH_PARAMETER_{endpoint_id}_SERVICEPRINCIPALID"] = "sp-client"
    environ[f"ENDPOINT_AUTH_PARAMETER_{endpoint_id}_SERVICEPRINCIPALKEY"] = "sp-secret"
    environ[f"ENDPOINT_AUTH_PARAMETER_{endpoint_id}_TENANTID"] = "tenant-1"
    environ[f"ENDPOINT_DATA_{endpoint_id}_SUBSCRIPTIONNAME"] = "My Subscription"
    environ[f"ENDPOINT_DATA_{endpoint_id}_ENVIRONMENT"] = "AzureCloud"


def add_docker_endpoint(environ: Dict[str, str], endpoint_id: str = "dockerhub",
                        registry: str = "https://index.docker.io/v1/",
                        username: str = "alice", password: str = "hunter2") -> None:
    environ[f"ENDPOINT_AUTH_PARAMETER_{endpoint_id}_REGISTRY"] = registry
    environ[f"ENDPOINT_AUTH_PARAMETER_{endpoint_id}_USERNAME"] = username
    environ[f"ENDPOINT_AUTH_PARAMETER_{endpoint_id}_PASSWORD"] = password


def manifest_with_credentials(credentials: Optional[Dict[str, Dict[str, str]]]) -> Dict:
    settings = {"minDockerVersion": "v1.25", "loggingOptions": ""}
    if credentials is not None:
        settings["registryCredentials"] = credentials
    return {
        "modulesContent": {
            "$edgeAgent": {
                "properties.desired": {
                    "schemaVersion": "1.0",
                    "runtime": {"type": "docker", "settings": settings},
                    "modules": {
                        "SampleModule": {
                            "settings": {"image": "myregistry.azurecr.io/samplemodule:0.0.1-amd64"}
                        }
                    },
                }
            },
            "$edgeHub": {"properties.desired": {"schemaVersion": "1.0"}},
        }
    }


def write_json(path: Path, data) -> Path:
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path
