"""Tests for the iotedgedev helper"""

import sys

import pytest

from edge_deploy.api.exceptions import SubprocessError
from edge_deploy.core.iotedgedev import (
    IotEdgeDev,
    compose_environment,
    extract_deployment_path,
    registry_environment,
)
from edge_deploy.core.pipeline_host import PipelineHost
from edge_deploy.models.credential import Credential


def test_extract_first_expanding_line():
    output = (
        "Building module SampleModule\n"
        "Expanding 'deployment.template.json' to 'config/deployment.amd64.json'\n"
        "Expanding 'deployment.debug.template.json' to 'config/deployment.debug.amd64.json'\n"
    )
    assert extract_deployment_path(output) == "config/deployment.amd64.json"


def test_extract_without_expanding_line():
    assert extract_deployment_path("BUILD COMPLETE") is None
    assert extract_deployment_path("") is None


def test_task_keys_win_over_pipeline_variables():
    environ = {
        "VSTS_PUBLIC_VARIABLES": '["Build.SourceBranch", "container.registry.server"]',
        "BUILD_SOURCEBRANCH": "refs/heads/main",
        "CONTAINER_REGISTRY_SERVER": "from-variable.io",
    }
    host = PipelineHost(environ=environ)

    env = compose_environment(
        host,
        {"CONTAINER_REGISTRY_SERVER": "myacr.azurecr.io", "CONFIG_OUTPUT_DIR": None},
        base={"PATH": "/usr/bin", "CONTAINER_REGISTRY_SERVER": "from-process.io"},
    )

    assert env["CONTAINER_REGISTRY_SERVER"] == "myacr.azurecr.io"
    assert env["BUILD_SOURCEBRANCH"] == "refs/heads/main"
    assert env["PATH"] == "/usr/bin"
    assert "CONFIG_OUTPUT_DIR" not in env


def test_empty_task_value_is_filled_from_pipeline_variable():
    environ = {
        "VSTS_PUBLIC_VARIABLES": '["BYPASS_MODULES"]',
        "BYPASS_MODULES": "SimulatedTemperatureSensor",
    }
    env = compose_environment(PipelineHost(environ=environ), {"BYPASS_MODULES": ""}, base={})
    assert env["BYPASS_MODULES"] == "SimulatedTemperatureSensor"


def test_registry_environment():
    env = registry_environment(Credential("myacr.azurecr.io", "u", "p"), "ModuleA")
    assert env == {
        "BYPASS_MODULES": "ModuleA",
        "CONTAINER_REGISTRY_SERVER": "myacr.azurecr.io",
        "CONTAINER_REGISTRY_USERNAME": "u",
        "CONTAINER_REGISTRY_PASSWORD": "p",
    }


def test_setup_skips_install_for_locked_version(runner):
    runner.respond(("iotedgedev", "--version"), (0, "iotedgedev, version 1.1.0\n", ""))

    assert IotEdgeDev(runner, "1.1.0").setup() == "1.1.0"
    assert runner.invocations(sys.executable) == []


def test_setup_installs_pinned_version(runner):
    runner.respond(
        ("iotedgedev", "--version"),
        (0, "iotedgedev, version 0.82.0\n", ""),
        (0, "iotedgedev, version 2.1.0\n", ""),
    )

    assert IotEdgeDev(runner, "2.1.0").setup() == "2.1.0"
    (install,) = runner.invocations(sys.executable)
    assert install.args == [sys.executable, "-m", "pip", "install", "iotedgedev==2.1.0"]


def test_setup_fails_when_install_fails(runner):
    runner.respond(("iotedgedev", "--version"), (127, "", "not found"))
    runner.respond((sys.executable, "-m", "pip"), (1, "", "No matching distribution"))

    with pytest.raises(SubprocessError):
        IotEdgeDev(runner, "1.1.0").setup()


def test_locked_version_comparison():
    tool = IotEdgeDev(version="1.1")
    assert tool.is_locked_version("1.1.0")
    assert not tool.is_locked_version("1.2.0")


def test_push_does_not_rebuild(runner):
    IotEdgeDev(runner).push("deployment.template.json", "arm32v7", env={}, cwd="/src")

    (call,) = runner.calls
    assert call.args == [
        "iotedgedev", "push", "--no-build",
        "--file", "deployment.template.json", "--platform", "arm32v7",
    ]
    assert call.streamed
    assert call.cwd == "/src"


def test_secret_pipeline_variables_reach_the_environment():
    environ = {
        "VSTS_PUBLIC_VARIABLES": '["Build.SourceBranch"]',
        "VSTS_SECRET_VARIABLES": '["CONTAINER_REGISTRY_PASSWORD_2"]',
        "BUILD_SOURCEBRANCH": "refs/heads/main",
        "SECRET_CONTAINER_REGISTRY_PASSWORD_2": "s3cret",
    }

    env = compose_environment(PipelineHost(environ=environ), {}, base={})

    assert env["CONTAINER_REGISTRY_PASSWORD_2"] == "s3cret"
    assert env["BUILD_SOURCEBRANCH"] == "refs/heads/main"
