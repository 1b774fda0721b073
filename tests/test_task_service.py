"""Tests for task input mapping and result reporting"""

import json

from edge_deploy.models.credential import RegistryType
from edge_deploy.models.manifest import DeploymentManifest
from edge_deploy.models.result import OperationStatus
from edge_deploy.services import TaskService

from conftest import add_arm_endpoint, add_docker_endpoint, manifest_with_credentials, write_json


def test_build_action_from_inputs(host, environ, host_output, runner, tmp_path):
    template = tmp_path / "deployment.template.json"
    template.write_text("{}")
    environ.update({
        "INPUT_ACTION": "Build module images",
        "INPUT_TEMPLATEFILEPATH": str(template),
        "INPUT_DEFAULTPLATFORM": "arm32v7",
    })
    runner.respond(("iotedgedev", "--version"), (0, "1.1.0", ""))
    runner.respond(("iotedgedev", "build"),
                   (0, "Expanding 'deployment.template.json' to 'config/deployment.arm32v7.json'", ""))

    result = TaskService(host, runner=runner).run()

    assert result.is_success
    assert result.action == "Build module images"
    assert result.output_variables == {"DEPLOYMENT_FILE_PATH": "config/deployment.arm32v7.json"}
    assert host_output.getvalue().endswith("##vso[task.complete result=Succeeded;]\n")


def test_missing_input_fails_task(host, environ, host_output, runner):
    environ["INPUT_ACTION"] = "Build module images"

    result = TaskService(host, runner=runner).run()

    assert result.status == OperationStatus.FAILED
    assert result.errors[0].code == "ED003"
    assert "templateFilePath" in result.message
    assert "result=Failed;" in host_output.getvalue()
    assert runner.calls == []


def test_unknown_action(host, runner):
    result = TaskService(host, runner=runner).run("Bake module images")

    assert not result.is_success
    assert "Bake module images" in result.message


def test_push_options_for_acr(host, environ):
    environ.update({
        "INPUT_CONTAINERREGISTRYTYPE": "Azure Container Registry",
        "INPUT_AZURESUBSCRIPTIONENDPOINT": "arm",
        "INPUT_AZURECONTAINERREGISTRY": json.dumps({"loginServer": "myacr.azurecr.io"}),
        "INPUT_TEMPLATEFILEPATH": "deployment.template.json",
        "INPUT_DEFAULTPLATFORM": "amd64",
    })

    options = TaskService(host).push_options()

    assert options.registry_type == RegistryType.AZURE_CONTAINER_REGISTRY
    assert options.endpoint.endpoint_id == "arm"
    assert options.endpoint.registry == {"loginServer": "myacr.azurecr.io"}
    assert options.bypass_modules == ""


def test_push_options_for_generic_registry(host, environ):
    environ.update({
        "INPUT_CONTAINERREGISTRYTYPE": "Generic Container Registry",
        "INPUT_DOCKERREGISTRYENDPOINT": "dockerhub",
        "INPUT_TEMPLATEFILEPATH": "deployment.template.json",
        "INPUT_DEFAULTPLATFORM": "amd64",
        "INPUT_BYPASSMODULES": "ModuleA,ModuleB",
    })

    options = TaskService(host).push_options()

    assert options.registry_type == RegistryType.GENERIC
    assert options.endpoint.endpoint_id == "dockerhub"
    assert options.bypass_modules == "ModuleA,ModuleB"


def test_deploy_action_reports_deployment_id(host, environ, runner, tmp_path):
    add_arm_endpoint(environ)
    deployment = write_json(tmp_path / "deployment.json", manifest_with_credentials(None))
    environ.update({
        "INPUT_DEPLOYMENTFILEPATH": str(deployment),
        "INPUT_IOTHUBNAME": "myhub",
        "INPUT_DEPLOYMENTID": "Nightly Build",
        "INPUT_CONNECTEDSERVICENAMEARM": "arm",
        "INPUT_PRIORITY": "5",
        "INPUT_DEVICEOPTION": "Multiple Devices",
        "INPUT_TARGETCONDITION": "tags.building='43'",
    })

    result = TaskService(host, runner=runner).run("Deploy to IoT Edge devices")

    assert result.is_success, result.message
    assert result.output_variables["DEPLOYMENT_ID"] == "nightlybuild"


def test_unexpected_error_still_fails_task(host, environ, host_output, runner, tmp_path, monkeypatch):
    template = tmp_path / "deployment.template.json"
    template.write_text("{}")
    deployment = write_json(tmp_path / "deployment.json", manifest_with_credentials({
        "hub": {"address": "docker.io", "username": "$U", "password": "$P"},
    }))
    add_docker_endpoint(environ)
    environ.update({
        "INPUT_CONTAINERREGISTRYTYPE": "Generic Container Registry",
        "INPUT_DOCKERREGISTRYENDPOINT": "dockerhub",
        "INPUT_TEMPLATEFILEPATH": str(template),
        "INPUT_DEFAULTPLATFORM": "amd64",
        "_DEPLOYMENT_FILE_PATH": str(deployment),
    })
    runner.respond(("iotedgedev", "--version"), (0, "1.1.0", ""))

    def disk_full(self, path=None):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(DeploymentManifest, "save", disk_full)

    result = TaskService(host, runner=runner).run("Push module images")

    assert result.status == OperationStatus.FAILED
    assert result.errors[0].code is None
    assert "No space left on device" in result.message
    assert host_output.getvalue().splitlines()[-1].startswith("##vso[task.complete result=Failed;]")
