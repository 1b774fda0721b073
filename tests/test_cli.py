"""Tests for the edge-deploy command line"""

import pytest
from click.testing import CliRunner

from edge_deploy.__version__ import __version__
from edge_deploy.cli.main import Context, cli

from conftest import FakeRunner, add_arm_endpoint, add_docker_endpoint, manifest_with_credentials, write_json


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("EDGE_DEPLOY_CONFIG", raising=False)
    monkeypatch.delenv("EDGE_DEPLOY_LOG_LEVEL", raising=False)
    monkeypatch.delenv("IOTEDGEDEV_VERSION", raising=False)


def _invoke(args, host, runner):
    return CliRunner().invoke(cli, args, obj=Context(host=host, runner=runner))


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_run_reports_failure_exit_code(host, runner, host_output):
    result = _invoke(["run"], host, runner)

    assert result.exit_code == 1
    assert "##vso[task.complete result=Failed;]Input required: action" in host_output.getvalue()


def test_run_build(host, environ, runner, tmp_path):
    template = tmp_path / "deployment.template.json"
    template.write_text("{}")
    environ.update({
        "INPUT_TEMPLATEFILEPATH": str(template),
        "INPUT_DEFAULTPLATFORM": "amd64",
    })
    runner.respond(("iotedgedev", "--version"), (0, "1.1.0", ""))

    result = _invoke(["run", "--action", "Build module images"], host, runner)

    assert result.exit_code == 0, result.output
    assert len(runner.invocations("iotedgedev", "build")) == 1


def test_push_command(host, environ, runner, tmp_path):
    add_docker_endpoint(environ)
    template = tmp_path / "deployment.template.json"
    template.write_text("{}")
    runner.respond(("iotedgedev", "--version"), (0, "1.1.0", ""))

    result = _invoke(["push", "--template-file", str(template), "--endpoint", "dockerhub"], host, runner)

    assert result.exit_code == 0, result.output
    (push,) = runner.invocations("iotedgedev", "push")
    assert push.env["CONTAINER_REGISTRY_SERVER"] == "https://index.docker.io/v1/"


def test_push_command_with_bad_registry_json(host, runner, tmp_path):
    template = tmp_path / "deployment.template.json"
    template.write_text("{}")

    result = _invoke([
        "push", "--template-file", str(template), "--endpoint", "arm",
        "--registry-type", "acr", "--registry", "{oops",
    ], host, runner)

    assert result.exit_code == 1
    assert runner.calls == []


def test_deploy_requires_one_target(host, runner, tmp_path):
    result = _invoke([
        "deploy", "--deployment-file", "deployment.json", "--hub", "myhub",
        "--deployment-id", "d1", "--endpoint", "arm",
    ], host, runner)

    assert result.exit_code == 1
    assert runner.calls == []


def test_deploy_command(host, environ, runner, tmp_path):
    add_arm_endpoint(environ)
    deployment = write_json(tmp_path / "deployment.json", manifest_with_credentials(None))

    result = _invoke([
        "deploy", "--deployment-file", str(deployment), "--hub", "myhub",
        "--deployment-id", "d1", "--endpoint", "arm", "--device-id", "edge01",
    ], host, runner)

    assert result.exit_code == 0, result.output
    (create,) = runner.invocations("az", "iot", "edge", "deployment", "create")
    assert "deviceId='edge01'" in create.args


def test_doctor_reports_missing_tools(host):
    runner = FakeRunner(tools=())
    result = _invoke(["doctor", "--check", "az", "--check", "docker"], host, runner)
    assert result.exit_code == 1


def test_doctor_passes_with_tools_installed(host, runner):
    runner.respond(("iotedgedev", "--version"), (0, "iotedgedev, version 1.1.0", ""))
    result = _invoke(["doctor"], host, runner)
    assert result.exit_code == 0, result.output


def test_doctor_fix_installs_iotedgedev(host, runner):
    runner.respond(
        ("iotedgedev", "--version"),
        (1, "", "command not found"),
        (1, "", "command not found"),
        (0, "iotedgedev, version 1.1.0", ""),
    )

    result = _invoke(["doctor", "--check", "iotedgedev", "--fix"], host, runner)

    assert result.exit_code == 0, result.output
    assert any(c.args[-1] == "iotedgedev==1.1.0" for c in runner.calls)


def test_invalid_config_file(host, runner, tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("- not\n- a mapping\n")

    result = _invoke(["-c", str(path), "doctor"], host, runner)

    assert result.exit_code == 1
