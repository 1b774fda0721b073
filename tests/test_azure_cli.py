"""Tests for the Azure CLI wrapper"""

import pytest

from edge_deploy.api.exceptions import SubprocessError
from edge_deploy.core.azure_cli import CLI_REPAIR_COMMANDS, AzureCli


def test_extension_already_installed_is_fine(runner):
    runner.respond(("az", "extension", "add"), (1, "", "The extension azure-iot already exists."))

    AzureCli(runner).add_extension("azure-iot")

    assert runner.invocations("sudo") == []


def test_extension_add_repairs_cli_once(runner):
    runner.respond(
        ("az", "extension", "add"),
        (1, "", "Traceback ...\nImportError: libffi.so.5: cannot open shared object file"),
        (0, "", ""),
    )

    AzureCli(runner).add_extension("azure-iot")

    assert [c.args for c in runner.invocations("sudo")] == CLI_REPAIR_COMMANDS
    assert len(runner.invocations("az", "extension", "add")) == 2


def test_extension_add_other_failure(runner):
    runner.respond(("az", "extension", "add"), (2, "", "network unreachable"))

    with pytest.raises(SubprocessError) as exc_info:
        AzureCli(runner).add_extension("azure-iot")
    assert "network unreachable" in str(exc_info.value)


def test_show_json_requires_json_output(runner):
    runner.respond(("az", "acr"), (0, "not json", ""))

    with pytest.raises(SubprocessError):
        AzureCli(runner).acr_credentials("myacr")


def test_subprocess_error_omits_secret_arguments():
    error = SubprocessError(["az", "login", "-p", "sp-secret"], 1, "denied")
    assert "sp-secret" not in str(error)
    assert "az login" in str(error)
