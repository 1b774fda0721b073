# edge_deploy/cli/commands/doctor.py
"""System diagnostic command"""

import sys

import click
from rich import box
from rich.table import Table

from ..utils.output import console
from ...api.exceptions import EdgeDeployError
from ...constants import AZURE_CLI, DOCKER, IOTEDGEDEV
from ...core import CommandRunner, IotEdgeDev
from ...services import ConfigService


class DiagnosticCheck:
    """Base class for diagnostic checks"""

    def __init__(self, name: str, description: str):
        self.name = name
        self.description = description
        self.passed = False
        self.message = ""
        self.fixes = []

    def run(self, ctx) -> 'DiagnosticCheck':
        """Run the diagnostic check"""
        raise NotImplementedError

    def fix(self, ctx) -> bool:
        """Attempt to fix the issue"""
        return False


class ToolCheck(DiagnosticCheck):
    """Check an external tool is on PATH"""

    def __init__(self, tool: str, purpose: str):
        super().__init__(tool, f"Required for {purpose}")
        self.tool = tool

    def run(self, ctx):
        runner = ctx.obj.runner or CommandRunner()
        location = runner.which(self.tool)
        if location:
            self.passed = True
            self.message = location
        else:
            self.passed = False
            self.message = f"{self.tool} not found on PATH ({self.description.lower()})"
        return self


class IotEdgeDevCheck(DiagnosticCheck):
    """Check the pinned iotedgedev version is installed"""

    def __init__(self):
        super().__init__(IOTEDGEDEV, "Pinned module build tool")

    def _tool(self, ctx) -> IotEdgeDev:
        return IotEdgeDev(ctx.obj.runner or CommandRunner(), ctx.obj.config.iotedgedev_version)

    def run(self, ctx):
        tool = self._tool(ctx)
        installed = tool.installed_version()

        if installed is None:
            self.passed = False
            self.message = "Not installed"
            self.fixes = [f"pip install {IOTEDGEDEV}=={tool.version}"]
        elif not tool.is_locked_version(installed):
            self.passed = False
            self.message = f"Version {installed} installed, {tool.version} expected"
            self.fixes = [f"pip install {IOTEDGEDEV}=={tool.version}"]
        else:
            self.passed = True
            self.message = f"Version {installed}"

        return self

    def fix(self, ctx):
        try:
            self._tool(ctx).setup()
        except EdgeDeployError as e:
            console.print(f"[red]{e}[/red]")
            return False
        return True


class ConfigCheck(DiagnosticCheck):
    """Check the configuration file loads"""

    def __init__(self):
        super().__init__("Configuration", "Configuration file is valid")

    def run(self, ctx):
        service = ConfigService(ctx.obj.config_path)
        try:
            config = service.load_config()
        except EdgeDeployError as e:
            self.passed = False
            self.message = str(e)
            return self

        self.passed = True
        source = service.config_path if service.config_path.exists() else "defaults"
        self.message = f"{source} (iotedgedev {config.iotedgedev_version})"
        return self


@click.command()
@click.option('--fix', is_flag=True, help='Attempt to fix issues automatically')
@click.option('--check', multiple=True,
              type=click.Choice(['all', 'config', 'az', 'docker', 'iotedgedev']),
              default=['all'],
              help='Specific checks to run')
@click.pass_context
def doctor(ctx, fix, check):
    """Run system diagnostics

    Checks that the external tools this task drives are available and
    that the configuration file is valid.

    Examples:

        # Run all checks
        edge-deploy doctor

        # Install the pinned iotedgedev if it is missing
        edge-deploy doctor --check iotedgedev --fix
    """
    console.print("[bold]Edge Deploy Diagnostics[/bold]\n")

    all_checks = {
        'config': ConfigCheck(),
        'az': ToolCheck(AZURE_CLI, "deployments and Azure Container Registry credentials"),
        'docker': ToolCheck(DOCKER, "registry login during push"),
        'iotedgedev': IotEdgeDevCheck(),
    }

    if 'all' in check:
        checks_to_run = list(all_checks.values())
    else:
        checks_to_run = [all_checks[c] for c in check if c in all_checks]

    failed_checks = []
    for diagnostic_check in checks_to_run:
        diagnostic_check.run(ctx)
        if not diagnostic_check.passed:
            failed_checks.append(diagnostic_check)

    table = Table(title="Diagnostic Results", box=box.ROUNDED)
    table.add_column("Check", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Details")

    for diagnostic_check in checks_to_run:
        status = "[green]✓ PASS[/green]" if diagnostic_check.passed else "[red]✗ FAIL[/red]"
        table.add_row(diagnostic_check.name, status, diagnostic_check.message)

    console.print(table)

    if fix and failed_checks:
        console.print("\n[yellow]Attempting automatic fixes...[/yellow]\n")

        still_failing = []
        for diagnostic_check in failed_checks:
            if diagnostic_check.fixes and diagnostic_check.fix(ctx):
                console.print(f"[green]✓[/green] Fixed: {diagnostic_check.name}")
            else:
                console.print(f"[red]✗[/red] Could not fix: {diagnostic_check.name}")
                still_failing.append(diagnostic_check)
        failed_checks = still_failing

    if failed_checks:
        console.print(f"\n[red]{len(failed_checks)} check(s) failed[/red]")
        if not fix:
            console.print("Run with --fix to attempt automatic fixes")
        sys.exit(1)

    console.print("\n[green]All checks passed![/green]")
