"""Build command implementation"""

import sys

import click

from ..utils.output import console, print_error
from ...api.exceptions import EdgeDeployError
from ...services import BuildOptions, BuildService


@click.command()
@click.option('--template-file', required=True, type=click.Path(dir_okay=False),
              help='Deployment template file (deployment.template.json)')
@click.option('--platform', default='amd64', show_default=True,
              help='Default platform for module images')
@click.pass_context
def build(ctx, template_file, platform):
    """Build module images with iotedgedev

    Installs the pinned iotedgedev if needed, builds every module in the
    solution and records the generated deployment file path in the
    DEPLOYMENT_FILE_PATH output variable.

    Example:

        edge-deploy build --template-file deployment.template.json --platform arm32v7
    """
    service = BuildService(ctx.obj.host, ctx.obj.config, ctx.obj.runner)
    try:
        path = service.build(BuildOptions(template_file=template_file, platform=platform))
    except EdgeDeployError as e:
        print_error(e)
        sys.exit(1)

    if path:
        console.print(f"[green]✓[/green] Generated deployment file: [cyan]{path}[/cyan]")
    else:
        console.print("[green]✓[/green] Build finished [yellow](deployment file path not reported)[/yellow]")
