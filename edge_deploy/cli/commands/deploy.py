"""Deploy command implementation"""

import sys

import click
from rich.table import Table

from ..utils.output import console, print_error
from ...api.exceptions import EdgeDeployError
from ...constants import DEVICE_OPTION_MULTIPLE, DEVICE_OPTION_SINGLE
from ...services import DeployOptions, DeployService


@click.command()
@click.option('--deployment-file', required=True,
              help='Deployment file path, wildcards allowed')
@click.option('--hub', 'hub_name', required=True, help='IoT Hub name')
@click.option('--deployment-id', required=True, help='IoT Edge deployment id')
@click.option('--endpoint', required=True, help='Azure Resource Manager service endpoint id')
@click.option('--priority', default='0', show_default=True, help='Deployment priority')
@click.option('--device-id', help='Deploy to a single device')
@click.option('--target-condition', help='Deploy to devices matching a condition')
@click.pass_context
def deploy(ctx, deployment_file, hub_name, deployment_id, endpoint, priority,
           device_id, target_condition):
    """Create an IoT Edge deployment on an IoT Hub

    Logs in with the endpoint's service principal, replaces any existing
    deployment with the same id, and logs out again whatever the outcome.

    Examples:

        edge-deploy deploy --deployment-file 'config/*.json' --hub myhub \\
            --deployment-id release-42 --endpoint arm --device-id edge01

        edge-deploy deploy --deployment-file config/deployment.amd64.json --hub myhub \\
            --deployment-id release-42 --endpoint arm --target-condition "tags.env='prod'"
    """
    if bool(device_id) == bool(target_condition):
        console.print("[red]Error:[/red] Specify exactly one of --device-id or --target-condition")
        sys.exit(1)

    options = DeployOptions(
        deployment_file=deployment_file,
        hub_name=hub_name,
        deployment_id=deployment_id,
        service_endpoint=endpoint,
        priority=priority,
        device_option=DEVICE_OPTION_SINGLE if device_id else DEVICE_OPTION_MULTIPLE,
        device_id=device_id,
        target_condition=target_condition,
    )

    service = DeployService(ctx.obj.host, ctx.obj.config, ctx.obj.runner)
    try:
        record = service.deploy(options)
    except EdgeDeployError as e:
        print_error(e)
        sys.exit(1)

    table = Table(title="Deployment")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("IoT Hub", record.hub_name)
    table.add_row("Deployment id", record.deployment_id)
    table.add_row("Target condition", record.target_condition)
    table.add_row("Priority", str(record.priority))
    table.add_row("Manifest", str(record.manifest_path))

    console.print("[green]✓[/green] Deployment created")
    console.print(table)
