"""Push command implementation"""

import sys

import click

from ..utils.output import console, format_rewrite_report, print_error
from ...api.exceptions import EdgeDeployError
from ...core import EndpointReference
from ...models import RegistryType
from ...services import PushOptions, PushService


@click.command()
@click.option('--template-file', required=True, type=click.Path(dir_okay=False),
              help='Deployment template file (deployment.template.json)')
@click.option('--platform', default='amd64', show_default=True,
              help='Default platform for module images')
@click.option('--registry-type', type=click.Choice(['generic', 'acr']), default='generic',
              show_default=True, help='Container registry type')
@click.option('--endpoint', required=True,
              help='Service endpoint id (docker registry, or Azure subscription for ACR)')
@click.option('--registry', 'registry_json',
              help='ACR definition as JSON: {"loginServer": ..., "id": ...}')
@click.option('--bypass-modules', default='', help='Comma separated modules to skip')
@click.pass_context
def push(ctx, template_file, platform, registry_type, endpoint, registry_json, bypass_modules):
    """Push module images and expand registry credentials

    Logs in to the registry, runs iotedgedev push, then replaces
    placeholder registry credentials in the generated deployment file
    with every credential pushed so far in this job.

    Examples:

        edge-deploy push --template-file deployment.template.json --endpoint myDockerHub

        edge-deploy push --template-file deployment.template.json --registry-type acr \\
            --endpoint mySubscription --registry '{"loginServer": "myacr.azurecr.io"}'
    """
    try:
        if registry_type == 'acr':
            options_type = RegistryType.AZURE_CONTAINER_REGISTRY
            reference = EndpointReference.for_acr(endpoint, registry_json)
        else:
            options_type = RegistryType.GENERIC
            reference = EndpointReference(endpoint_id=endpoint)

        service = PushService(ctx.obj.host, ctx.obj.config, ctx.obj.runner)
        report = service.push(PushOptions(
            template_file=template_file,
            platform=platform,
            registry_type=options_type,
            endpoint=reference,
            bypass_modules=bypass_modules,
        ))
    except EdgeDeployError as e:
        print_error(e)
        sys.exit(1)

    console.print("[green]✓[/green] Module images pushed")
    format_rewrite_report(report)
