"""Pipeline task entry command"""

import sys

import click

from ..utils.output import format_task_result
from ...services import TaskService


@click.command()
@click.option('--action', help='Action to run (default: the task input "action")')
@click.pass_context
def run(ctx, action):
    """Run the action selected by the pipeline task inputs

    Reads inputs, variables and service endpoints the way the Azure
    Pipelines agent exposes them (INPUT_*, ENDPOINT_*), runs one of
    "Build module images", "Push module images" or
    "Deploy to IoT Edge devices", and reports the result back to the agent.

    Example:

        INPUT_ACTION="Build module images" edge-deploy run
    """
    service = TaskService(ctx.obj.host, ctx.obj.config, ctx.obj.runner)
    result = service.run(action)

    format_task_result(result)
    if not result.is_success:
        sys.exit(1)
