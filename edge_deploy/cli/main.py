# edge_deploy/cli/main.py
"""Main CLI entry point for edge-deploy"""

import logging
import sys
from typing import Optional

import click
from rich.logging import RichHandler

from ..__version__ import __version__
from ..api.exceptions import ConfigError
from ..constants import APP_NAME, LOG_FORMAT
from ..core import CommandRunner, PipelineHost
from ..models import EdgeDeployConfig
from ..services import ConfigService

from .commands import run, build, push, deploy, doctor
from .utils.output import console


def setup_logging(verbose: bool = False, debug: bool = False, default_level: str = "WARNING") -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
        default_level: Level used when neither flag is given
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.getLevelName(default_level)
        if not isinstance(level, int):
            level = logging.WARNING

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ],
        force=True,
    )


class Context:
    """CLI context object with lazy configuration loading"""

    def __init__(self, config_path: Optional[str] = None,
                 host: Optional[PipelineHost] = None,
                 runner: Optional[CommandRunner] = None):
        self.config_path = config_path
        self.verbose: bool = False
        self.debug: bool = False
        self._config: Optional[EdgeDeployConfig] = None
        self._host = host
        self.runner = runner

    @property
    def config(self) -> EdgeDeployConfig:
        if self._config is None:
            self._config = ConfigService(self.config_path).load_config()
        return self._config

    @property
    def host(self) -> PipelineHost:
        if self._host is None:
            self._host = PipelineHost()
        return self._host


@click.group(name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.option('-c', '--config', 'config_path', type=click.Path(dir_okay=False),
              help='Configuration file (default: .edge-deploy.yaml)')
@click.version_option(version=__version__, prog_name=APP_NAME)
@click.pass_context
def cli(ctx, verbose, debug, quiet, config_path):
    """Edge Deploy - build, push and deploy IoT Edge modules

    Wraps iotedgedev, the Azure CLI and docker so a pipeline can build
    module images, push them with registry credentials filled into the
    deployment manifest, and create the deployment on an IoT Hub.
    """
    if ctx.obj is None:
        ctx.obj = Context(config_path)
    elif config_path:
        ctx.obj.config_path = config_path
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug

    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        try:
            default_level = ctx.obj.config.log_level
        except ConfigError as e:
            console.print(f"[red]Error:[/red] {e}")
            sys.exit(1)
        setup_logging(verbose=verbose, debug=debug, default_level=default_level)


# Register commands
cli.add_command(run.run)
cli.add_command(build.build)
cli.add_command(push.push)
cli.add_command(deploy.deploy)
cli.add_command(doctor.doctor)


def main():
    """Main entry point for the CLI application

    This function handles:
    - Keyboard interrupts
    - Unexpected exceptions with proper error display
    """
    try:
        cli(prog_name=APP_NAME)

    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)

    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
