# deploy_stager/cli/commands/check.py
"""Dependency check command"""

import sys

import click
from rich.console import Console

from ..utils.output import format_check_result
from ...api import Stager
from ...api.exceptions import StagerError
from ...constants import ENV_CONFIG_PATH

console = Console()


@click.command()
@click.argument('config_file', envvar=ENV_CONFIG_PATH, type=click.Path(dir_okay=False))
@click.option('--host', help='Remote host (overrides the configuration file)')
@click.pass_context
def check(ctx, config_file, host):
    """Check that local and remote commands are available

    Verifies the source control and compression commands on this machine
    and the decompression command on the remote host.
    """
    try:
        stager = Stager.from_file(config_file, overrides={'host': host})
        result = stager.check()
    except StagerError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)

    format_check_result(result)

    if not result.is_valid:
        console.print(f"\n[red]{len(result.errors)} check(s) failed[/red]")
        sys.exit(1)

    console.print("\n[green]All checks passed[/green]")
