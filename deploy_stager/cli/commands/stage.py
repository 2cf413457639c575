# deploy_stager/cli/commands/stage.py
"""Stage command implementation"""

import json
import sys

import click
from rich.console import Console

from ..utils.output import format_stage_result, format_stage_error
from ...api import Stager
from ...api.exceptions import StagerError
from ...constants import ENV_CONFIG_PATH

console = Console()


@click.command()
@click.argument('config_file', envvar=ENV_CONFIG_PATH, type=click.Path(dir_okay=False))
@click.option('-r', '--revision', required=True, help='Revision to stage and ship')
@click.option('--host', help='Remote host (overrides the configuration file)')
@click.option('--json', 'as_json', is_flag=True, help='Print the result as JSON')
@click.pass_context
def stage(ctx, config_file, revision, host, as_json):
    """Stage a revision and unpack it on the remote host

    The revision is checked out (or copied from the local cache), built,
    filtered through rsync_exclude, stamped with a REVISION file, packed
    into a single archive and unpacked into releases_path on the host.

    Examples:

        # Stage a commit using settings from deploy.yml
        deploy-stager stage deploy.yml --revision abc123

        # Override the target host
        deploy-stager stage deploy.yml -r v1.2.0 --host deploy@web1:2222
    """
    try:
        stager = Stager.from_file(config_file, overrides={'host': host})

        if not as_json:
            console.print(f"Staging revision [bold]{revision}[/bold] "
                          f"→ [cyan]{stager.strategy.executor.target}[/cyan]")

        result = stager.deploy(revision)

    except StagerError as e:
        format_stage_error(e)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, default=str))
    else:
        format_stage_result(result)
