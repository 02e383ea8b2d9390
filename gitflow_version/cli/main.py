"""gitflow-version CLI"""

import click

from gitflow_version import __version__
from gitflow_version.cli.calculate import calculate
from gitflow_version.cli.sync import sync_npm


@click.group()
@click.version_option(__version__, prog_name="gitflow-version")
@click.pass_context
def cli(ctx):
    """
    GitFlow version calculator for Maven and npm artifacts.
    """
    ctx.ensure_object(dict)


cli.add_command(calculate)
cli.add_command(sync_npm)

if __name__ == "__main__":
    cli(obj={})
