import sys

import click

from .. import config as config_module
from ..decorators import handle_exceptions
from ..utils import pkg_config


@click.command()
@click.pass_context
@handle_exceptions
def probe(ctx):
    """Check whether a recent enough PortAudio is installed on the host."""
    conf = config_module.load_config(path=ctx.obj["path"])
    settings = config_module.build_settings(conf)
    result = pkg_config.probe(settings.package, settings.min_version)
    if not result.found:
        click.echo(f"{settings.package} >= {settings.min_version}: not found")
        sys.exit(1)
    click.echo(f"{settings.package} {result.version}")
