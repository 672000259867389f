import click

from ..decorators import handle_exceptions
from ..utils import infer_target_triple


@click.command()
@click.argument("linker")
@handle_exceptions
def triple(linker):
    """Print the target triple inferred from a cross LINKER path."""
    click.echo(infer_target_triple(linker))
