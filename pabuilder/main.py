import click
from . import __version__
from .commands import clean, config, doctor, log, probe, resolve, triple


@click.group()
@click.version_option(__version__, prog_name="pabuilder")
@click.option("--path", "-p", default=".", help="Directory holding pabuilder.toml.")
@click.pass_context
def cli(ctx, path):
    """Provide a linkable PortAudio for a downstream build."""
    ctx.obj = {"path": path}

cli.add_command(resolve)
cli.add_command(probe)
cli.add_command(triple)
cli.add_command(doctor)
cli.add_command(clean)
cli.add_command(config)
cli.add_command(log)

if __name__ == '__main__':
    cli()
