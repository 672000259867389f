import click
import json
import os
from .. import config as config_module
from ..cli_logger import logger
from ..decorators import handle_exceptions

@click.group()
@click.pass_context
def config(ctx):
    """View or edit the pabuilder.toml configuration file."""
    pass

@config.command()
@click.pass_context
@handle_exceptions
def view(ctx):
    """Print pabuilder.toml merged with the built-in defaults."""
    conf = config_module.load_config(path=ctx.obj["path"])
    settings = config_module.build_settings(conf)
    effective = {
        "url": settings.archive.url,
        "archive": settings.archive.local_filename,
        "folder": settings.archive.extracted_folder_name,
        "package": settings.package,
        "min_version": settings.min_version,
        "sha256": settings.archive.sha256 or "",
        "fetch_tool": settings.fetch_tool or "",
        "output_dir": settings.output_dir,
    }
    click.echo(json.dumps(effective, indent=4))

@config.command()
@click.argument('key')
@click.pass_context
def get(ctx, key):
    """Get a value from the [portaudio] section."""
    conf = config_module.load_config(path=ctx.obj["path"])
    try:
        click.echo(conf[config_module.SECTION][key])
    except KeyError:
        logger.error(f"Error: Key '{key}' not found in {config_module.CONFIG_FILE}")

@config.command()
@click.argument('key', type=click.Choice(["url", "archive", "folder", "package", "min_version", "sha256", "fetch_tool"]))
@click.argument('value')
@click.pass_context
def set(ctx, key, value):
    """Set a value in the [portaudio] section."""
    conf = config_module.load_config(path=ctx.obj["path"])
    conf.setdefault(config_module.SECTION, {})[key] = value
    if config_module.save_config(conf, path=ctx.obj["path"]):
        logger.info(f"Set '{key}' to '{value}' in {os.path.join(ctx.obj['path'], config_module.CONFIG_FILE)}")
