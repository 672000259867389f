import json

import click

from .. import config as config_module
from .. import pipeline
from ..cli_logger import logger
from ..decorators import handle_exceptions
from ..downloader import FETCH_TOOLS
from ..models import HostPlatform
from ..utils.target import LINKER_ENV_VAR

# Cargo re-runs the build script when either of these changes.
RERUN_ENV_VARS = (config_module.FORCE_BUILD_ENV_VAR, LINKER_ENV_VAR)


def render_directives(directives, output_format):
    if output_format == "cargo":
        lines = [f"cargo:rerun-if-env-changed={name}" for name in RERUN_ENV_VARS]
        return "\n".join(lines + directives.to_cargo())
    if output_format == "flags":
        return " ".join(directives.to_flags())
    return json.dumps(directives.to_dict(), indent=4)


@click.command()
@click.pass_context
@click.option("--out-dir", default=None, help="Install prefix for the static build (default: $OUT_DIR).")
@click.option("--format", "output_format", type=click.Choice(["cargo", "flags", "json"]), default="cargo",
              show_default=True, help="Syntax of the emitted link directives.")
@click.option("--force-build", is_flag=True, help="Skip the pkg-config probe and always build from source.")
@click.option("--platform", "platform_name", type=click.Choice([p.value for p in HostPlatform]), default=None,
              help="Override the detected host platform.")
@click.option("--sha256", default=None, help="Expected sha256 of the source archive.")
@click.option("--fetch-tool", type=click.Choice(FETCH_TOOLS), default=None, help="HTTP tool used for the download.")
@handle_exceptions
def resolve(ctx, out_dir, output_format, force_build, platform_name, sha256, fetch_tool):
    """Make a linkable PortAudio available and print its link directives."""
    conf = config_module.load_config(path=ctx.obj["path"])
    settings = config_module.build_settings(
        conf,
        output_dir=out_dir,
        force_build=force_build,
        platform=platform_name,
        sha256=sha256,
        fetch_tool=fetch_tool,
    )

    result = pipeline.resolve(settings)
    if result.stage is pipeline.Stage.DONE_FOUND:
        logger.success(f"Using system {settings.package} {result.probe.version}.")
    else:
        logger.success(f"Using static PortAudio from {settings.output_dir}")

    click.echo(render_directives(result.directives, output_format))
