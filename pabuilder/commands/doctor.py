import os
import shutil
import sys

import click

from .. import config as config_module
from ..cli_logger import logger
from ..downloader import select_fetch_tool
from ..models import HostPlatform, detect_host_platform
from ..utils import cross_target_from_env
from ..errors import BuildError
from ..decorators import handle_exceptions

BUILD_TOOLS = {
    HostPlatform.UNIX_GENERIC: ["make"],
    HostPlatform.LINUX: ["make"],
    HostPlatform.WINDOWS: ["cmake"],
}


def required_tools(host_platform, fetch_tool=None):
    tools = ["pkg-config"] if host_platform is not HostPlatform.WINDOWS else []
    fetcher = select_fetch_tool(host_platform, fetch_tool)
    if fetcher != "requests":
        tools.append(fetcher)
    return tools + BUILD_TOOLS[host_platform]


def check_environment(settings, environ):
    """Log which external tools are present; return True when all are."""
    host_platform = detect_host_platform(settings.platform)
    logger.info(f"Checking build environment for {host_platform.value}...")
    all_ok = True

    for tool in required_tools(host_platform, settings.fetch_tool):
        path = shutil.which(tool)
        if path:
            logger.step_info(f"{tool}: {path}", indent=2)
        else:
            logger.warning(f"{tool} was not found on PATH.")
            all_ok = False

    try:
        target = cross_target_from_env(environ)
    except BuildError as e:
        logger.warning(str(e))
        all_ok = False
    else:
        logger.step_info(f"target: {target or 'native'}", indent=2)

    return all_ok


@click.command()
@click.pass_context
@click.option("--platform", "platform_name", type=click.Choice([p.value for p in HostPlatform]), default=None,
              help="Check the tools of another platform family.")
@handle_exceptions
def doctor(ctx, platform_name):
    """Check that the tools needed for a source build are installed."""
    conf = config_module.load_config(path=ctx.obj["path"])
    settings = config_module.build_settings(conf, platform=platform_name)
    if check_environment(settings, os.environ):
        logger.success("Environment check completed successfully.")
    else:
        logger.error("Environment check found issues. Please review the warnings above.")
        sys.exit(1)
