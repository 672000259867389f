import os
import shlex

from ..cli_logger import logger
from ..errors import ProbeError, ToolExitError, ToolLaunchError
from ..models import LinkDirectives, ProbeResult
from .command_executor import format_command, run_shell_command

PKG_CONFIG = "pkg-config"


def _query(package, *args):
    command = [PKG_CONFIG, *args, package]
    stdout, stderr, returncode = run_shell_command(command)
    if returncode == -1:
        raise ProbeError(
            f"Could not run {PKG_CONFIG}: {stderr.strip()}",
            hint=f"Install {PKG_CONFIG} to use a system-wide PortAudio.",
        )
    return stdout, stderr, returncode


def probe(package="portaudio-2.0", min_version="19"):
    """Ask pkg-config whether ``package`` >= ``min_version`` is installed.

    Probe failures are never fatal; they only mean we build from source.
    """
    logger.info(f"Probing for {package} >= {min_version} with {PKG_CONFIG}...")
    try:
        _, _, returncode = _query(package, f"--atleast-version={min_version}")
        if returncode != 0:
            logger.info(f"  - {package} >= {min_version} is not installed.")
            return ProbeResult(found=False)

        stdout, _, returncode = _query(package, "--modversion")
        version = stdout.strip()
        if returncode != 0 or not version:
            raise ProbeError(f"{PKG_CONFIG} reported {package} but no version for it")
    except ProbeError as e:
        logger.warning(f"{e}. Falling back to a source build.")
        return ProbeResult(found=False)

    logger.success(f"Found {package} {version} on the host.")
    return ProbeResult(found=True, version=version)


def parse_libs(output):
    """Split ``--libs`` output into (search_paths, library_names)."""
    search_paths = []
    libraries = []
    for token in shlex.split(output):
        if token.startswith("-L") and len(token) > 2:
            search_paths.append(token[2:])
        elif token.startswith("-l") and len(token) > 2:
            libraries.append(token[2:])
    return search_paths, libraries


def _libs(target, static):
    command = [PKG_CONFIG, "--libs", target]
    if static:
        command.insert(1, "--static")
    stdout, stderr, returncode = run_shell_command(command)
    if returncode == -1:
        raise ToolLaunchError(f"`{format_command(command)}` could not be started: {stderr.strip()}")
    if returncode != 0:
        raise ToolExitError(
            f"`{format_command(command)}` did not execute successfully (exit status {returncode})",
            returncode=returncode,
            context={"stderr": stderr.strip()},
        )
    return parse_libs(stdout)


def system_link_directives(package):
    """Link flags for a host-installed package, linked dynamically."""
    search_paths, libraries = _libs(package, static=False)
    return LinkDirectives(
        search_paths=tuple(search_paths),
        library_names=tuple(libraries),
        static_link=False,
    )


def static_link_directives(pc_file):
    """Resolve static link flags through an installed ``.pc`` descriptor.

    Libraries with a ``lib<name>.a`` in one of the reported search paths are
    linked statically; the rest (asound, m, pthread...) are system libraries.
    """
    search_paths, libraries = _libs(pc_file, static=True)
    static_libraries = []
    system_libraries = []
    for name in libraries:
        archive = f"lib{name}.a"
        if any(os.path.isfile(os.path.join(path, archive)) for path in search_paths):
            static_libraries.append(name)
        else:
            system_libraries.append(name)

    return LinkDirectives(
        search_paths=tuple(search_paths),
        library_names=tuple(static_libraries),
        static_link=True,
        system_libraries=tuple(system_libraries),
    )
