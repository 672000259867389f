"""Cross-compilation target inference from the configured linker name."""

import ntpath

from ..cli_logger import logger
from ..errors import MalformedInputError

LINKER_ENV_VAR = "RUSTC_LINKER"


def infer_target_triple(linker_path):
    """
    Derive the target triple from a linker path such as
    ``/usr/bin/arm-linux-gnueabihf-gcc`` -> ``arm-linux-gnueabihf``.
    """
    # ntpath splits on both separators, so Windows-style paths work too.
    linker_name = ntpath.basename(linker_path)
    triple, sep, _tool = linker_name.rpartition("-")
    if not sep or not triple:
        raise MalformedInputError(
            f"Cannot infer a target triple from linker '{linker_path}'",
            hint="Expected a name like '<target-triple>-gcc'.",
            context={LINKER_ENV_VAR: linker_path},
        )
    return triple


def cross_target_from_env(environ):
    linker_path = environ.get(LINKER_ENV_VAR)
    if not linker_path:
        return None
    triple = infer_target_triple(linker_path)
    logger.info(f"  - Cross-compiling for {triple} (linker: {linker_path})")
    return triple


def configure_cross_args(triple):
    if not triple:
        return []
    return [f"--target={triple}", f"--host={triple}"]
