import os

import click

from .. import config as config_module
from ..cli_logger import logger
from ..decorators import handle_exceptions
from ..utils import remove_paths


@click.command()
@click.pass_context
@click.option("--out-dir", default=None, help="Output directory to remove (default: $OUT_DIR).")
@handle_exceptions
def clean(ctx, out_dir):
    """Remove the static build and any leftover download or source tree.

    A failed build leaves an output directory that is not trusted; cleaning
    it forces the next resolve to start again from the download.
    """
    conf = config_module.load_config(path=ctx.obj["path"])
    settings = config_module.build_settings(conf, output_dir=out_dir)
    work_dir = os.getcwd()

    candidates = [
        os.path.abspath(settings.output_dir),
        os.path.join(work_dir, settings.archive.local_filename),
        os.path.join(work_dir, settings.archive.extracted_folder_name),
    ]
    present = [path for path in candidates if os.path.lexists(path)]
    if not present:
        logger.info("Nothing to clean.")
        return

    logger.info("Cleaning PortAudio build artifacts...")
    remove_paths(*present)
    logger.success(f"Cleaning complete. Removed {len(present)} items.")
