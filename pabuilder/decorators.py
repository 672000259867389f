import functools
import click
import sys
from .cli_logger import logger
from .errors import BuildError

def handle_exceptions(func):
    """Turn pipeline failures into a diagnostic and a non-zero exit status."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except click.Abort:
            logger.warning("Command aborted by user.")
            sys.exit(1)
        except BuildError as e:
            logger.error(f"[{e.code.value}] {e}")
            logger.exception(*sys.exc_info())
            sys.exit(1)
        except click.ClickException:
            raise
        except Exception as e:
            logger.error(f"An unexpected error occurred: {e}")
            logger.exception(*sys.exc_info())
            sys.exit(1)
    return wrapper
