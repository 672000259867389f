import subprocess
import shlex
from ..cli_logger import logger
from ..errors import ToolLaunchError, ToolExitError


def format_command(command):
    """Render a command list the way it would be typed in a shell."""
    if isinstance(command, str):
        return command
    return shlex.join(str(part) for part in command)


def run_command(command, cwd=None, env=None):
    """
    Runs an external tool to completion and aborts the pipeline if it fails.

    Output is streamed line by line into the log. There are no retries: a
    failing configure or make is assumed to fail the same way twice.

    ``command`` is an argv list; a plain string is split the way a shell would.

    Raises:
        ToolLaunchError: the executable could not be started.
        ToolExitError: the executable exited with a non-zero status.
    """
    if isinstance(command, str):
        command = shlex.split(command)
    command_line = format_command(command)
    logger.info(f"  - Running: {command_line}")
    try:
        process = subprocess.Popen(
            [str(part) for part in command],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            bufsize=1,
            universal_newlines=True,
            env=env,
            cwd=cwd
        )
    except OSError as e:
        raise ToolLaunchError(
            f"`{command_line}` could not be started: {e}",
            hint=f"Make sure '{command[0]}' is installed and on PATH.",
            context={"cwd": str(cwd or "")},
        ) from e

    for line in process.stdout:
        logger.step_info(line.rstrip(), indent=4)
    returncode = process.wait()

    if returncode != 0:
        raise ToolExitError(
            f"`{command_line}` did not execute successfully (exit status {returncode})",
            returncode=returncode,
            context={"cwd": str(cwd or "")},
        )


def run_shell_command(command, env=None, cwd=None):
    """
    Executes a command and captures its output without raising.

    Returns:
        A tuple (stdout, stderr, return_code). A command that cannot be
        launched is reported with return_code -1 and the error as stderr.
    """
    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            env=env,
            check=False,
            cwd=cwd
        )
        return result.stdout, result.stderr, result.returncode

    except FileNotFoundError as e:
        logger.debug(f"Command not found: {e.filename}")
        return "", str(e), -1
    except OSError as e:
        logger.debug(f"Could not run {format_command(command)}: {e}")
        return "", str(e), -1
