import contextlib
import hashlib
import os

import requests

from .cli_logger import logger
from .errors import IntegrityError, MalformedInputError, ToolExitError
from .models import HostPlatform
from .utils import run_command

FETCH_TOOLS = ("curl", "wget", "requests")

DEFAULT_FETCH_TOOLS = {
    HostPlatform.UNIX_GENERIC: "curl",
    HostPlatform.LINUX: "wget",
    HostPlatform.WINDOWS: "requests",
}


def select_fetch_tool(host_platform, preferred=None):
    """Pick the HTTP tool for this host, honouring an explicit preference."""
    if preferred:
        if preferred not in FETCH_TOOLS:
            raise MalformedInputError(
                f"Unknown fetch tool '{preferred}'",
                hint=f"Use one of: {', '.join(FETCH_TOOLS)}.",
            )
        return preferred
    return DEFAULT_FETCH_TOOLS[host_platform]


def fetch_command(tool, url, filename):
    if tool == "curl":
        return ["curl", "--fail", "-L", "-o", filename, url]
    if tool == "wget":
        return ["wget", "-O", filename, url]
    raise ValueError(f"{tool} is not an external fetch tool")


def _download_with_requests(url, filepath, timeout=60):
    temp_filepath = filepath + ".tmp"
    filename = os.path.basename(filepath)
    try:
        with requests.get(url, stream=True, timeout=timeout) as r:
            r.raise_for_status()
            total_size = int(r.headers.get('content-length', 0))

            with open(temp_filepath, 'wb') as f:
                chunks = logger.progress(
                    r.iter_content(chunk_size=1024 * 256),
                    description=f"Downloading {filename}",
                    total=total_size,
                )
                for chunk in chunks:
                    if chunk:  # keep-alive chunks may be empty
                        f.write(chunk)

        os.replace(temp_filepath, filepath)
    except requests.exceptions.RequestException as e:
        with contextlib.suppress(OSError):
            if os.path.exists(temp_filepath):
                os.remove(temp_filepath)
        raise ToolExitError(f"Downloading {url} failed: {e}") from e


def download_source(archive, work_dir, host_platform, fetch_tool=None):
    """
    Downloads the source archive into ``work_dir``.

    Returns:
        str: the absolute path of the downloaded archive.
    """
    tool = select_fetch_tool(host_platform, fetch_tool)
    filepath = os.path.join(work_dir, archive.local_filename)
    logger.info(f"Downloading {archive.url} with {tool}...")

    if tool == "requests":
        _download_with_requests(archive.url, filepath)
    else:
        run_command(fetch_command(tool, archive.url, archive.local_filename), cwd=work_dir)

    if archive.sha256:
        verify_archive(filepath, archive.sha256)
    logger.success(f"Downloaded {archive.local_filename}")
    return filepath


def verify_archive(filepath, sha256):
    """Compare the archive digest to a pinned one; a mismatch removes the file."""
    digest = hashlib.sha256()
    with open(filepath, "rb") as f:
        for block in iter(lambda: f.read(1024 * 1024), b""):
            digest.update(block)
    actual = digest.hexdigest()
    if actual != sha256.lower():
        os.remove(filepath)
        raise IntegrityError(
            f"Checksum mismatch for {os.path.basename(filepath)}",
            context={"expected": sha256.lower(), "actual": actual},
        )
    logger.info(f"  - sha256 verified: {actual}")
