import os
import tarfile
import shutil
from ..cli_logger import logger
from ..errors import FilesystemError

# -------------------- Helpers: safe paths & extraction --------------------

def _safe_join(base, *paths):
    """Safely join paths, preventing path traversal attacks."""
    base = os.path.abspath(base)
    final = os.path.abspath(os.path.join(base, *paths))
    if not final.startswith(base + os.sep) and final != base:
        raise FilesystemError(f"Unsafe path detected: {final}")
    return final

def _safe_extract_tar(tar_ref: tarfile.TarFile, dest_dir: str, log_each=False):
    """Safely extract a tar file, preventing path traversal attacks."""
    for member in tar_ref.getmembers():
        # deny absolute or parent traversal
        member_path = _safe_join(dest_dir, member.name)
        if member.isdir():
            os.makedirs(member_path, exist_ok=True)
            continue
        # ensure parent exists
        os.makedirs(os.path.dirname(member_path), exist_ok=True)
        if log_each:
            logger.step_info(f"extracting: {member.name}", indent=2)
        src = tar_ref.extractfile(member)
        if src is None:
            # links and device files; the source tree does not need them
            continue
        with src as src_file:
            with open(member_path, "wb") as out:
                shutil.copyfileobj(src_file, out)
        # configure and friends must stay executable
        if member.mode:
            os.chmod(member_path, member.mode)
        # make compares timestamps, keep the ones from the archive
        os.utime(member_path, (member.mtime, member.mtime))


def extract(filepath, dest_dir):
    """Extracts a tar archive into ``dest_dir`` and returns ``dest_dir``."""
    os.makedirs(dest_dir, exist_ok=True)
    filename = os.path.basename(filepath)
    logger.info(f"  - Extracting {filename} into {dest_dir}")

    if not os.path.isfile(filepath):
        raise FilesystemError(f"Archive not found: {filepath}")
    try:
        if not tarfile.is_tarfile(filepath):
            raise FilesystemError(f"Unsupported archive type for {filename}")
        with tarfile.open(filepath, 'r:*') as tar:
            _safe_extract_tar(tar, dest_dir)
    except (tarfile.TarError, OSError) as e:
        raise FilesystemError(f"Error extracting {filename}: {e}") from e

    return dest_dir


def remove_paths(*paths):
    """Delete files or directory trees; paths that do not exist are skipped."""
    for path in paths:
        try:
            if os.path.isdir(path) and not os.path.islink(path):
                shutil.rmtree(path)
            elif os.path.lexists(path):
                os.remove(path)
            else:
                continue
        except OSError as e:
            raise FilesystemError(f"Error removing {path}: {e}") from e
        logger.step_info(f"removed: {path}", indent=4)
