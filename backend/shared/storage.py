"""Atomic file writes for JSON data files.

Files are written to a temporary sibling, fsynced, given owner-only
permissions (0o600) and renamed into place, so readers never see a
partial file and a crash mid-write leaves the previous version intact.
"""

import contextlib
import os
import tempfile
from pathlib import Path

import structlog

logger = structlog.get_logger()

# Owner-only file permissions for data files.
_DATA_FILE_MODE = 0o600


def write_text_atomic(target: str | Path, content: str, *, prefix: str = ".data_") -> Path:
    """Replace target with content in one rename.

    Creates the parent directory when missing. Returns the resolved path.
    """
    path = Path(target).resolve()
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp", prefix=prefix)
    fd_owned = True
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            fd_owned = False  # os.fdopen took ownership; it will close fd
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, _DATA_FILE_MODE)  # noqa: PTH101
        Path(tmp_path).replace(path)
    except BaseException:
        if fd_owned:
            with contextlib.suppress(OSError):
                os.close(fd)
        with contextlib.suppress(OSError):
            Path(tmp_path).unlink()
        raise
    logger.debug("wrote data file", path=str(path), size=len(content))
    return path
