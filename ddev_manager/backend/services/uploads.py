"""
Database Upload Handling.

Validates uploaded database dumps by filename and spools them to a
temporary file under the configured upload directory in fixed-size
chunks, enforcing the size cap while streaming. Callers own the returned
path and must remove it with ``discard`` once the import has finished.
"""

import os
import re
import tempfile
from pathlib import Path

from fastapi import UploadFile

from ddev_manager.backend.core.concurrency import run_blocking
from ddev_manager.backend.core.exceptions import UploadRejectedError
from ddev_manager.backend.core.logging import get_logger

logger = get_logger(__name__)

ALLOWED_EXTENSIONS: tuple[str, ...] = (".sql", ".gz", ".zip", ".tar", ".bz2", ".xz")
COMPOUND_MARKERS: tuple[str, ...] = (".sql.", ".tar.")

_SUFFIX_PATTERN = re.compile(r"^\.[A-Za-z0-9]{1,8}$")


def is_allowed_filename(filename: str | None) -> bool:
    """Whether a filename looks like a database dump ddev can import."""
    if not filename:
        return False
    lowered = Path(filename).name.lower()
    if lowered.endswith(ALLOWED_EXTENSIONS):
        return True
    return any(marker in lowered for marker in COMPOUND_MARKERS)


def temp_suffix(filename: str) -> str:
    """
    Suffix for the spooled file.

    ddev detects compression from the extension, so up to two trailing
    suffixes (``.sql.gz``, ``.tar.bz2``) are kept when they are plain
    alphanumerics.
    """
    suffixes = Path(filename).suffixes[-2:]
    return "".join(s for s in suffixes if _SUFFIX_PATTERN.match(s)).lower()


async def spool_upload(
    upload: UploadFile,
    upload_dir: str | Path,
    max_bytes: int,
    chunk_size: int = 1024 * 1024,
) -> Path:
    """
    Copy an uploaded file to a temporary path.

    Args:
        upload: The multipart file
        upload_dir: Directory for the temporary file
        max_bytes: Size cap; larger uploads are rejected
        chunk_size: Bytes read per iteration

    Returns:
        Path of the spooled file

    Raises:
        UploadRejectedError: If the filename is not allowed or the file is too large
    """
    filename = upload.filename or ""
    if not is_allowed_filename(filename):
        logger.warning("Rejected database upload", extra={"upload_filename": filename})
        raise UploadRejectedError("Invalid file type. Only database files are allowed.")

    fd, tmp_name = tempfile.mkstemp(
        prefix="database-",
        suffix=temp_suffix(filename),
        dir=str(upload_dir),
    )
    path = Path(tmp_name)
    total = 0

    try:
        with os.fdopen(fd, "wb") as out:
            while chunk := await upload.read(chunk_size):
                total += len(chunk)
                if total > max_bytes:
                    raise UploadRejectedError(
                        f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB."
                    )
                await run_blocking(out.write, chunk)
    except BaseException:
        discard(path)
        raise

    logger.info(
        "Database upload spooled",
        extra={"upload_filename": filename, "bytes": total},
    )
    return path


def discard(path: Path) -> None:
    """Remove a temporary file if it still exists."""
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove temporary file", extra={"path": str(path), "error": str(e)})
