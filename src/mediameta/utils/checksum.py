"""File checksums."""

import hashlib
from pathlib import Path

from mediameta.errors import IOFailureError
from mediameta.utils.logger import get_logger

logger = get_logger(__name__)

CHUNK_SIZE = 1024 * 1024


def sha256_hash(path: str | Path) -> str:
    """Compute the SHA-256 hex digest of a file's full contents.

    Args:
        path: Path to the file

    Returns:
        Lowercase hex digest

    Raises:
        IOFailureError: If the file cannot be read
    """
    hasher = hashlib.sha256()
    try:
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                hasher.update(chunk)
    except OSError as e:
        logger.error("Checksum failed", file=str(path), error=str(e))
        raise IOFailureError(str(path), f"cannot compute checksum: {e}") from e

    return hasher.hexdigest()
