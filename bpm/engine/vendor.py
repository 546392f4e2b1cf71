"""Filesystem helpers for the vendor tree."""

import shutil
from pathlib import Path

from bpm.core.exceptions.errors import VendorError
from bpm.core.logger.logger import get_logger

logger = get_logger(__name__)


def ensure_dir(path: Path) -> Path:
    """Create a directory and its parents if missing.

    Raises:
        VendorError: If the directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise VendorError(
            f"Cannot create directory: {path}",
            vendor_path=str(path),
            details={"error": str(e)},
        ) from e
    return path


def remove_tree(path: Path) -> bool:
    """Delete a directory tree.

    Args:
        path: Directory to delete.

    Returns:
        True if something was removed, False if the path did not exist.

    Raises:
        VendorError: If the tree cannot be removed.
    """
    if not path.exists():
        return False

    try:
        shutil.rmtree(path)
    except OSError as e:
        raise VendorError(
            f"Cannot remove directory: {path}",
            vendor_path=str(path),
            details={"error": str(e)},
        ) from e

    logger.info(f"Removed {path}")
    return True
