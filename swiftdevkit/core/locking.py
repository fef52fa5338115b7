"""
Installation locking for swiftdevkit.

Two shells bootstrapping on the same machine share the per-user programs
directory. A file lock per installation name keeps one of them from
extracting over the other while it is still unpacking.

Usage:
    from swiftdevkit.core.locking import LockManager

    with LockManager(programs_dir / ".locks").install_lock("cmake-3.29.2"):
        ...
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout

from .exceptions import DownloadOrExtractError

logger = logging.getLogger(__name__)


class LockManager:
    """
    File locks for shared installation directories.

    Attributes:
        lock_dir: Directory where lock files are stored
    """

    def __init__(self, lock_dir: Path):
        self.lock_dir = Path(lock_dir)

    @contextmanager
    def install_lock(self, name: str, timeout: int = 600):
        """
        Hold the lock for one installation while it is checked and created.

        Args:
            name: Installation directory name
            timeout: Maximum wait in seconds

        Raises:
            DownloadOrExtractError: If the lock is not acquired in time
        """
        self.lock_dir.mkdir(parents=True, exist_ok=True)
        lock_path = self.lock_dir / f"{name}.lock"
        lock = FileLock(str(lock_path), timeout=timeout)

        try:
            with lock:
                logger.debug(f"Acquired install lock: {lock_path}")
                yield
        except Timeout as e:
            raise DownloadOrExtractError(
                f"Could not acquire install lock for {name} after {timeout}s. "
                "Another bootstrap may still be installing it."
            ) from e
        logger.debug(f"Released install lock: {lock_path}")


__all__ = ["LockManager"]
