"""
Drive alias for the Swift source tree.

The Swift build on Windows runs into MAX_PATH limits with deep checkouts, so
the tree is mapped onto a short drive root with ``subst``. The mapping is
created once and reused while it exists.
"""

import logging
import os
import subprocess

from swiftdevkit.core.environment import Environment
from swiftdevkit.core.exceptions import AliasCreationError

logger = logging.getLogger(__name__)

DEFAULT_DRIVE = "S:"


def alias_root(drive: str = DEFAULT_DRIVE) -> str:
    """Root directory of a drive alias, e.g. 'S:\\'."""
    return f"{drive}\\"


def _alias_exists(root: str) -> bool:
    return os.path.exists(root)


def _create_alias(drive: str, source_path: str) -> None:
    try:
        result = subprocess.run(
            ["subst", drive, source_path],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        raise AliasCreationError(drive, str(e)) from e

    if result.returncode != 0:
        message = (result.stderr or result.stdout or "").strip()
        raise AliasCreationError(
            drive, message or f"subst exited with {result.returncode}"
        )


def initialize_drive_alias(
    env: Environment, source_path: str, drive: str = DEFAULT_DRIVE
) -> str:
    """
    Map a drive alias to the source tree and change into it.

    The alias is only created when its root does not exist yet. The working
    directory always ends up at the alias root, for both this process and
    ``env.cwd``.

    Args:
        env: Session environment
        source_path: Directory to map
        drive: Drive letter with colon

    Returns:
        The alias root

    Raises:
        AliasCreationError: If subst fails
    """
    root = alias_root(drive)

    if _alias_exists(root):
        logger.debug(f"Drive alias {drive} already exists")
    else:
        logger.info(f"Mapping {drive} to {source_path}")
        _create_alias(drive, source_path)

    os.chdir(root)
    env.cwd = root
    return root


__all__ = ["DEFAULT_DRIVE", "alias_root", "initialize_drive_alias"]
