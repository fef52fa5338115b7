"""
Windows SDK include path correction.

When the developer shell is asked for a specific Windows SDK with
``-winsdk=``, INCLUDE can still carry subdirectories of the default SDK
version. :func:`rewrite_sdk_include_paths` points every SDK include entry at
the requested version; :func:`correct_sdk_include` applies it to a session
using the SDK root recorded in the registry.
"""

import logging
from typing import List, Optional, Sequence

from swiftdevkit.core.environment import Environment
from swiftdevkit.core.exceptions import ToolNotFoundError

logger = logging.getLogger(__name__)

KITS_ROOTS_KEY = r"SOFTWARE\Microsoft\Windows Kits\Installed Roots"
KITS_ROOT_VALUE = "KitsRoot10"


def get_windows_kits_root() -> str:
    """
    Read the Windows 10+ SDK root from the registry.

    Returns:
        SDK root, e.g. 'C:\\Program Files (x86)\\Windows Kits\\10\\'

    Raises:
        ToolNotFoundError: If the key or value is absent, or there is no
            registry on this platform
    """
    try:
        import winreg
    except ImportError:
        raise ToolNotFoundError(
            "Windows registry is not available on this platform"
        ) from None

    try:
        with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, KITS_ROOTS_KEY) as key:
            value, _ = winreg.QueryValueEx(key, KITS_ROOT_VALUE)
    except OSError as e:
        raise ToolNotFoundError(
            f"Windows SDK root not found in registry "
            f"(HKLM\\{KITS_ROOTS_KEY}\\{KITS_ROOT_VALUE}): {e}"
        ) from e

    logger.debug(f"Windows SDK root: {value}")
    return str(value)


def sdk_include_root(kits_root: str, sep: str = "\\") -> str:
    """Return the 'Include' directory under an SDK root."""
    return kits_root.rstrip("\\/") + sep + "Include"


def rewrite_sdk_include_paths(
    paths: Sequence[str], include_root: str, sdk_version: str, sep: str = "\\"
) -> List[str]:
    """
    Pin SDK include entries to one SDK version.

    For each entry under ``include_root``, the component right after
    'Include' is the SDK version. An entry already on ``sdk_version`` is
    returned byte-identical; otherwise that component is replaced and the
    rest of the entry is kept. Entries outside ``include_root`` pass
    through. Order is preserved. The root comparison ignores case.

    Args:
        paths: INCLUDE entries
        include_root: SDK include directory, e.g. 'C:\\SDK\\Include'
        sdk_version: Requested SDK version, e.g. '10.0.22621.0'
        sep: Path separator used in the entries

    Returns:
        Rewritten entries

    Example:
        >>> rewrite_sdk_include_paths(
        ...     [r"C:\\SDK\\Include\\10.0.19041.0\\ucrt", r"C:\\other"],
        ...     r"C:\\SDK\\Include",
        ...     "10.0.22621.0",
        ... )
        ['C:\\\\SDK\\\\Include\\\\10.0.22621.0\\\\ucrt', 'C:\\\\other']
    """
    root = include_root.rstrip(sep)
    prefix = (root + sep).lower()
    result = []

    for path in paths:
        if not path.lower().startswith(prefix):
            result.append(path)
            continue

        head = path[: len(root)]
        version, found_sep, rest = path[len(prefix) :].partition(sep)
        if not version or version == sdk_version:
            result.append(path)
            continue

        result.append(head + sep + sdk_version + found_sep + rest)

    return result


def correct_sdk_include(
    env: Environment, sdk_version: str, kits_root: Optional[str] = None
) -> None:
    """
    Rewrite the session's INCLUDE for the requested SDK version.

    Args:
        env: Session environment
        sdk_version: Requested SDK version
        kits_root: SDK root; read from the registry when None

    Raises:
        ToolNotFoundError: If the registry lookup fails
    """
    if kits_root is None:
        kits_root = get_windows_kits_root()

    if "INCLUDE" not in env:
        logger.debug("INCLUDE is not set, nothing to correct")
        return

    include_root = sdk_include_root(kits_root)
    entries = env.path_entries("INCLUDE")
    corrected = rewrite_sdk_include_paths(entries, include_root, sdk_version)

    changed = sum(1 for old, new in zip(entries, corrected) if old != new)
    logger.debug(f"Pinned {changed} INCLUDE entries to SDK {sdk_version}")
    env.set_path_entries(corrected, "INCLUDE")


__all__ = [
    "get_windows_kits_root",
    "sdk_include_root",
    "rewrite_sdk_include_paths",
    "correct_sdk_include",
]
