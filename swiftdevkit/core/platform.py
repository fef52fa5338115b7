"""
Architecture naming for swiftdevkit.

Windows reports the host CPU as a token such as ``AMD64`` or ``ARM64``
(``PROCESSOR_ARCHITECTURE``). Two external vocabularies consume it:

- Build-tool vocabulary: the Visual Studio developer shell (``-arch=amd64``)
- Package vocabulary: CMake release archive names (``windows-x86_64.zip``)

Usage:
    from swiftdevkit.core.platform import get_build_tool_arch, get_host_arch

    arch = get_build_tool_arch(get_host_arch(env))
"""

import platform
from typing import Mapping

from .exceptions import UnrecognizedArchitectureError


_BUILD_TOOL_ARCH = {
    "AMD64": "amd64",
    "ARM64": "arm64",
}

_PACKAGE_ARCH = {
    "AMD64": "x86_64",
    "ARM64": "arm64",
}


def get_build_tool_arch(architecture: str) -> str:
    """
    Map a hardware architecture token to the developer shell name.

    Args:
        architecture: Raw token ('AMD64' or 'ARM64')

    Returns:
        'amd64' or 'arm64'

    Raises:
        UnrecognizedArchitectureError: For any other token

    Example:
        >>> get_build_tool_arch("AMD64")
        'amd64'
    """
    try:
        return _BUILD_TOOL_ARCH[architecture]
    except KeyError:
        raise UnrecognizedArchitectureError(architecture) from None


def get_package_arch(architecture: str) -> str:
    """
    Map a hardware architecture token to the release archive name.

    Args:
        architecture: Raw token ('AMD64' or 'ARM64')

    Returns:
        'x86_64' or 'arm64'

    Raises:
        UnrecognizedArchitectureError: For any other token
    """
    try:
        return _PACKAGE_ARCH[architecture]
    except KeyError:
        raise UnrecognizedArchitectureError(architecture) from None


def get_host_arch(env: Mapping[str, str]) -> str:
    """
    Get the raw host architecture token from the session environment.

    ``PROCESSOR_ARCHITEW6432`` wins when present: a 32-bit process on a
    64-bit host sees ``x86`` in ``PROCESSOR_ARCHITECTURE``.

    Args:
        env: Session environment

    Returns:
        Raw architecture token (e.g. 'AMD64')
    """
    for name in ("PROCESSOR_ARCHITEW6432", "PROCESSOR_ARCHITECTURE"):
        value = env.get(name)
        if value:
            return value
    return platform.machine()


__all__ = [
    "get_build_tool_arch",
    "get_package_arch",
    "get_host_arch",
]
