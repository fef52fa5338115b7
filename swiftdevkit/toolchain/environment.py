"""
Swift toolchain build environments.

These compose the lower-level initializers into the session setups used
when working on the Swift toolchain:

- build: no global Swift on PATH, pinned CMake, source tree on a drive alias
- repro: build + MSVC + the locally built toolchain (version 0.0.0)
- bootstrap: build + MSVC + a pinned Swift release from the build cache

Usage:
    from swiftdevkit.core.environment import Environment
    from swiftdevkit.toolchain import initialize_bootstrap_environment

    env = Environment.from_os()
    initialize_bootstrap_environment(env, r"D:\\src\\swift-project")
    env.apply_to_os()
"""

import logging
from typing import Optional

from swiftdevkit.config import DevKitConfig
from swiftdevkit.core.environment import Environment
from swiftdevkit.core.filesystem import find_executable_entry
from swiftdevkit.msvc import DevShellOptions, initialize_msvc_environment
from swiftdevkit.system.drive import initialize_drive_alias
from swiftdevkit.tools.cmake import initialize_cmake_environment

from .layout import (
    DEFAULT_BOOTSTRAP_VERSION,
    ToolchainLayout,
    bootstrap_layout,
    repro_layout,
)

logger = logging.getLogger(__name__)

SWIFT_COMPILER = "swift.exe"
DEFAULT_TARGET_ARCH = "amd64"


def runtime_entry_for(toolchain_entry: str) -> str:
    """
    Map a toolchain bin directory to its paired runtime bin directory.

    Example:
        >>> runtime_entry_for(r"C:\\Swift\\Toolchains\\6.0.3+Asserts\\usr\\bin\\")
        'C:\\\\Swift\\\\Runtimes\\\\6.0.3\\\\usr\\\\bin\\\\'
    """
    return toolchain_entry.replace("Toolchains", "Runtimes").replace("+Asserts", "")


def remove_global_toolchain(env: Environment) -> bool:
    """
    Take an installed Swift toolchain out of the session.

    Removes the toolchain and runtime bin directories from PATH by exact
    string match and clears SDKROOT. Nothing on PATH is not an error.

    Returns:
        True if a toolchain was found
    """
    toolchain_entry = find_executable_entry(SWIFT_COMPILER, env.path_entries())
    if toolchain_entry is None:
        logger.debug("No Swift toolchain on PATH")
        return False

    runtime_entry = runtime_entry_for(toolchain_entry)
    logger.info(f"Removing installed Swift toolchain from PATH: {toolchain_entry}")
    env.remove_path_entries(toolchain_entry, runtime_entry)

    if env.unset("SDKROOT"):
        logger.debug("Cleared SDKROOT")
    return True


def initialize_build_environment(
    env: Environment, source_path: str, config: Optional[DevKitConfig] = None
) -> None:
    """
    Prepare a session for building the Swift toolchain.

    Args:
        env: Session environment to mutate
        source_path: Swift source tree to map onto the drive alias
        config: Pinned settings (defaults when None)

    Raises:
        DownloadOrExtractError: If CMake cannot be installed
        AliasCreationError: If the drive alias cannot be created
    """
    config = config or DevKitConfig.default()

    remove_global_toolchain(env)
    initialize_cmake_environment(
        env,
        version=config.cmake.version,
        patch=config.cmake.patch,
        sha256=config.cmake.sha256,
    )
    initialize_drive_alias(env, source_path, drive=config.drive)


def _activate_layout(env: Environment, layout: ToolchainLayout) -> None:
    logger.info(f"Using Swift {layout.version} from {layout.root}")
    env.prepend_path(layout.toolchain_bin, layout.runtime_bin)
    env["SDKROOT"] = layout.sdkroot


def _initialize_with_msvc(
    env: Environment, source_path: str, target_arch: str, config: DevKitConfig
) -> None:
    initialize_build_environment(env, source_path, config)
    initialize_msvc_environment(
        env,
        DevShellOptions(
            sdk_version=config.msvc.sdk_version,
            toolset_version=config.msvc.toolset_version,
            target_arch=target_arch,
        ),
    )


def initialize_repro_environment(
    env: Environment,
    source_path: str,
    target_arch: str = DEFAULT_TARGET_ARCH,
    config: Optional[DevKitConfig] = None,
) -> ToolchainLayout:
    """
    Prepare a session that uses the locally built toolchain.

    Returns:
        The layout that was activated
    """
    config = config or DevKitConfig.default()
    _initialize_with_msvc(env, source_path, target_arch, config)

    layout = repro_layout(drive=config.drive)
    _activate_layout(env, layout)
    return layout


def initialize_bootstrap_environment(
    env: Environment,
    source_path: str,
    target_arch: str = DEFAULT_TARGET_ARCH,
    toolchain_version: str = DEFAULT_BOOTSTRAP_VERSION,
    config: Optional[DevKitConfig] = None,
) -> ToolchainLayout:
    """
    Prepare a session that uses a pinned Swift release from the build cache.

    Returns:
        The layout that was activated
    """
    config = config or DevKitConfig.default()
    _initialize_with_msvc(env, source_path, target_arch, config)

    layout = bootstrap_layout(toolchain_version, binary_cache=config.binary_cache)
    _activate_layout(env, layout)
    return layout


__all__ = [
    "DEFAULT_TARGET_ARCH",
    "runtime_entry_for",
    "remove_global_toolchain",
    "initialize_build_environment",
    "initialize_repro_environment",
    "initialize_bootstrap_environment",
]
