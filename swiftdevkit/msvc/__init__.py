"""
Visual Studio (MSVC) environment initialization.

Usage:
    from swiftdevkit.msvc import DevShellOptions, initialize_msvc_environment

    initialize_msvc_environment(env, DevShellOptions(sdk_version="10.0.22621.0"))
"""

import logging
from typing import Optional

from swiftdevkit.core.environment import Environment

from .devshell import (
    DevShellOptions,
    build_devshell_arguments,
    enter_devshell,
    find_devshell_script,
)
from .sdk import correct_sdk_include, rewrite_sdk_include_paths
from .vswhere import find_latest_installation

logger = logging.getLogger(__name__)


def initialize_msvc_environment(
    env: Environment, options: Optional[DevShellOptions] = None
) -> None:
    """
    Activate the latest Visual Studio developer shell in the session.

    Steps:
        1. Find vswhere and ask it for the latest installation
        2. Find the installation's developer shell script
        3. Build the shell arguments (banner off, optional SDK and toolset,
           host architecture always)
        4. Run the shell and load its environment into ``env``
        5. With an explicit SDK version, pin INCLUDE's SDK entries to it

    Args:
        env: Session environment to mutate
        options: Developer shell selection (defaults to all unset)

    Raises:
        ToolNotFoundError: Missing vswhere, installation, script or registry key
        ShellActivationError: If the developer shell fails
        UnrecognizedArchitectureError: If the host architecture is unknown
    """
    options = options or DevShellOptions()

    install_path = find_latest_installation(env)
    script = find_devshell_script(install_path)

    arguments, target_arch = build_devshell_arguments(options, env)
    logger.debug(f"Developer shell arguments: {arguments}")

    enter_devshell(env, script, target_arch, arguments)

    if options.has_sdk_version:
        correct_sdk_include(env, options.sdk_version)


__all__ = [
    "DevShellOptions",
    "initialize_msvc_environment",
    "rewrite_sdk_include_paths",
]
