"""
MSVC command implementation.

Activates the Visual Studio developer shell.
"""

import logging

from swiftdevkit.cli.utils import run_initializer
from swiftdevkit.msvc import DevShellOptions, initialize_msvc_environment

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the msvc command.

    Command-line versions override the ones from configuration.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """

    def initializer(env, config):
        options = DevShellOptions(
            sdk_version=args.sdk_version or config.msvc.sdk_version,
            toolset_version=args.toolset_version or config.msvc.toolset_version,
            host_arch=args.host_arch,
            target_arch=args.target_arch,
        )
        logger.debug(f"Developer shell options: {options}")
        initialize_msvc_environment(env, options)

    return run_initializer(args, initializer)
