"""
Bootstrap command implementation.

Sets up the build environment around a pinned Swift release.
"""

import logging

from swiftdevkit.cli.utils import run_initializer
from swiftdevkit.toolchain import initialize_bootstrap_environment

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the bootstrap command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """

    def initializer(env, config):
        version = args.toolchain_version or config.toolchain.version
        logger.debug(f"Bootstrap toolchain version: {version}")
        initialize_bootstrap_environment(
            env,
            args.source_path,
            target_arch=args.target_arch or config.toolchain.target_arch,
            toolchain_version=version,
            config=config,
        )

    return run_initializer(args, initializer)
