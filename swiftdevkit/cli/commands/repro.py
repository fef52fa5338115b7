"""
Repro command implementation.

Sets up the build environment around the toolchain built locally in the
aliased source tree.
"""

from swiftdevkit.cli.utils import run_initializer
from swiftdevkit.toolchain import initialize_repro_environment


def run(args) -> int:
    """
    Run the repro command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """

    def initializer(env, config):
        initialize_repro_environment(
            env,
            args.source_path,
            target_arch=args.target_arch or config.toolchain.target_arch,
            config=config,
        )

    return run_initializer(args, initializer)
