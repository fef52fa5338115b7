"""
Build command implementation.
"""

from swiftdevkit.cli.utils import run_initializer
from swiftdevkit.toolchain import initialize_build_environment


def run(args) -> int:
    """Run the build command."""
    return run_initializer(
        args,
        lambda env, config: initialize_build_environment(
            env, args.source_path, config=config
        ),
    )
