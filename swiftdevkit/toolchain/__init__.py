"""
Swift toolchain session setups.
"""

from .environment import (
    initialize_build_environment,
    initialize_repro_environment,
    initialize_bootstrap_environment,
    remove_global_toolchain,
)
from .layout import ToolchainLayout, bootstrap_layout, repro_layout

__all__ = [
    "initialize_build_environment",
    "initialize_repro_environment",
    "initialize_bootstrap_environment",
    "remove_global_toolchain",
    "ToolchainLayout",
    "bootstrap_layout",
    "repro_layout",
]
