"""
Swift toolchain install layouts.

A Swift installation root holds three trees, each keyed by version:

    Toolchains\\<version>+Asserts\\usr\\bin
    Runtimes\\<version>\\usr\\bin
    Platforms\\<version>\\Windows.platform\\Developer\\SDKs\\Windows.sdk

Paths are computed, never checked for existence.
"""

from dataclasses import dataclass

from swiftdevkit.core.paths import join_path
from swiftdevkit.system.drive import DEFAULT_DRIVE, alias_root

REPRO_TOOLCHAIN_VERSION = "0.0.0"
DEFAULT_BOOTSTRAP_VERSION = "6.1.2"
DEFAULT_BINARY_CACHE = "S:\\b"


@dataclass(frozen=True)
class ToolchainLayout:
    """
    Swift installation layout.

    Attributes:
        root: Directory holding Toolchains, Runtimes and Platforms
        version: Toolchain version (e.g. '6.1.2')
    """

    root: str
    version: str

    @property
    def toolchain_bin(self) -> str:
        return join_path(
            [self.root, "Toolchains", f"{self.version}+Asserts", "usr", "bin"]
        )

    @property
    def runtime_bin(self) -> str:
        return join_path([self.root, "Runtimes", self.version, "usr", "bin"])

    @property
    def sdkroot(self) -> str:
        return join_path(
            [
                self.root,
                "Platforms",
                self.version,
                "Windows.platform",
                "Developer",
                "SDKs",
                "Windows.sdk",
            ]
        )


def repro_layout(drive: str = DEFAULT_DRIVE) -> ToolchainLayout:
    """Layout of a toolchain built locally from the aliased source tree."""
    return ToolchainLayout(
        root=join_path([alias_root(drive), "Program Files", "Swift"]),
        version=REPRO_TOOLCHAIN_VERSION,
    )


def bootstrap_layout(
    version: str = DEFAULT_BOOTSTRAP_VERSION, binary_cache: str = DEFAULT_BINARY_CACHE
) -> ToolchainLayout:
    """Layout of a pinned release unpacked into the build cache."""
    return ToolchainLayout(
        root=join_path(
            [
                binary_cache,
                "toolchains",
                f"swift-{version}-RELEASE-windows10",
                "LocalApp",
                "Programs",
                "Swift",
            ]
        ),
        version=version,
    )


__all__ = [
    "REPRO_TOOLCHAIN_VERSION",
    "DEFAULT_BOOTSTRAP_VERSION",
    "DEFAULT_BINARY_CACHE",
    "ToolchainLayout",
    "repro_layout",
    "bootstrap_layout",
]
