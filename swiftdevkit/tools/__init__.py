"""
Auxiliary build tools installed on demand.
"""

from .cmake import CMakeInstaller, initialize_cmake_environment

__all__ = ["CMakeInstaller", "initialize_cmake_environment"]
