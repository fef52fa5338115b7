"""
Entry point for running the swiftdevkit CLI as a module.

Usage: python -m swiftdevkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
