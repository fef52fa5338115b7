"""
Entry point for running swiftdevkit as a module.

Usage: python -m swiftdevkit [command] [options]
"""

from swiftdevkit.cli.parser import main

if __name__ == "__main__":
    main()
