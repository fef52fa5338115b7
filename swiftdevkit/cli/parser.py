"""
swiftdevkit CLI argument parser.

A child process cannot change the environment of the shell that started
it, so every command runs on a copy of the current environment and prints
the changes as a script for the calling shell to evaluate:

    cmd:         for /f "delims=" %i in ('swiftdevkit repro S:\\src') do %i
    PowerShell:  swiftdevkit --format powershell repro D:\\src | Invoke-Expression
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

try:
    from importlib.metadata import version

    __version__ = version("swiftdevkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

ARCH_CHOICES = ["amd64", "arm64", "x86", "arm"]


class CLI:
    """swiftdevkit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="swiftdevkit",
            description="swiftdevkit - Swift toolchain development environment for Windows",
            epilog='Use "swiftdevkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "--version", action="version", version=f"swiftdevkit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./swiftdevkit.yaml)",
        )
        parser.add_argument(
            "--format",
            choices=["cmd", "powershell", "json"],
            default="cmd",
            help="Output format for environment changes (default: cmd)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_msvc_command(subparsers)
        self._add_build_command(subparsers)
        self._add_repro_command(subparsers)
        self._add_bootstrap_command(subparsers)

        return parser

    def _add_msvc_command(self, subparsers):
        """Add 'msvc' subcommand."""
        parser = subparsers.add_parser(
            "msvc",
            help="Activate the Visual Studio developer environment",
            description="Activate the latest Visual Studio developer shell",
        )
        parser.add_argument(
            "--sdk-version", metavar="VERSION", help="Windows SDK version"
        )
        parser.add_argument(
            "--toolset-version", metavar="VERSION", help="MSVC toolset version"
        )
        parser.add_argument(
            "--host-arch",
            choices=ARCH_CHOICES,
            metavar="ARCH",
            help="Host architecture (default: this machine)",
        )
        parser.add_argument(
            "--target-arch",
            choices=ARCH_CHOICES,
            metavar="ARCH",
            help="Target architecture (default: this machine)",
        )

    def _add_source_argument(self, parser):
        parser.add_argument(
            "source_path", metavar="SOURCE", help="Swift source tree to map"
        )

    def _add_build_command(self, subparsers):
        """Add 'build' subcommand."""
        parser = subparsers.add_parser(
            "build",
            help="Prepare a toolchain build environment",
            description="Remove installed Swift from PATH, install CMake, map the source drive",
        )
        self._add_source_argument(parser)

    def _add_repro_command(self, subparsers):
        """Add 'repro' subcommand."""
        parser = subparsers.add_parser(
            "repro",
            help="Use the locally built toolchain",
            description="Build environment plus MSVC and the locally built toolchain",
        )
        self._add_source_argument(parser)
        parser.add_argument(
            "--target-arch",
            choices=ARCH_CHOICES,
            metavar="ARCH",
            help="Target architecture (default: from config, amd64)",
        )

    def _add_bootstrap_command(self, subparsers):
        """Add 'bootstrap' subcommand."""
        parser = subparsers.add_parser(
            "bootstrap",
            help="Use a pinned Swift release",
            description="Build environment plus MSVC and a pinned Swift release",
        )
        self._add_source_argument(parser)
        parser.add_argument(
            "--target-arch",
            choices=ARCH_CHOICES,
            metavar="ARCH",
            help="Target architecture (default: from config, amd64)",
        )
        parser.add_argument(
            "--toolchain-version",
            metavar="VERSION",
            help="Swift release version (default: from config, 6.1.2)",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Log output goes to stderr; stdout carries the environment script.
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            stream=sys.stderr,
            force=True,
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Returns:
            Exit code from command handler
        """
        command_map = {
            "msvc": "swiftdevkit.cli.commands.msvc",
            "build": "swiftdevkit.cli.commands.build",
            "repro": "swiftdevkit.cli.commands.repro",
            "bootstrap": "swiftdevkit.cli.commands.bootstrap",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
