"""
mmock-setup CLI argument parser.

This module implements the command-line interface for mmock-setup using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from mmock_setup import __version__
from mmock_setup.core.workflow import configure_logging

logger = logging.getLogger(__name__)


class CLI:
    """mmock-setup command-line interface."""

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
            prog="mmock-setup",
            description="mmock-setup - install the mmock mock server in CI runners",
            epilog='Use "mmock-setup COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"mmock-setup {__version__}"
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
            help="Path to a YAML configuration file",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_run_command(subparsers)
        self._add_resolve_command(subparsers)
        self._add_locate_command(subparsers)
        self._add_verify_command(subparsers)

        return parser

    def _add_run_command(self, subparsers):
        """Add 'run' subcommand."""
        parser = subparsers.add_parser(
            "run",
            help="Resolve, install and verify mmock",
            description=(
                "Resolve the requested mmock version, install it (reusing the "
                "cache when possible), put it on PATH and verify it"
            ),
        )
        parser.add_argument(
            "--mmock-version",
            metavar="VERSION",
            help="Version to install: 'latest' or e.g. 3.1.6 / v3.1.6 "
            "(default: INPUT_VERSION)",
        )
        parser.add_argument(
            "--github-token",
            metavar="TOKEN",
            help="GitHub token for resolving 'latest' (default: INPUT_GITHUB-TOKEN)",
        )
        parser.add_argument(
            "--temp-dir",
            metavar="PATH",
            help="Root directory for the install directory (default: RUNNER_TEMP or system temp)",
        )
        parser.add_argument(
            "--cache-dir",
            metavar="PATH",
            help="Cache store root (default: MMOCK_SETUP_CACHE_DIR or ~/.mmock-setup/cache)",
        )

    def _add_resolve_command(self, subparsers):
        """Add 'resolve' subcommand."""
        parser = subparsers.add_parser(
            "resolve",
            help="Print the concrete version for a version spec",
        )
        parser.add_argument("spec", metavar="SPEC", help="'latest' or a version")
        parser.add_argument(
            "--github-token", metavar="TOKEN", help="GitHub token for 'latest'"
        )

    def _add_locate_command(self, subparsers):
        """Add 'locate' subcommand."""
        parser = subparsers.add_parser(
            "locate",
            help="Print the download URL of a release asset",
        )
        parser.add_argument("mmock_version", metavar="VERSION", help="Concrete version")
        parser.add_argument(
            "--os",
            dest="target_os",
            metavar="OS",
            help="linux, darwin or win32 (default: current platform)",
        )
        parser.add_argument(
            "--arch",
            metavar="ARCH",
            help="x64 or arm64 (default: current platform)",
        )

    def _add_verify_command(self, subparsers):
        """Add 'verify' subcommand."""
        subparsers.add_parser(
            "verify",
            help="Check that mmock on PATH runs and prints its version banner",
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

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        configure_logging(verbose=parsed_args.verbose, quiet=parsed_args.quiet)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Returns:
            Exit code from command handler
        """
        command_map = {
            "run": "mmock_setup.cli.commands.run",
            "resolve": "mmock_setup.cli.commands.resolve",
            "locate": "mmock_setup.cli.commands.locate",
            "verify": "mmock_setup.cli.commands.verify",
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
