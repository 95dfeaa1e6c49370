"""
vvm CLI argument parser.

This module implements the `vvm` command-line interface using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from vyperkit.cli.utils import print_error
from vyperkit.core.exceptions import VyperKitError

# Get version from package
try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("vyperkit")
except PackageNotFoundError:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """Vyper Version Manager command-line interface."""

    COMMANDS = {
        "list": "vyperkit.cli.commands.listing",
        "install": "vyperkit.cli.commands.install",
        "use": "vyperkit.cli.commands.use",
        "remove": "vyperkit.cli.commands.remove",
        "cleanup": "vyperkit.cli.commands.cleanup",
    }

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
            prog="vvm",
            description="Vyper Version Manager",
            epilog='Use "vvm COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"vvm {__version__}"
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
            "--home",
            type=Path,
            metavar="PATH",
            help="Root directory for installed versions (default: $VVM_HOME or ~/.vvm)",
        )
        parser.add_argument(
            "--yes",
            "-y",
            action="store_true",
            help="Answer yes to all prompts",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        subparsers.add_parser(
            "list",
            help="List all versions of Vyper",
            description="Show the global, installed and available Vyper versions",
        )

        install = subparsers.add_parser(
            "install",
            help="Install Vyper versions",
            description="Download and install one or more Vyper versions",
        )
        install.add_argument(
            "versions", nargs="+", metavar="VERSION", help="Versions to install"
        )

        use = subparsers.add_parser(
            "use",
            help="Use a Vyper version",
            description="Set the global Vyper version",
        )
        use.add_argument("version", metavar="VERSION", help="Version to activate")

        remove = subparsers.add_parser(
            "remove",
            help="Remove a Vyper version",
            description="Remove an installed Vyper version, or 'all'",
        )
        remove.add_argument(
            "version", metavar="VERSION", help="Version to remove, or 'all'"
        )

        cleanup = subparsers.add_parser(
            "cleanup",
            help="Remove stale install locks",
            description="Remove install lock files left behind by killed processes",
        )
        cleanup.add_argument(
            "--older-than",
            type=float,
            default=24,
            metavar="HOURS",
            help="Only remove locks older than HOURS (default: 24)",
        )
        cleanup.add_argument(
            "--cache",
            action="store_true",
            help="Also delete the compilation cache",
        )

        return parser

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
            return 130  # Standard exit code for SIGINT
        except VyperKitError as e:
            print_error(str(e))
            if parsed_args.verbose:
                logger.debug("Command failed", exc_info=True)
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.WARNING
            format_str = "%(levelname)s: %(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        module_name = self.COMMANDS.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for the vvm CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
