"""
CLI -- Inspect pattern tables and the catalog

Each invocation builds a fresh host model and registry, so the output
shows exactly what the configured registrations produce.
"""

import argparse
import os
from pathlib import Path

from .config import ConfigManager
from .core.host import HostEngine
from .core.registry import PatternRegistry
from .logging_config import setup_logging
from .presentation.symbols import get_symbols
from . import __version__


class FillPrefixCLI:
    """Resources shared by all commands."""

    def __init__(self, project_dir: Path, log_level: str = None):
        self.project_dir = Path(project_dir)
        self.config_manager = ConfigManager(self.project_dir)
        self.config = self.config_manager.load()
        setup_logging(log_level or self.config.logging.level)

        self.symbols = get_symbols(self.config.display.symbols)

        # Host starts uninitialized; commands decide when it comes up
        self.host = HostEngine()
        self.registry = PatternRegistry(self.host)


def main(argv=None):
    """
    Main entry point for fillprefix CLI.

    Parser definitions and dispatch logic are in individual command modules.
    """
    parser = argparse.ArgumentParser(
        description="fillprefix -- Line-prefix pattern tables for paragraph filling",
    )

    parser.add_argument(
        '--project', '-p',
        default=os.environ.get("FILLPREFIX_PROJECT_PATH", "."),
        help='Project directory (default: FILLPREFIX_PROJECT_PATH or current)'
    )

    parser.add_argument(
        '--log-level',
        default=None,
        help='Override logging.level (DEBUG, INFO, WARNING, ...)'
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'fillprefix {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    from .commands import register_all, dispatch
    register_all(subparsers)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    cli = FillPrefixCLI(Path(args.project), log_level=args.log_level)

    try:
        dispatch(args.command, cli, args)
    except KeyError as e:
        print(f"Error: {e}")
        parser.print_help()


if __name__ == '__main__':
    main()
