"""
BaseCommand — Shared foundation for all CLI commands

Commands receive the CLI instance and access its resources through
properties instead of building their own.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..cli import FillPrefixCLI


class BaseCommand:
    """Base class for CLI commands with access to shared resources."""

    def __init__(self, cli: 'FillPrefixCLI'):
        self._cli = cli

    @property
    def config(self):
        """Application configuration."""
        return self._cli.config

    @property
    def config_manager(self):
        return self._cli.config_manager

    @property
    def symbols(self):
        """Symbol set for display (Unicode/ASCII)."""
        return self._cli.symbols

    @property
    def host(self):
        """Host engine model the tables live in."""
        return self._cli.host

    @property
    def registry(self):
        """Pattern registry bound to the host."""
        return self._cli.registry

    @property
    def catalog(self):
        return self._cli.registry.catalog
