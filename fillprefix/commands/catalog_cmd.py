"""
CatalogCommand — List the catalog functions available to config and --apply
"""

from ..commands.base import BaseCommand
from ..presentation.symbols import safe_print
from ..presentation.template import OutputTemplate


class CatalogCommand(BaseCommand):
    """Lists catalog functions, marking the ones configured globally."""

    def list_catalog(self):
        symbols = self.symbols
        configured = set(self.config.catalog.global_functions)

        rows = [
            {
                "name": function.name,
                "scope": symbols.global_scope if function.name in configured else "",
                "description": function.description,
            }
            for function in self.catalog.functions()
        ]

        template = OutputTemplate(symbols=symbols)
        template.header("FILLPREFIX CATALOG", f"{len(rows)} Function(s)")
        template.section("FUNCTIONS", template.format_table(
            rows, columns=["NAME", "", "DESCRIPTION"], keys=["name", "scope", "description"]
        ))
        template.footer(f"{symbols.global_scope} applied globally via catalog.global_functions")
        safe_print(template.render())


COMMAND_NAME = 'catalog'


def register_parser(subparsers):
    """Register catalog command parser."""
    return subparsers.add_parser('catalog', help='List catalog functions')


def handle(cli, args):
    """Handle catalog command dispatch."""
    CatalogCommand(cli).list_catalog()
