"""
TableCommand — Show the pattern tables a host would consult

Builds the tables the way an editor session would:
- the configured global catalog is registered
- --apply functions are registered for --context (or globally with --global)
- the host is initialized first, or last with --defer, in which case the
  output also shows what was queued (as JSON with --json) and what the
  flush applied
"""

from typing import List, Optional

from ..commands.base import BaseCommand
from ..presentation.formatters import format_flush_report, format_pattern_table, format_pending
from ..presentation.symbols import safe_print
from ..presentation.template import OutputTemplate


class TableCommand(BaseCommand):
    """Registers catalog functions against a fresh host and prints the result."""

    def show_table(
        self,
        context: Optional[str] = None,
        apply: Optional[List[str]] = None,
        global_scope: bool = False,
        defer: bool = False,
        as_json: bool = False
    ):
        symbols = self.symbols
        host = self.host
        registry = self.registry
        template = OutputTemplate(symbols=symbols)
        apply = apply or []

        if apply and not global_scope and not context:
            self._error(template, "--apply needs --context NAME, or --global")
            return

        # Every name is checked before anything is registered
        try:
            for name in list(self.config.catalog.global_functions) + apply:
                self.catalog.get(name)
        except KeyError as e:
            self._error(template, str(e.args[0]) if e.args else str(e))
            return

        if not defer:
            host.initialize()

        context_id = host.create_context(context) if context else None

        registry.set_global_catalog(self.config.catalog.global_functions)
        for name in apply:
            registry.apply_catalog(name, context_id=context_id, global_scope=global_scope)

        if defer:
            template.header("FILLPREFIX TABLE", "Deferred Registration")
            pending = registry.pending.to_json() if as_json else format_pending(registry.pending, symbols)
            template.section("PENDING BEFORE FLUSH", pending)
            host.initialize()
            if registry.last_report is not None:
                template.section("FLUSH", format_flush_report(registry.last_report, symbols))
        else:
            template.header("FILLPREFIX TABLE", "Immediate Registration")

        shared = host.effective_table()
        template.section("SHARED TABLE", format_pattern_table(shared, symbols))
        if context_id is not None:
            local = host.effective_table(context_id)
            title = f"CONTEXT {context_id}"
            if not host.tables.has_override(context_id):
                title += " (uses shared table)"
            template.section(title, format_pattern_table(local, symbols, baseline=shared))

        summary = f"{len(shared)} shared entries"
        if context_id is not None:
            summary += f" | {len(host.effective_table(context_id))} in {context_id}"
        template.footer(summary)
        safe_print(template.render())

    def _error(self, template: OutputTemplate, message: str):
        template.header("FILLPREFIX TABLE", "Error")
        template.section("ERROR", message)
        template.footer(f"{self.symbols.check_fail} Nothing registered")
        safe_print(template.render())


COMMAND_NAME = 'table'


def register_parser(subparsers):
    """Register table command parser."""
    p = subparsers.add_parser('table', help='Show pattern tables after registration')
    p.add_argument('--context', '-c', metavar='NAME',
                   help='Create a context with this name and show its table')
    p.add_argument('--apply', '-a', metavar='FUNCTION', action='append', default=[],
                   help='Catalog function to apply (repeatable)')
    p.add_argument('--global', dest='global_scope', action='store_true',
                   help='Apply --apply functions to the shared table')
    p.add_argument('--defer', action='store_true',
                   help='Register before the host initializes, then flush')
    p.add_argument('--json', dest='as_json', action='store_true',
                   help='With --defer, show pending mutations as JSON')
    return p


def handle(cli, args):
    """Handle table command dispatch."""
    TableCommand(cli).show_table(
        context=args.context,
        apply=args.apply,
        global_scope=args.global_scope,
        defer=args.defer,
        as_json=args.as_json,
    )
