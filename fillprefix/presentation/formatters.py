"""
Formatters — Text renderings of tables, queues and flush reports
"""

from typing import List, Optional

from ..core.entries import PatternTable
from ..core.queues import PendingQueues
from ..core.registry import FlushReport
from .symbols import SymbolSet, get_symbols
from .template import OutputTemplate


def format_pattern_table(
    table: PatternTable,
    symbols: Optional[SymbolSet] = None,
    baseline: Optional[PatternTable] = None
) -> str:
    """
    Render a pattern table, one entry per row, in consultation order.

    Entries absent from `baseline` (when given) are marked with the local
    scope marker, so a context override shows what it adds to the shared
    table.
    """
    symbols = symbols or get_symbols()
    if not table:
        return "(empty)"

    rows = []
    for position, entry in enumerate(table, start=1):
        if position == 1 and entry.classification == "beginning-of-line":
            marker = symbols.sentinel
        elif baseline is not None and entry not in baseline:
            marker = symbols.local_scope
        else:
            marker = ""
        rows.append({
            "#": str(position),
            "id": entry.entry_id,
            "classification": entry.classification,
            "matcher": repr(entry.matcher),
            "mark": marker,
        })

    template = OutputTemplate(symbols=symbols)
    return template.format_table(
        rows,
        columns=["#", "ID", "CLASSIFICATION", "MATCHER", ""],
        keys=["#", "id", "classification", "matcher", "mark"],
    )


def format_pending(queues: PendingQueues, symbols: Optional[SymbolSet] = None) -> str:
    """Render queued mutations grouped by queue."""
    symbols = symbols or get_symbols()
    if queues.is_empty():
        return "No pending mutations."

    lines: List[str] = []
    if queues.global_count():
        lines.append(f"{symbols.global_scope} global ({queues.global_count()})")
        for mutation in queues.global_queue:
            lines.append(f"  {symbols.pending} {mutation.change.describe()}")
    for context_id in queues.pending_contexts():
        lines.append(f"{symbols.local_scope} {context_id} ({queues.local_count(context_id)})")
        for mutation in queues.local_queue(context_id):
            lines.append(f"  {symbols.pending} {mutation.change.describe()}")
    return "\n".join(lines)


def format_flush_report(report: FlushReport, symbols: Optional[SymbolSet] = None) -> str:
    """One line per queue drained by a flush."""
    symbols = symbols or get_symbols()
    if report.is_noop:
        return f"Flush #{report.flush_number}: nothing pending"

    lines = [f"Flush #{report.flush_number}:"]
    lines.append(f"  {symbols.global_scope} global {symbols.arrow} {report.global_applied} applied")
    for context_id, count in report.local_applied.items():
        lines.append(f"  {symbols.local_scope} {context_id} {symbols.arrow} {count} applied")
    if report.discarded:
        lines.append(f"  {symbols.check_warn} {report.discarded} discarded (context gone)")
    return "\n".join(lines)
