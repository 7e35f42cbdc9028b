"""
Mutator — Pure pattern table transforms

Every function takes a table and returns a new one. Nothing here touches
host storage or queues, and every change is idempotent:
applying the same change twice gives the same table as applying it once.

Additions append only. The host relies on its first entry (the
beginning-of-line sentinel) staying first, so nothing is ever prepended
or reordered.
"""

from typing import Iterable

from .entries import ChangeOp, PatternEntry, PatternTable, TableChange


def add_entry(table: PatternTable, entry: PatternEntry) -> PatternTable:
    """Append entry unless an equal entry is already present."""
    if entry in table:
        return table
    return table + (entry,)


def remove_entry(table: PatternTable, entry: PatternEntry) -> PatternTable:
    """Drop the entry equal to `entry`; no-op if absent."""
    if entry not in table:
        return table
    return tuple(e for e in table if e != entry)


def remove_classification(table: PatternTable, classification: str) -> PatternTable:
    """Drop every entry tagged `classification`, whatever its matcher."""
    if not any(e.classification == classification for e in table):
        return table
    return tuple(e for e in table if e.classification != classification)


def apply_change(table: PatternTable, change: TableChange) -> PatternTable:
    """
    Interpret one TableChange against a table.

    This is the single replay point for queued work: deferred mutations
    carry a TableChange, and draining a queue folds them through here.
    """
    if not isinstance(change, TableChange):
        raise TypeError(f"Expected TableChange, got {type(change).__name__}")

    if change.op == ChangeOp.ADD:
        return add_entry(table, change.entry)
    if change.op == ChangeOp.REMOVE_EXACT:
        return remove_entry(table, change.entry)
    return remove_classification(table, change.classification)


def apply_changes(table: PatternTable, changes: Iterable[TableChange]) -> PatternTable:
    """Apply changes in order."""
    for change in changes:
        table = apply_change(table, change)
    return table
